from api.v1.router.auth import router as auth
from api.v1.router.user import router as user
from api.v1.router.courses import router as courses
from api.v1.router.enrolment import router as enrolment
from api.v1.router.grades import router as grades

__all__ = ["auth", "user", "courses", "enrolment", "grades"]
