from model.courses import Course
from model.users import User
from schema.courses import CourseIn, CourseUpdate, CourseSummaryOut
from service.redis import Redis
from util.enum import UserRole
from util.serialize import serialize_data
import error

redis_instance = Redis()

COURSE_LISTING_CACHE_KEY = "all_courses"
COURSE_LISTING_CACHE_SECONDS = 1800


class CourseOp:
    @staticmethod
    def invalidate_listing() -> None:
        """Seat counts changed or the catalog was edited"""
        redis_instance.delete(COURSE_LISTING_CACHE_KEY)

    @staticmethod
    def search(query: str = "") -> list[dict]:
        query = (query or "").strip()
        if not query:
            cached_courses = redis_instance.get_json(COURSE_LISTING_CACHE_KEY)
            if cached_courses:
                return cached_courses

        courses = [
            CourseSummaryOut(
                **CourseOp._fields(course),
                available_seats=max(course.enrollment_limit - enrolled, 0),
            ).model_dump()
            for course, enrolled in Course.search(query)
        ]
        if not query:
            redis_instance.set_json(
                COURSE_LISTING_CACHE_KEY,
                serialize_data(courses),
                expiry=COURSE_LISTING_CACHE_SECONDS,
            )
        return courses

    @staticmethod
    def get_course_detail(course_id: int) -> dict:
        course = Course.validate_course(course_id)
        return {
            **CourseOp._fields(course),
            "prerequisites": Course.get_prerequisites(course_id),
        }

    @staticmethod
    def ensure_can_manage(actor: User, course_id: int) -> Course:
        """Teachers manage only their own courses; admins manage all."""
        course = Course.validate_course(course_id)
        if actor.role == UserRole.teacher and course.teacher_id != actor.id:
            raise error.AuthorizationError(msg="Not your course")
        return course

    @staticmethod
    def add(actor: User, course_data: CourseIn) -> Course:
        teacher_id = actor.id
        if actor.role == UserRole.admin and course_data.teacher_id is not None:
            teacher = User.get_user_by_id(course_data.teacher_id)
            if not teacher or teacher.role != UserRole.teacher:
                raise error.InvalidRequestError(msg="teacher_id must refer to a teacher")
            teacher_id = teacher.id

        if Course.get_course_by_code(course_data.code):
            raise error.ConflictError(msg="Course code already exists")

        course = Course.add(
            code=course_data.code,
            name=course_data.name,
            credits=course_data.credits,
            enrollment_limit=course_data.enrollment_limit,
            teacher_id=teacher_id,
            prerequisite_ids=course_data.prerequisite_ids,
        )
        CourseOp.invalidate_listing()
        return course

    @staticmethod
    def update(actor: User, course_id: int, course_data: CourseUpdate) -> Course:
        CourseOp.ensure_can_manage(actor, course_id)
        changes = {
            key: value
            for key, value in course_data.model_dump(
                exclude_unset=True, exclude={"prerequisite_ids"}
            ).items()
            if value is not None
        }
        if "code" in changes:
            existing = Course.get_course_by_code(changes["code"])
            if existing and existing.id != course_id:
                raise error.ConflictError(msg="Course code already exists")

        course = Course.update(
            course_id, changes, prerequisite_ids=course_data.prerequisite_ids
        )
        CourseOp.invalidate_listing()
        return course

    @staticmethod
    def delete(actor: User, course_id: int) -> bool:
        CourseOp.ensure_can_manage(actor, course_id)
        deleted = Course.delete_by_id(course_id)
        CourseOp.invalidate_listing()
        return deleted

    @staticmethod
    def _fields(course: Course) -> dict:
        return {
            "id": course.id,
            "code": course.code,
            "name": course.name,
            "credits": course.credits,
            "enrollment_limit": course.enrollment_limit,
            "teacher_id": course.teacher_id,
            "created_at": course.created_at,
            "updated_at": course.updated_at,
        }
