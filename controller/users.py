import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from controller.courses import CourseOp
from model.users import User, pwd_hasher
from model.enrolment import Enrolment
from schema.users import SignUp, SignIn, UserCreate, UserUpdate
from service.auth import TokenManager
import error
from util.enum import UserRole

logger = logging.getLogger(__name__)

NOT_ALLOWED = "You are not allowed to perform this action"


class UserOp:
    @staticmethod
    def _ensure_unique(
        email: Optional[str], student_code: Optional[str], user_id: Optional[int] = None
    ) -> None:
        if email:
            existing = User.get_user_by_email(email)
            if existing and existing.id != user_id:
                raise error.ConflictError(msg="Email already exists")
        if student_code:
            existing = User.get_user_by_student_code(student_code)
            if existing and existing.id != user_id:
                raise error.ConflictError(msg="Student code already exists")

    @staticmethod
    def issue_token(user: User) -> str:
        return TokenManager.create_access_token(data={"user_id": user.id})

    @staticmethod
    def register(user_details: SignUp) -> tuple[User, str]:
        """Student self-registration"""
        UserOp._ensure_unique(user_details.email, user_details.student_code)
        user = User.add(
            role=UserRole.student,
            name=user_details.name,
            email=user_details.email,
            password=user_details.password,
            student_code=user_details.student_code,
            major=user_details.major,
        )
        return user, UserOp.issue_token(user)

    @staticmethod
    def login(user_details: SignIn) -> tuple[User, str]:
        user = User.get_user_by_email(user_details.email)
        if not user:
            raise error.AuthenticationError(msg="Invalid credentials")
        if not User.verify_password(user_details.password, user.hashed_password):
            raise error.AuthenticationError(msg="Invalid credentials")
        return user, UserOp.issue_token(user)

    @staticmethod
    def get_user_by_id(user_id: int) -> User:
        user = User.get_user_by_id(user_id)
        if not user:
            raise error.AuthenticationError(msg="Invalid Request")
        return user

    @staticmethod
    def ensure_role(user_id: int, *roles: UserRole) -> User:
        """Return the acting user, or refuse when their role is not listed."""
        user = UserOp.get_user_by_id(user_id=user_id)
        if user.role not in roles:
            raise error.AuthorizationError(msg=NOT_ALLOWED)
        return user

    @staticmethod
    def create_user(data: UserCreate) -> User:
        UserOp._ensure_unique(data.email, data.student_code)
        return User.add(
            role=data.role,
            name=data.name,
            email=data.email,
            password=data.password,
            student_code=data.student_code,
            major=data.major,
        )

    @staticmethod
    def search_users(actor: User, query: str = "") -> list[User]:
        query = (query or "").strip()
        if actor.role == UserRole.admin:
            return User.search(query)
        if actor.role == UserRole.teacher:
            return User.search(query, role=UserRole.student)
        raise error.AuthorizationError(msg=NOT_ALLOWED)

    @staticmethod
    def get_user_detail(actor: User, user_id: int) -> dict:
        from controller.grades import GradeOp

        user = User.validate_user_id(user_id)
        if actor.role == UserRole.teacher:
            # Teachers may only look at students sitting one of their courses
            if user.role != UserRole.student or not Enrolment.is_student_taught_by(
                student_id=user.id, teacher_id=actor.id
            ):
                raise error.AuthorizationError(
                    msg="Not authorized to view this student"
                )

        gpa = None
        if user.role == UserRole.student:
            gpa = GradeOp.credit_weighted_gpa(user.id)
        return {**_user_fields(user), "gpa": gpa}

    @staticmethod
    def update_user(user_id: int, data: UserUpdate) -> User:
        user = User.validate_user_id(user_id)
        changes = data.model_dump(exclude_unset=True)
        if not changes:
            raise error.InvalidRequestError(msg="No fields to update")

        UserOp._ensure_unique(
            changes.get("email"), changes.get("student_code"), user_id=user.id
        )
        password = changes.pop("password", None)
        if password:
            changes["hashed_password"] = pwd_hasher.hash(password)
        if "student_code" in changes:
            changes["student_code"] = changes["student_code"] or None
        # role/name/email cannot be cleared
        for field in ("role", "name", "email"):
            if field in changes and not changes[field]:
                changes.pop(field)
        return user.update(**changes)

    @staticmethod
    def delete_user(user_id: int) -> bool:
        user = User.validate_user_id(user_id)
        try:
            user.delete()
        except IntegrityError:
            raise error.ConflictError(
                msg="User has related records; reassign or delete dependents first"
            )
        # Cascaded enrolments free seats in the cached listing
        CourseOp.invalidate_listing()
        return True

    @staticmethod
    def ensure_admin(email: str, password: str) -> Optional[User]:
        """Provision the first administrator when the email is unused."""
        if not email or not password or User.get_user_by_email(email):
            return None
        admin = User.add(
            role=UserRole.admin, name="Administrator", email=email, password=password
        )
        logger.info(f"Provisioned administrator account {email}")
        return admin


def _user_fields(user: User) -> dict:
    return {
        "id": user.id,
        "role": user.role,
        "name": user.name,
        "email": user.email,
        "student_code": user.student_code,
        "major": user.major,
        "created_at": user.created_at,
        "updated_at": user.updated_at,
    }
