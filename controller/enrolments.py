from controller.courses import CourseOp
from core.setup import database
from model.enrolment import Enrolment
from model.grades import Grade
from model.users import User
from service.enrolment import (
    BulkEnrolmentResult,
    EnrolmentCoordinator,
    EnrolmentRecord,
    SqlEnrolmentStore,
)
from util.enum import DenyReason, UserRole
import error

# How each refusal surfaces to API clients
DENIAL_ERRORS = {
    DenyReason.course_not_found: (error.ResourceNotFoundError, "Course not found"),
    DenyReason.capacity: (error.ConflictError, "Course is at capacity"),
    DenyReason.prerequisite_unmet: (error.ConflictError, "Prerequisites not satisfied"),
    DenyReason.already_enrolled: (error.ConflictError, "Already enrolled"),
}


def get_coordinator() -> EnrolmentCoordinator:
    """Request-scoped coordinator wired to the application database."""
    return EnrolmentCoordinator(SqlEnrolmentStore(database.get_session()))


def raise_for_denial(reason: DenyReason) -> None:
    error_class, message = DENIAL_ERRORS[reason]
    raise error_class(msg=message)


class EnrolmentOp:
    @staticmethod
    def enroll_a_student(
        coordinator: EnrolmentCoordinator, student_id: int, course_id: int
    ) -> EnrolmentRecord:
        outcome = coordinator.enroll(student_id=student_id, course_id=course_id)
        if not outcome.ok:
            raise_for_denial(outcome.reason)
        CourseOp.invalidate_listing()
        return outcome.enrolment

    @staticmethod
    def bulk_enroll(
        coordinator: EnrolmentCoordinator,
        actor: User,
        course_id: int,
        student_ids: list[int],
    ) -> dict:
        CourseOp.ensure_can_manage(actor, course_id)

        students = {
            user.id
            for user in User.get_users_by_ids(list(set(student_ids)))
            if user.role == UserRole.student
        }
        unknown = [sid for sid in dict.fromkeys(student_ids) if sid not in students]
        if unknown:
            raise error.InvalidRequestError(
                msg=f"Unknown student ids: {', '.join(str(sid) for sid in unknown)}"
            )

        result: BulkEnrolmentResult = coordinator.bulk_enroll(course_id, student_ids)
        if not result.found:
            raise_for_denial(result.reason)
        if result.enrolled_count:
            CourseOp.invalidate_listing()

        return {
            "course_id": result.course_id,
            "seats_left": result.seats_left,
            "results": [
                {
                    "student_id": outcome.student_id,
                    "status": outcome.status,
                    "enrolment": outcome.enrolment,
                }
                for outcome in result.results
            ],
        }

    @staticmethod
    def get_courses_enroled_by_student(student_id: int) -> list[dict]:
        return [
            {
                "id": enrolment.id,
                "course_id": enrolment.course_id,
                "code": enrolment.course.code,
                "name": enrolment.course.name,
                "created_at": enrolment.created_at,
            }
            for enrolment in Enrolment.get_enrolments_by_student(student_id)
        ]

    @staticmethod
    def get_course_roster(actor: User, course_id: int) -> list[dict]:
        CourseOp.ensure_can_manage(actor, course_id)
        latest_grades = Grade.get_latest_by_course(course_id)
        roster = []
        for enrolment in Enrolment.get_enrolments_by_course(course_id):
            grade = latest_grades.get(enrolment.student_id)
            roster.append(
                {
                    "id": enrolment.id,
                    "student_id": enrolment.student_id,
                    "name": enrolment.student.name,
                    "email": enrolment.student.email,
                    "student_code": enrolment.student.student_code,
                    "latest_grade": grade.value if grade else None,
                }
            )
        return roster

    @staticmethod
    def unenroll_a_student(student_id: int, enrolment_id: int) -> bool:
        enrolment = Enrolment.validate_enrolment(enrolment_id)
        if enrolment.student_id != student_id:
            raise error.AuthorizationError(msg="Not your enrolment")
        enrolment.delete()
        CourseOp.invalidate_listing()
        return True

    @staticmethod
    def unenroll_from_course(student_id: int, course_id: int) -> bool:
        if not Enrolment.delete_by_student_and_course(student_id, course_id):
            raise error.ResourceNotFoundError(msg="Enrolment not found")
        CourseOp.invalidate_listing()
        return True
