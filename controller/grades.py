from typing import Optional
from controller.courses import CourseOp
from model.grades import Grade
from model.users import User
from schema.grades import GradeIn
from util.enum import UserRole
import error


class GradeOp:
    @staticmethod
    def assign_grade(actor: User, grade_data: GradeIn) -> Grade:
        CourseOp.ensure_can_manage(actor, grade_data.course_id)
        student = User.get_user_by_id(grade_data.student_id)
        if not student or student.role != UserRole.student:
            raise error.ResourceNotFoundError(msg="Student not found")
        return Grade.add(
            student_id=student.id,
            course_id=grade_data.course_id,
            value=grade_data.value,
        )

    @staticmethod
    def get_history(student_id: int) -> list[dict]:
        return [
            GradeOp._course_fields(grade)
            for grade in Grade.get_history_by_student(student_id)
        ]

    @staticmethod
    def get_current(student_id: int) -> list[dict]:
        return [
            GradeOp._course_fields(grade)
            for grade in Grade.get_latest_by_student(student_id)
        ]

    @staticmethod
    def get_gpa(student_id: int) -> dict:
        """Unweighted mean of grade points over each course's latest grade"""
        latest = Grade.get_latest_by_student(student_id)
        if not latest:
            return {"gpa": None, "courses": 0}
        points = sum(grade.value.points for grade in latest)
        return {"gpa": round(points / len(latest), 2), "courses": len(latest)}

    @staticmethod
    def credit_weighted_gpa(student_id: int) -> Optional[float]:
        total_points = 0.0
        total_credits = 0
        for grade in Grade.get_latest_by_student(student_id):
            total_points += grade.value.points * grade.course.credits
            total_credits += grade.course.credits
        if total_credits == 0:
            return None
        return round(total_points / total_credits, 2)

    @staticmethod
    def get_course_history(actor: User, course_id: int) -> list[dict]:
        CourseOp.ensure_can_manage(actor, course_id)
        return [
            {
                "id": grade.id,
                "student_id": grade.student_id,
                "student_name": grade.student.name,
                "email": grade.student.email,
                "grade": grade.value,
                "assigned_at": grade.assigned_at,
            }
            for grade in Grade.get_history_by_course(course_id)
        ]

    @staticmethod
    def _course_fields(grade: Grade) -> dict:
        return {
            "id": grade.id,
            "course_id": grade.course_id,
            "code": grade.course.code,
            "name": grade.course.name,
            "grade": grade.value,
            "assigned_at": grade.assigned_at,
        }
