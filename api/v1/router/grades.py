from fastapi import APIRouter, Depends
from controller.grades import GradeOp
from controller.users import UserOp
from schema.grades import CourseGradeOut, GpaOut, GradeHistoryOut, GradeIn, GradeOut
from service.auth import verify_access_token
from util.enum import UserRole

router = APIRouter(tags=["Grades"])


@router.post("/grades", response_model=GradeOut, status_code=201)
def assign_grade(
    data: GradeIn,
    auth_data: dict = Depends(verify_access_token),
):
    """
    Record a grade for a student
    - Grades are never overwritten; a retake adds a new record
    """
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return GradeOp.assign_grade(actor, data)


@router.get("/grades/me", response_model=list[GradeHistoryOut])
def get_my_grades(auth_data: dict = Depends(verify_access_token)):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    return GradeOp.get_history(student.id)


@router.get("/grades/me/current", response_model=list[GradeHistoryOut])
def get_my_current_grades(auth_data: dict = Depends(verify_access_token)):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    return GradeOp.get_current(student.id)


@router.get("/grades/me/gpa", response_model=GpaOut)
def get_my_gpa(auth_data: dict = Depends(verify_access_token)):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    return GradeOp.get_gpa(student.id)


@router.get("/grades/course/{course_id}", response_model=list[CourseGradeOut])
def get_course_grades(
    course_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return GradeOp.get_course_history(actor, course_id)
