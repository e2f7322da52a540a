from fastapi import APIRouter, Depends
from controller.enrolments import EnrolmentOp, get_coordinator
from controller.users import UserOp
from schema import SuccessOut
from schema.enrolments import (
    BulkEnrolmentIn,
    BulkEnrolmentOut,
    EnrolmentIn,
    EnrolmentOut,
    MyEnrolmentOut,
    RosterEntryOut,
)
from service.auth import verify_access_token
from service.enrolment import EnrolmentCoordinator
from util.enum import UserRole

router = APIRouter(tags=["Enrolments"])


@router.post("/enrolments", response_model=EnrolmentOut, status_code=201)
def enroll_a_student(
    data: EnrolmentIn,
    auth_data: dict = Depends(verify_access_token),
    coordinator: EnrolmentCoordinator = Depends(get_coordinator),
):
    """
    Enrol the signed-in student in a course
    - 404 when the course does not exist
    - 409 when the course is full, prerequisites are unmet or the student is already enroled
    """
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    return EnrolmentOp.enroll_a_student(
        coordinator, student_id=student.id, course_id=data.course_id
    )


@router.post("/enrolments/course/{course_id}/bulk", response_model=BulkEnrolmentOut)
def bulk_enroll(
    course_id: int,
    data: BulkEnrolmentIn,
    auth_data: dict = Depends(verify_access_token),
    coordinator: EnrolmentCoordinator = Depends(get_coordinator),
):
    """
    Enrol a list of students in one course
    - Students are seated in the order given; earlier ones win the last seats
    - Every student gets a status: enrolled, capacity, already_enrolled or prerequisite_unmet
    """
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return EnrolmentOp.bulk_enroll(coordinator, actor, course_id, data.student_ids)


@router.get("/enrolments/me", response_model=list[MyEnrolmentOut])
def get_courses_enrolled_by_student(
    auth_data: dict = Depends(verify_access_token),
):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    return EnrolmentOp.get_courses_enroled_by_student(student_id=student.id)


@router.get("/enrolments/course/{course_id}", response_model=list[RosterEntryOut])
def get_course_roster(
    course_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return EnrolmentOp.get_course_roster(actor, course_id)


@router.delete("/enrolments/by-course/{course_id}", response_model=SuccessOut)
def unenrol_from_course(
    course_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    EnrolmentOp.unenroll_from_course(student_id=student.id, course_id=course_id)
    return {"message": "Unenrolled successfully"}


@router.delete("/enrolments/{enrolment_id}", response_model=SuccessOut)
def unenrol_a_student(
    enrolment_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    student = UserOp.ensure_role(auth_data.get("user_id"), UserRole.student)
    EnrolmentOp.unenroll_a_student(student_id=student.id, enrolment_id=enrolment_id)
    return {"message": "Unenrolled successfully"}
