from typing import Optional
from fastapi import APIRouter, Depends
from controller.courses import CourseOp
from controller.users import UserOp
from schema import SuccessOut
from schema.courses import (
    CourseDetailOut,
    CourseIn,
    CourseOut,
    CourseSummaryOut,
    CourseUpdate,
)
from service.auth import verify_access_token
from util.enum import UserRole

router = APIRouter(tags=["Courses"])


@router.get("/courses", response_model=list[CourseSummaryOut])
def search_courses(query: Optional[str] = None):
    """
    Browse the catalog
    - Optional case-insensitive match on course code or name
    - Each course reports its remaining seats
    """
    return CourseOp.search(query or "")


@router.get("/courses/{course_id}", response_model=CourseDetailOut)
def get_course(course_id: int):
    return CourseOp.get_course_detail(course_id)


@router.post("/courses", response_model=CourseOut, status_code=201)
def add_course(
    data: CourseIn,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return CourseOp.add(actor, data)


@router.put("/courses/{course_id}", response_model=CourseOut)
def update_course(
    course_id: int,
    data: CourseUpdate,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    return CourseOp.update(actor, course_id, data)


@router.delete("/courses/{course_id}", response_model=SuccessOut)
def delete_course(
    course_id: int,
    auth_data: dict = Depends(verify_access_token),
):
    actor = UserOp.ensure_role(
        auth_data.get("user_id"), UserRole.teacher, UserRole.admin
    )
    CourseOp.delete(actor, course_id)
    return {"message": "Course deleted successfully"}
