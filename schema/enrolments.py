from pydantic import BaseModel
from typing import Optional
from datetime import datetime
from util.enum import GradeLetter


class EnrolmentIn(BaseModel):
    course_id: int


class EnrolmentOut(BaseModel):
    id: int
    student_id: int
    course_id: int
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class MyEnrolmentOut(BaseModel):
    id: int
    course_id: int
    code: str
    name: str
    created_at: Optional[datetime] = None


class RosterEntryOut(BaseModel):
    id: int
    student_id: int
    name: str
    email: str
    student_code: Optional[str] = None
    latest_grade: Optional[GradeLetter] = None


class BulkEnrolmentIn(BaseModel):
    student_ids: list[int]


class BulkEnrolmentEntryOut(BaseModel):
    student_id: int
    status: str
    enrolment: Optional[EnrolmentOut] = None


class BulkEnrolmentOut(BaseModel):
    course_id: int
    results: list[BulkEnrolmentEntryOut]
    seats_left: int
