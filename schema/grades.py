from pydantic import BaseModel, field_validator
from typing import Optional
from datetime import datetime
from util.enum import GradeLetter


class GradeIn(BaseModel):
    student_id: int
    course_id: int
    value: GradeLetter

    @field_validator("value", mode="before")
    def accept_labels(cls, value):
        # Accept both wire names ("A_PLUS") and printed labels ("A+")
        if isinstance(value, str):
            return GradeLetter.from_label(value.strip())
        return value


class GradeOut(BaseModel):
    id: int
    student_id: int
    course_id: int
    value: GradeLetter
    assigned_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class GradeHistoryOut(BaseModel):
    id: int
    course_id: int
    code: str
    name: str
    grade: GradeLetter
    assigned_at: Optional[datetime] = None


class CourseGradeOut(BaseModel):
    id: int
    student_id: int
    student_name: str
    email: str
    grade: GradeLetter
    assigned_at: Optional[datetime] = None


class GpaOut(BaseModel):
    gpa: Optional[float] = None
    courses: int
