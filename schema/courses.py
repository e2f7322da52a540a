from pydantic import BaseModel, Field, field_validator
from typing import Optional
from datetime import datetime


def _not_blank(value: Optional[str]) -> Optional[str]:
    if value is None:
        return value
    if not value.strip():
        raise ValueError("cannot be empty")
    return value.strip()


class CourseIn(BaseModel):
    code: str
    name: str
    credits: int = Field(ge=0)
    enrollment_limit: int = Field(ge=0)
    prerequisite_ids: list[int] = []
    # Only honoured for admins; teachers always own what they create
    teacher_id: Optional[int] = None

    @field_validator("code", "name")
    def strip_text(cls, value):
        return _not_blank(value)


class CourseUpdate(BaseModel):
    code: Optional[str] = None
    name: Optional[str] = None
    credits: Optional[int] = Field(default=None, ge=0)
    enrollment_limit: Optional[int] = Field(default=None, ge=0)
    prerequisite_ids: Optional[list[int]] = None

    @field_validator("code", "name")
    def strip_text(cls, value):
        return _not_blank(value)


class CourseOut(BaseModel):
    id: int
    code: str
    name: str
    credits: int
    enrollment_limit: int
    teacher_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class CourseSummaryOut(CourseOut):
    available_seats: int


class PrerequisiteOut(BaseModel):
    id: int
    code: str
    name: str

    class Config:
        from_attributes = True


class CourseDetailOut(CourseOut):
    prerequisites: list[PrerequisiteOut] = []
