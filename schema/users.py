from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional
from datetime import datetime
from util.enum import UserRole


class SignIn(BaseModel):
    email: str
    password: str


class SignUp(BaseModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str = Field(min_length=1)
    student_code: Optional[str] = None
    major: Optional[str] = None

    @field_validator("name")
    def strip_name(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("name is required")
        return value.strip()


class UserCreate(SignUp):
    role: UserRole

    @model_validator(mode="after")
    def require_student_code(self):
        if self.role == UserRole.student and not self.student_code:
            raise ValueError("student_code is required for STUDENT")
        return self


class UserUpdate(BaseModel):
    role: Optional[UserRole] = None
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None
    student_code: Optional[str] = None
    major: Optional[str] = None


class UserOut(BaseModel):
    id: int
    role: UserRole
    name: str
    email: str
    student_code: Optional[str] = None
    major: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class UserDetailOut(UserOut):
    gpa: Optional[float] = None


class SignInOut(BaseModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"
