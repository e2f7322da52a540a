import enum


class UserRole(str, enum.Enum):
    """Defines the role of a user in the system."""

    student = "STUDENT"
    teacher = "TEACHER"
    admin = "ADMIN"


class GradeLetter(str, enum.Enum):
    """Letter grade scale, ordered from highest to lowest."""

    A_PLUS = "A_PLUS"
    A = "A"
    A_MINUS = "A_MINUS"
    B_PLUS = "B_PLUS"
    B = "B"
    B_MINUS = "B_MINUS"
    C_PLUS = "C_PLUS"
    C = "C"
    C_MINUS = "C_MINUS"
    D = "D"
    F = "F"

    @property
    def label(self) -> str:
        return self.value.replace("_PLUS", "+").replace("_MINUS", "-")

    @property
    def points(self) -> float:
        return GRADE_POINTS[self]

    @property
    def is_passing(self) -> bool:
        # Anything above the bottom of the scale counts as a pass
        return self is not GradeLetter.F

    @classmethod
    def from_label(cls, label: str) -> "GradeLetter":
        for grade in cls:
            if label in (grade.value, grade.label):
                return grade
        raise ValueError(f"Invalid grade value: {label}")


GRADE_POINTS = {
    GradeLetter.A_PLUS: 4.3,
    GradeLetter.A: 4.0,
    GradeLetter.A_MINUS: 3.7,
    GradeLetter.B_PLUS: 3.3,
    GradeLetter.B: 3.0,
    GradeLetter.B_MINUS: 2.7,
    GradeLetter.C_PLUS: 2.3,
    GradeLetter.C: 2.0,
    GradeLetter.C_MINUS: 1.7,
    GradeLetter.D: 1.0,
    GradeLetter.F: 0.0,
}


class DenyReason(str, enum.Enum):
    """Business-rule reasons an enrolment request is turned down."""

    course_not_found = "course_not_found"
    capacity = "capacity"
    prerequisite_unmet = "prerequisite_unmet"
    already_enrolled = "already_enrolled"
