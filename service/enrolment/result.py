from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional
from util.enum import DenyReason

ENROLLED = "enrolled"


@dataclass(frozen=True)
class CourseSnapshot:
    """Capacity and direct prerequisites of a course, read once per request."""
    id: int
    enrollment_limit: int
    prerequisite_ids: frozenset = frozenset()


@dataclass(frozen=True)
class EnrolmentRecord:
    id: int
    student_id: int
    course_id: int
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class Verdict:
    """Admit/deny decision of an eligibility check."""
    reason: Optional[DenyReason] = None

    @property
    def admitted(self) -> bool:
        return self.reason is None

    @classmethod
    def admit(cls) -> "Verdict":
        return cls()

    @classmethod
    def deny(cls, reason: DenyReason) -> "Verdict":
        return cls(reason=reason)


@dataclass(frozen=True)
class EnrolmentOutcome:
    """Either the new enrolment or the reason one was not made."""
    student_id: int
    course_id: int
    enrolment: Optional[EnrolmentRecord] = None
    reason: Optional[DenyReason] = None

    @property
    def ok(self) -> bool:
        return self.enrolment is not None

    @property
    def status(self) -> str:
        return ENROLLED if self.ok else self.reason.value

    @classmethod
    def admitted(cls, record: EnrolmentRecord) -> "EnrolmentOutcome":
        return cls(
            student_id=record.student_id, course_id=record.course_id, enrolment=record
        )

    @classmethod
    def denied(
        cls, student_id: int, course_id: int, reason: DenyReason
    ) -> "EnrolmentOutcome":
        return cls(student_id=student_id, course_id=course_id, reason=reason)


@dataclass
class BulkEnrolmentResult:
    """Per-student outcomes of a batch, in the order the students were given.

    ``reason`` is only set when the batch could not run at all.
    """
    course_id: int
    results: list = field(default_factory=list)
    seats_left: int = 0
    reason: Optional[DenyReason] = None

    @property
    def found(self) -> bool:
        return self.reason is not DenyReason.course_not_found

    @property
    def enrolled_count(self) -> int:
        return sum(1 for outcome in self.results if outcome.ok)
