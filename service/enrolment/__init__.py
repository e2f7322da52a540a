from service.enrolment.result import (
    BulkEnrolmentResult,
    CourseSnapshot,
    EnrolmentOutcome,
    EnrolmentRecord,
    Verdict,
)
from service.enrolment.store import EnrolmentStore, SqlEnrolmentStore
from service.enrolment.eligibility import EligibilityEvaluator
from service.enrolment.coordinator import EnrolmentCoordinator

__all__ = [
    "BulkEnrolmentResult",
    "CourseSnapshot",
    "EligibilityEvaluator",
    "EnrolmentCoordinator",
    "EnrolmentOutcome",
    "EnrolmentRecord",
    "EnrolmentStore",
    "SqlEnrolmentStore",
    "Verdict",
]
