import logging
from typing import Iterable, Optional
from util.enum import DenyReason
from service.enrolment.eligibility import EligibilityEvaluator
from service.enrolment.result import BulkEnrolmentResult, EnrolmentOutcome
from service.enrolment.store import EnrolmentStore

logger = logging.getLogger(__name__)


class EnrolmentCoordinator:
    """Allocates course seats to students.

    The occupancy read before an insert is a fast path only. Two requests
    may both see a free seat; the store's unique (student, course) insert is
    what keeps a pair from being booked twice. Capacity is therefore
    best-effort when requests race.
    """

    def __init__(
        self, store: EnrolmentStore, evaluator: Optional[EligibilityEvaluator] = None
    ):
        self._store = store
        self._evaluator = evaluator or EligibilityEvaluator(store)

    def enroll(self, student_id: int, course_id: int) -> EnrolmentOutcome:
        course = self._store.get_course(course_id)
        if course is None:
            return self._deny(student_id, course_id, DenyReason.course_not_found)

        occupancy = self._store.count_active_enrollments(course_id)
        if occupancy >= course.enrollment_limit:
            return self._deny(student_id, course_id, DenyReason.capacity)

        verdict = self._evaluator.check(student_id, course)
        if not verdict.admitted:
            return self._deny(student_id, course_id, verdict.reason)

        record = self._store.insert_if_absent(student_id, course_id)
        if record is None:
            return self._deny(student_id, course_id, DenyReason.already_enrolled)

        logger.info(f"Enrolled student {student_id} in course {course_id}")
        return EnrolmentOutcome.admitted(record)

    def bulk_enroll(
        self, course_id: int, student_ids: Iterable[int]
    ) -> BulkEnrolmentResult:
        """Enrol students in the given order until the seats run out.

        Earlier students win the last seats. Every student gets exactly one
        outcome, and a full course does not stop the remaining students from
        being reported.
        """
        course = self._store.get_course(course_id)
        if course is None:
            logger.info(f"Bulk enrolment rejected, course {course_id} not found")
            return BulkEnrolmentResult(
                course_id=course_id, reason=DenyReason.course_not_found
            )

        occupancy = self._store.count_active_enrollments(course_id)
        seats_left = max(0, course.enrollment_limit - occupancy)
        prerequisite_ids = course.prerequisite_ids
        results = []

        for student_id in student_ids:
            if seats_left <= 0:
                results.append(
                    EnrolmentOutcome.denied(student_id, course_id, DenyReason.capacity)
                )
                continue

            if self._store.exists(student_id, course_id):
                results.append(
                    EnrolmentOutcome.denied(
                        student_id, course_id, DenyReason.already_enrolled
                    )
                )
                continue

            if not self._evaluator.prerequisites_met(student_id, prerequisite_ids):
                results.append(
                    EnrolmentOutcome.denied(
                        student_id, course_id, DenyReason.prerequisite_unmet
                    )
                )
                continue

            record = self._store.insert_if_absent(student_id, course_id)
            if record is None:
                # Lost a race with another request for the same pair
                results.append(
                    EnrolmentOutcome.denied(
                        student_id, course_id, DenyReason.already_enrolled
                    )
                )
                continue

            seats_left -= 1
            results.append(EnrolmentOutcome.admitted(record))

        result = BulkEnrolmentResult(
            course_id=course_id, results=results, seats_left=seats_left
        )
        logger.info(
            f"Bulk enrolment for course {course_id}: "
            f"{result.enrolled_count}/{len(results)} enrolled, {seats_left} seats left"
        )
        return result

    @staticmethod
    def _deny(student_id: int, course_id: int, reason: DenyReason) -> EnrolmentOutcome:
        logger.info(
            f"Enrolment of student {student_id} in course {course_id} denied: {reason.value}"
        )
        return EnrolmentOutcome.denied(student_id, course_id, reason)
