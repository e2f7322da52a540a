from typing import Iterable
from util.enum import DenyReason
from service.enrolment.result import CourseSnapshot, Verdict
from service.enrolment.store import EnrolmentStore


class EligibilityEvaluator:
    """Decides whether a student satisfies a course's prerequisites.

    A prerequisite is satisfied when the student's latest grade for it exists
    and is a pass. Every direct prerequisite must be satisfied; the verdict
    does not say which one failed. Capacity and duplicate enrolments are the
    coordinator's concern, and nothing here writes to storage.
    """

    def __init__(self, store: EnrolmentStore):
        self._store = store

    def evaluate(self, student_id: int, course_id: int) -> Verdict:
        course = self._store.get_course(course_id)
        if course is None:
            return Verdict.deny(DenyReason.course_not_found)
        return self.check(student_id, course)

    def check(self, student_id: int, course: CourseSnapshot) -> Verdict:
        if self.prerequisites_met(student_id, course.prerequisite_ids):
            return Verdict.admit()
        return Verdict.deny(DenyReason.prerequisite_unmet)

    def prerequisites_met(self, student_id: int, prerequisite_ids: Iterable[int]) -> bool:
        return all(
            self._is_satisfied(student_id, prerequisite_id)
            for prerequisite_id in sorted(prerequisite_ids)
        )

    def _is_satisfied(self, student_id: int, prerequisite_id: int) -> bool:
        grade = self._store.get_latest_grade(student_id, prerequisite_id)
        return grade is not None and grade.is_passing
