from abc import ABC, abstractmethod
from typing import Optional
from sqlalchemy import func
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker
from core.db import CreateDBSession
from model.courses import Course, CoursePrerequisite
from model.enrolment import Enrolment
from model.grades import Grade
from util.enum import GradeLetter
from service.enrolment.result import CourseSnapshot, EnrolmentRecord

# Dialects that can skip a conflicting row and report what was inserted in one statement
_CONFLICT_FREE_INSERTS = {
    "postgresql": postgresql_insert,
    "sqlite": sqlite_insert,
}


class EnrolmentStore(ABC):
    """Storage capabilities the enrolment engine depends on."""

    @abstractmethod
    def get_course(self, course_id: int) -> Optional[CourseSnapshot]:
        pass

    @abstractmethod
    def count_active_enrollments(self, course_id: int) -> int:
        pass

    @abstractmethod
    def get_latest_grade(self, student_id: int, course_id: int) -> Optional[GradeLetter]:
        pass

    @abstractmethod
    def insert_if_absent(
        self, student_id: int, course_id: int
    ) -> Optional[EnrolmentRecord]:
        """Insert the pair atomically; ``None`` when it already exists."""

    @abstractmethod
    def exists(self, student_id: int, course_id: int) -> bool:
        pass


class SqlEnrolmentStore(EnrolmentStore):
    """EnrolmentStore backed by the relational schema.

    Every call runs in its own session from the factory it was built with.
    Database faults are not caught here.
    """

    def __init__(self, session_factory: sessionmaker):
        self._session_factory = session_factory

    def _session(self) -> CreateDBSession:
        return CreateDBSession(self._session_factory)

    def get_course(self, course_id: int) -> Optional[CourseSnapshot]:
        with self._session() as session:
            course = (
                session.query(Course.id, Course.enrollment_limit)
                .filter(Course.id == course_id)
                .first()
            )
            if course is None:
                return None
            prerequisites = (
                session.query(CoursePrerequisite.prereq_id)
                .filter(CoursePrerequisite.course_id == course_id)
                .all()
            )
            return CourseSnapshot(
                id=course.id,
                enrollment_limit=course.enrollment_limit,
                prerequisite_ids=frozenset(row.prereq_id for row in prerequisites),
            )

    def count_active_enrollments(self, course_id: int) -> int:
        with self._session() as session:
            return (
                session.query(func.count(Enrolment.id))
                .filter(Enrolment.course_id == course_id)
                .scalar()
            )

    def get_latest_grade(self, student_id: int, course_id: int) -> Optional[GradeLetter]:
        with self._session() as session:
            row = (
                session.query(Grade.value)
                .filter(Grade.student_id == student_id, Grade.course_id == course_id)
                .order_by(*Grade.latest_first())
                .first()
            )
            return row.value if row else None

    def exists(self, student_id: int, course_id: int) -> bool:
        with self._session() as session:
            return self._exists(session, student_id, course_id)

    def insert_if_absent(
        self, student_id: int, course_id: int
    ) -> Optional[EnrolmentRecord]:
        with self._session() as session:
            insert = _CONFLICT_FREE_INSERTS.get(session.get_bind().dialect.name)
            if insert is None:
                return self._insert_or_probe(session, student_id, course_id)

            table = Enrolment.__table__
            statement = (
                insert(table)
                .values(student_id=student_id, course_id=course_id)
                .on_conflict_do_nothing(index_elements=["student_id", "course_id"])
                .returning(table.c.id, table.c.created_at)
            )
            row = session.execute(statement).first()
            session.commit()
            if row is None:
                return None
            return EnrolmentRecord(
                id=row.id,
                student_id=student_id,
                course_id=course_id,
                created_at=row.created_at,
            )

    def _insert_or_probe(
        self, session: Session, student_id: int, course_id: int
    ) -> Optional[EnrolmentRecord]:
        enrolment = Enrolment(student_id=student_id, course_id=course_id)
        session.add(enrolment)
        try:
            session.commit()
        except IntegrityError:
            session.rollback()
            # Only the pair's own uniqueness counts as "already there"
            if self._exists(session, student_id, course_id):
                return None
            raise
        session.refresh(enrolment)
        return EnrolmentRecord(
            id=enrolment.id,
            student_id=student_id,
            course_id=course_id,
            created_at=enrolment.created_at,
        )

    @staticmethod
    def _exists(session: Session, student_id: int, course_id: int) -> bool:
        match = (
            session.query(Enrolment.id)
            .filter(Enrolment.student_id == student_id, Enrolment.course_id == course_id)
            .first()
        )
        return match is not None
