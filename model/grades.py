from sqlalchemy import Column, DateTime, Enum, ForeignKey, Integer, func
from sqlalchemy.orm import relationship
from core.setup import Base
from core.db import CreateDBSession
from util.enum import GradeLetter


class Grade(Base):
    """
    Append-only grade history. A student may hold several records for the
    same course (retakes); the newest one is the one that counts.
    """

    __tablename__ = "grades"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )
    value = Column(Enum(GradeLetter), nullable=False)
    assigned_at = Column(
        DateTime(timezone=True), server_default=func.now(), nullable=False, index=True
    )

    student = relationship("User", lazy="joined")
    course = relationship("Course", lazy="joined")

    def __repr__(self):
        return f"<Grade {self.student_id} - {self.course_id}: {self.value}>"

    @staticmethod
    def latest_first() -> tuple:
        # Equal timestamps fall back to the most recently inserted record
        return Grade.assigned_at.desc(), Grade.id.desc()

    @staticmethod
    def add(student_id: int, course_id: int, value: GradeLetter) -> "Grade":
        with CreateDBSession() as session:
            grade = Grade(student_id=student_id, course_id=course_id, value=value)
            session.add(grade)
            session.commit()
            session.refresh(grade)
            return grade

    @staticmethod
    def get_history_by_student(student_id: int) -> list["Grade"]:
        with CreateDBSession() as session:
            return (
                session.query(Grade)
                .filter(Grade.student_id == student_id)
                .order_by(*Grade.latest_first())
                .all()
            )

    @staticmethod
    def get_history_by_course(course_id: int) -> list["Grade"]:
        with CreateDBSession() as session:
            return (
                session.query(Grade)
                .filter(Grade.course_id == course_id)
                .order_by(*Grade.latest_first())
                .all()
            )

    @staticmethod
    def get_latest_by_student(student_id: int) -> list["Grade"]:
        """Latest grade per course for one student, ordered by course id."""
        latest: dict[int, Grade] = {}
        for grade in Grade.get_history_by_student(student_id):
            latest.setdefault(grade.course_id, grade)
        return [latest[course_id] for course_id in sorted(latest)]

    @staticmethod
    def get_latest_by_course(course_id: int) -> dict[int, "Grade"]:
        """Latest grade per student in one course, keyed by student id."""
        latest: dict[int, Grade] = {}
        for grade in Grade.get_history_by_course(course_id):
            latest.setdefault(grade.student_id, grade)
        return latest
