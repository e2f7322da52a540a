from typing import Iterable, Optional
from sqlalchemy import (
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Integer,
    String,
    UniqueConstraint,
    func,
    or_,
)
from core.setup import Base
from core.db import CreateDBSession
from model.enrolment import Enrolment
from error import InvalidRequestError, ResourceNotFoundError


class CoursePrerequisite(Base):
    """
    Directed edge of the prerequisite graph: ``course_id`` requires ``prereq_id``.
    """

    __tablename__ = "course_prereqs"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    prereq_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("course_id", "prereq_id", name="course_prereqs_unique"),
        CheckConstraint("course_id <> prereq_id", name="course_prereqs_not_self"),
    )

    def __repr__(self):
        return f"<CoursePrerequisite {self.course_id} -> {self.prereq_id}>"


class Course(Base):
    """Represents a course a teacher offers."""

    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)
    credits = Column(Integer, nullable=False)
    enrollment_limit = Column(Integer, nullable=False)
    teacher_id = Column(
        Integer, ForeignKey("users.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    __table_args__ = (
        CheckConstraint("credits >= 0", name="courses_credits_non_negative"),
        CheckConstraint(
            "enrollment_limit >= 0", name="courses_enrollment_limit_non_negative"
        ),
    )

    def __repr__(self):
        return f"<Course {self.code}>"

    def __str__(self):
        return self.name

    @staticmethod
    def _replace_prerequisites(
        session, course_id: int, prerequisite_ids: Iterable[int]
    ) -> None:
        # Self references are dropped silently; the schema forbids them anyway
        wanted = sorted({int(pid) for pid in prerequisite_ids} - {course_id})
        session.query(CoursePrerequisite).filter(
            CoursePrerequisite.course_id == course_id
        ).delete()
        if not wanted:
            return
        found = {
            row.id for row in session.query(Course.id).filter(Course.id.in_(wanted))
        }
        if len(found) != len(wanted):
            raise InvalidRequestError(msg="One or more prerequisite ids do not exist")
        session.add_all(
            [CoursePrerequisite(course_id=course_id, prereq_id=pid) for pid in wanted]
        )

    @staticmethod
    def add(
        code: str,
        name: str,
        credits: int,
        enrollment_limit: int,
        teacher_id: int,
        prerequisite_ids: Iterable[int] = (),
    ) -> "Course":
        with CreateDBSession() as session:
            course = Course(
                code=code,
                name=name,
                credits=credits,
                enrollment_limit=enrollment_limit,
                teacher_id=teacher_id,
            )
            session.add(course)
            session.flush()
            Course._replace_prerequisites(session, course.id, prerequisite_ids)
            session.commit()
            session.refresh(course)
            return course

    @staticmethod
    def update(
        course_id: int, changes: dict, prerequisite_ids: Optional[Iterable[int]] = None
    ) -> "Course":
        with CreateDBSession() as session:
            course = session.query(Course).filter(Course.id == course_id).first()
            if not course:
                raise ResourceNotFoundError(msg="Course not found")
            for key, value in changes.items():
                setattr(course, key, value)
            if prerequisite_ids is not None:
                Course._replace_prerequisites(session, course_id, prerequisite_ids)
            session.commit()
            session.refresh(course)
            return course

    @staticmethod
    def delete_by_id(course_id: int) -> bool:
        with CreateDBSession() as session:
            deleted = session.query(Course).filter(Course.id == course_id).delete()
            session.commit()
            return deleted > 0

    @staticmethod
    def get_course_by_id(course_id: int) -> "Course":
        with CreateDBSession() as session:
            return session.query(Course).filter(Course.id == course_id).first()

    @staticmethod
    def get_course_by_code(code: str) -> "Course":
        with CreateDBSession() as session:
            return session.query(Course).filter(Course.code == code).first()

    @staticmethod
    def validate_course(course_id: int) -> "Course":
        course = Course.get_course_by_id(course_id)
        if not course:
            raise ResourceNotFoundError(msg="Course not found")
        return course

    @staticmethod
    def get_prerequisites(course_id: int) -> list["Course"]:
        with CreateDBSession() as session:
            return (
                session.query(Course)
                .join(CoursePrerequisite, CoursePrerequisite.prereq_id == Course.id)
                .filter(CoursePrerequisite.course_id == course_id)
                .order_by(Course.code)
                .all()
            )

    @staticmethod
    def search(query: str = "") -> list[tuple["Course", int]]:
        """Courses matching ``query`` on code or name, each with its occupancy."""
        with CreateDBSession() as session:
            enrolled = (
                session.query(
                    Enrolment.course_id, func.count(Enrolment.id).label("count")
                )
                .group_by(Enrolment.course_id)
                .subquery()
            )
            courses = session.query(
                Course, func.coalesce(enrolled.c.count, 0)
            ).outerjoin(enrolled, enrolled.c.course_id == Course.id)
            if query:
                like = f"%{query}%"
                courses = courses.filter(
                    or_(Course.code.ilike(like), Course.name.ilike(like))
                )
            return [
                (course, count) for course, count in courses.order_by(Course.code).all()
            ]
