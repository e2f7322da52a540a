from sqlalchemy import Column, DateTime, Integer, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import relationship
from core.setup import Base
from core.db import CreateDBSession
from error import ResourceNotFoundError


class Enrolment(Base):
    """
    Association table (User <-> Course). Tracks which students are enroled in which courses.
    """

    __tablename__ = "enrolments"

    id = Column(Integer, primary_key=True, index=True)
    student_id = Column(
        Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True
    )
    course_id = Column(
        Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True
    )
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    # Relationships
    student = relationship("User", lazy="joined")
    course = relationship("Course", lazy="joined")

    # Constraint: Ensures a student can only enrol in a specific course once
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", name="enrolments_unique"),
    )

    def __repr__(self):
        return f"<Enrolment {self.student_id} - {self.course_id}>"

    def delete(self) -> bool:
        with CreateDBSession() as session:
            session.query(Enrolment).filter(Enrolment.id == self.id).delete()
            session.commit()
            return True

    @staticmethod
    def delete_by_student_and_course(student_id: int, course_id: int) -> bool:
        with CreateDBSession() as session:
            deleted = (
                session.query(Enrolment)
                .filter(
                    Enrolment.student_id == student_id,
                    Enrolment.course_id == course_id,
                )
                .delete()
            )
            session.commit()
            return deleted > 0

    @staticmethod
    def get_enrolments_by_student(student_id: int) -> list["Enrolment"]:
        with CreateDBSession() as session:
            return (
                session.query(Enrolment)
                .filter(Enrolment.student_id == student_id)
                .order_by(Enrolment.created_at.desc(), Enrolment.id.desc())
                .all()
            )

    @staticmethod
    def get_enrolments_by_course(course_id: int) -> list["Enrolment"]:
        from model.users import User

        with CreateDBSession() as session:
            return (
                session.query(Enrolment)
                .join(User, User.id == Enrolment.student_id)
                .filter(Enrolment.course_id == course_id)
                .order_by(User.name.asc(), Enrolment.id.asc())
                .all()
            )

    @staticmethod
    def is_student_taught_by(student_id: int, teacher_id: int) -> bool:
        from model.courses import Course

        with CreateDBSession() as session:
            match = (
                session.query(Enrolment.id)
                .join(Course, Course.id == Enrolment.course_id)
                .filter(
                    Enrolment.student_id == student_id,
                    Course.teacher_id == teacher_id,
                )
                .first()
            )
            return match is not None

    @staticmethod
    def get_enrolment_by_id(enrolment_id: int) -> "Enrolment":
        with CreateDBSession() as session:
            return session.query(Enrolment).filter(Enrolment.id == enrolment_id).first()

    @staticmethod
    def validate_enrolment(enrolment_id: int) -> "Enrolment":
        enrolment = Enrolment.get_enrolment_by_id(enrolment_id)
        if not enrolment:
            raise ResourceNotFoundError(msg="Enrolment not found")
        return enrolment
