import itertools
import os
import tempfile

# Settings are read at import time, so the environment must be ready first
_DB_PATH = os.path.join(tempfile.gettempdir(), f"coursehub-test-{os.getpid()}.db")
os.environ["DATABASE_URL"] = f"sqlite:///{_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["REDIS_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["TESTING"] = "true"
os.environ["ADMIN_EMAIL"] = ""
os.environ["ADMIN_PASSWORD"] = ""

import pytest
from fastapi.testclient import TestClient

from main import app
from core.db import CreateDBSession
from core.setup import Base, database
from controller.users import UserOp
from model.courses import Course
from model.grades import Grade
from model.users import User
from service.enrolment import EnrolmentCoordinator, SqlEnrolmentStore
from util.enum import GradeLetter, UserRole

API = "/api/v1"
PASSWORD = "correct-horse"


@pytest.fixture(autouse=True)
def reset_database():
    engine = database.get_engine
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(scope="session", autouse=True)
def remove_database_file():
    yield
    database.get_engine.dispose()
    if os.path.exists(_DB_PATH):
        os.remove(_DB_PATH)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_user():
    counter = itertools.count(1)

    def _make(role=UserRole.student, name=None, major=None, student_code=None):
        n = next(counter)
        if role == UserRole.student and student_code is None:
            student_code = f"S{1000 + n}"
        return User.add(
            role=role,
            name=name or f"{role.value.title()} {n}",
            email=f"{role.value.lower()}{n}@coursehub.io",
            password=PASSWORD,
            student_code=student_code,
            major=major,
        )

    return _make


@pytest.fixture
def student(make_user):
    return make_user(UserRole.student, name="Regina Student", major="CS")


@pytest.fixture
def teacher(make_user):
    return make_user(UserRole.teacher, name="Daaimah Teacher")


@pytest.fixture
def admin(make_user):
    return make_user(UserRole.admin, name="Admin User")


@pytest.fixture
def make_course(teacher):
    counter = itertools.count(101)

    def _make(code=None, limit=30, credits=3, prerequisites=(), owner=None):
        code = code or f"CS{next(counter)}"
        return Course.add(
            code=code,
            name=f"Course {code}",
            credits=credits,
            enrollment_limit=limit,
            teacher_id=(owner or teacher).id,
            prerequisite_ids=[course.id for course in prerequisites],
        )

    return _make


@pytest.fixture
def give_grade():
    def _give(student, course, value: GradeLetter, assigned_at=None) -> Grade:
        with CreateDBSession() as session:
            grade = Grade(student_id=student.id, course_id=course.id, value=value)
            if assigned_at is not None:
                grade.assigned_at = assigned_at
            session.add(grade)
            session.commit()
            session.refresh(grade)
            return grade

    return _give


@pytest.fixture
def store():
    return SqlEnrolmentStore(database.get_session())


@pytest.fixture
def coordinator(store):
    return EnrolmentCoordinator(store)


@pytest.fixture
def auth_headers():
    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {UserOp.issue_token(user)}"}

    return _headers
