import json
from unittest.mock import MagicMock

import pytest
import redis

from conftest import API
from controller.courses import COURSE_LISTING_CACHE_KEY, CourseOp
from service.redis import Redis


@pytest.fixture
def redis_client(monkeypatch):
    client = MagicMock()
    client.get.return_value = None
    monkeypatch.setattr(Redis(), "redis_client", client)
    return client


def test_disabled_cache_is_a_miss():
    cache = Redis()

    assert not cache.enabled
    assert cache.get_json("anything") is None
    assert cache.set_json("anything", {"a": 1}) is False


def test_redis_failures_degrade_to_a_miss(redis_client):
    redis_client.get.side_effect = redis.ConnectionError("down")
    redis_client.set.side_effect = redis.ConnectionError("down")

    assert Redis().get_json("courses") is None
    assert Redis().set_json("courses", []) is None


def test_listing_is_cached(redis_client, make_course):
    make_course("CS101")

    courses = CourseOp.search()

    key, payload = redis_client.set.call_args.args
    assert key == COURSE_LISTING_CACHE_KEY
    assert [course["code"] for course in json.loads(payload)] == ["CS101"]
    assert courses[0]["available_seats"] == 30


def test_cached_listing_is_served(redis_client, client):
    cached = [{"id": 1, "code": "CACHED", "name": "From cache", "credits": 1,
               "enrollment_limit": 1, "teacher_id": 1, "available_seats": 1}]
    redis_client.get.return_value = json.dumps(cached)

    response = client.get(f"{API}/courses")

    assert [course["code"] for course in response.json()] == ["CACHED"]


def test_search_bypasses_the_cache(redis_client, make_course):
    make_course("CS101")

    CourseOp.search("cs")

    redis_client.get.assert_not_called()
    redis_client.set.assert_not_called()


def test_enrolment_invalidates_the_listing(
    redis_client, client, student, make_course, auth_headers
):
    course = make_course()

    client.post(
        f"{API}/enrolments", json={"course_id": course.id}, headers=auth_headers(student)
    )

    redis_client.delete.assert_any_call(COURSE_LISTING_CACHE_KEY)


class DictRedis:
    """In-memory stand-in for the redis client calls the wrapper makes."""

    def __init__(self):
        self.data = {}

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, ex=None):
        self.data[key] = value
        return True

    def delete(self, key):
        return int(self.data.pop(key, None) is not None)


def test_deleting_a_student_refreshes_seat_counts(
    monkeypatch, client, coordinator, admin, student, make_course, auth_headers
):
    monkeypatch.setattr(Redis(), "redis_client", DictRedis())
    course = make_course(limit=2)
    coordinator.enroll(student.id, course.id)
    before = client.get(f"{API}/courses").json()

    response = client.delete(f"{API}/users/{student.id}", headers=auth_headers(admin))
    after = client.get(f"{API}/courses").json()

    assert response.status_code == 200
    assert before[0]["available_seats"] == 1
    assert after[0]["available_seats"] == 2
