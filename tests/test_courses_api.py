from conftest import API
from util.enum import UserRole


def course_payload(**overrides):
    payload = {
        "code": "CS301",
        "name": "Operating Systems",
        "credits": 4,
        "enrollment_limit": 25,
    }
    payload.update(overrides)
    return payload


class TestCatalog:
    def test_listing_is_public_and_ordered_by_code(self, client, make_course):
        make_course("MA101")
        make_course("CS101")

        response = client.get(f"{API}/courses")

        assert response.status_code == 200
        assert [course["code"] for course in response.json()] == ["CS101", "MA101"]

    def test_listing_reports_available_seats(
        self, client, coordinator, make_user, make_course
    ):
        course = make_course(limit=3)
        coordinator.enroll(make_user().id, course.id)

        listing = client.get(f"{API}/courses").json()

        assert listing[0]["available_seats"] == 2

    def test_search_matches_code_or_name(self, client, make_course):
        make_course("CS101")
        make_course("MA201")

        by_code = client.get(f"{API}/courses", params={"query": "ma2"}).json()
        by_name = client.get(f"{API}/courses", params={"query": "course cs"}).json()

        assert [course["code"] for course in by_code] == ["MA201"]
        assert [course["code"] for course in by_name] == ["CS101"]

    def test_detail_lists_prerequisites(self, client, make_course):
        intro = make_course("CS101")
        maths = make_course("MA101")
        advanced = make_course("CS201", prerequisites=[maths, intro])

        response = client.get(f"{API}/courses/{advanced.id}")

        assert response.status_code == 200
        assert [p["code"] for p in response.json()["prerequisites"]] == [
            "CS101",
            "MA101",
        ]

    def test_unknown_course(self, client):
        response = client.get(f"{API}/courses/999")

        assert response.status_code == 404
        assert response.json()["message"] == "Course not found"


class TestManageCourses:
    def test_teacher_owns_created_course(self, client, teacher, auth_headers):
        response = client.post(
            f"{API}/courses",
            json=course_payload(code="  CS301 "),
            headers=auth_headers(teacher),
        )

        assert response.status_code == 201
        body = response.json()
        assert body["code"] == "CS301"
        assert body["teacher_id"] == teacher.id

    def test_teacher_cannot_assign_another_owner(
        self, client, teacher, make_user, auth_headers
    ):
        colleague = make_user(UserRole.teacher)

        response = client.post(
            f"{API}/courses",
            json=course_payload(teacher_id=colleague.id),
            headers=auth_headers(teacher),
        )

        assert response.json()["teacher_id"] == teacher.id

    def test_admin_assigns_owner(self, client, admin, teacher, auth_headers):
        response = client.post(
            f"{API}/courses",
            json=course_payload(teacher_id=teacher.id),
            headers=auth_headers(admin),
        )

        assert response.status_code == 201
        assert response.json()["teacher_id"] == teacher.id

    def test_admin_owner_must_be_a_teacher(self, client, admin, student, auth_headers):
        response = client.post(
            f"{API}/courses",
            json=course_payload(teacher_id=student.id),
            headers=auth_headers(admin),
        )

        assert response.status_code == 400

    def test_duplicate_code(self, client, teacher, make_course, auth_headers):
        make_course("CS301")

        response = client.post(
            f"{API}/courses", json=course_payload(), headers=auth_headers(teacher)
        )

        assert response.status_code == 409
        assert response.json()["message"] == "Course code already exists"

    def test_negative_limit_is_rejected(self, client, teacher, auth_headers):
        response = client.post(
            f"{API}/courses",
            json=course_payload(enrollment_limit=-1),
            headers=auth_headers(teacher),
        )

        assert response.status_code == 422

    def test_unknown_prerequisite(self, client, teacher, auth_headers):
        response = client.post(
            f"{API}/courses",
            json=course_payload(prerequisite_ids=[12345]),
            headers=auth_headers(teacher),
        )

        assert response.status_code == 400
        assert response.json()["message"] == "One or more prerequisite ids do not exist"

    def test_update_replaces_prerequisites(
        self, client, teacher, make_course, auth_headers
    ):
        intro = make_course("CS101")
        maths = make_course("MA101")
        advanced = make_course("CS201", prerequisites=[intro])

        response = client.put(
            f"{API}/courses/{advanced.id}",
            json={"enrollment_limit": 5, "prerequisite_ids": [maths.id, advanced.id]},
            headers=auth_headers(teacher),
        )

        assert response.status_code == 200
        assert response.json()["enrollment_limit"] == 5
        detail = client.get(f"{API}/courses/{advanced.id}").json()
        assert [p["code"] for p in detail["prerequisites"]] == ["MA101"]

    def test_update_without_prerequisites_keeps_them(
        self, client, teacher, make_course, auth_headers
    ):
        intro = make_course("CS101")
        advanced = make_course("CS201", prerequisites=[intro])

        client.put(
            f"{API}/courses/{advanced.id}",
            json={"name": "Data Structures"},
            headers=auth_headers(teacher),
        )

        detail = client.get(f"{API}/courses/{advanced.id}").json()
        assert detail["name"] == "Data Structures"
        assert [p["code"] for p in detail["prerequisites"]] == ["CS101"]

    def test_other_teacher_cannot_edit(self, client, make_user, make_course, auth_headers):
        course = make_course()
        outsider = make_user(UserRole.teacher)

        response = client.put(
            f"{API}/courses/{course.id}",
            json={"name": "Hijacked"},
            headers=auth_headers(outsider),
        )

        assert response.status_code == 403
        assert response.json()["message"] == "Not your course"

    def test_admin_can_delete_any_course(self, client, admin, make_course, auth_headers):
        course = make_course()

        response = client.delete(
            f"{API}/courses/{course.id}", headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert client.get(f"{API}/courses/{course.id}").status_code == 404

    def test_delete_cascades_enrolments(
        self, client, teacher, coordinator, store, student, make_course, auth_headers
    ):
        course = make_course()
        coordinator.enroll(student.id, course.id)

        client.delete(f"{API}/courses/{course.id}", headers=auth_headers(teacher))

        assert not store.exists(student.id, course.id)
