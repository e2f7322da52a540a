from conftest import API, PASSWORD
from service.auth import TokenManager


def test_register_signs_the_student_in(client):
    response = client.post(
        f"{API}/auth/register",
        json={
            "name": "  Ada Lovelace ",
            "email": "ada@coursehub.io",
            "password": "analytical",
            "student_code": "S9001",
            "major": "Mathematics",
        },
    )

    assert response.status_code == 201
    body = response.json()
    assert body["user"]["role"] == "STUDENT"
    assert body["user"]["name"] == "Ada Lovelace"
    assert body["token_type"] == "bearer"
    assert "hashed_password" not in body["user"]
    assert TokenManager.decode_token(body["access_token"])["user_id"] == body["user"]["id"]


def test_register_rejects_duplicate_email(client, student):
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Copy", "email": student.email, "password": "pw"},
    )

    assert response.status_code == 409
    assert response.json()["message"] == "Email already exists"


def test_register_validates_email(client):
    response = client.post(
        f"{API}/auth/register",
        json={"name": "Nobody", "email": "not-an-email", "password": "pw"},
    )

    assert response.status_code == 422


def test_login(client, teacher):
    response = client.post(
        f"{API}/auth/login", json={"email": teacher.email, "password": PASSWORD}
    )

    assert response.status_code == 200
    assert response.json()["user"]["role"] == "TEACHER"


def test_login_with_wrong_password(client, teacher):
    response = client.post(
        f"{API}/auth/login", json={"email": teacher.email, "password": "nope"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_login_with_unknown_email(client):
    response = client.post(
        f"{API}/auth/login", json={"email": "ghost@coursehub.io", "password": "x"}
    )

    assert response.status_code == 401


def test_missing_token_is_refused(client):
    response = client.get(f"{API}/enrolments/me")

    assert response.status_code in (401, 403)


def test_tampered_token_is_refused(client):
    response = client.get(
        f"{API}/enrolments/me", headers={"Authorization": "Bearer not-a-token"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Invalid token"


def test_expired_token_is_refused(client, student):
    token = TokenManager.create_access_token(
        {"user_id": student.id}, expires_in_minutes=-5
    )

    response = client.get(
        f"{API}/enrolments/me", headers={"Authorization": f"Bearer {token}"}
    )

    assert response.status_code == 401
    assert response.json()["message"] == "Token expired"


def test_token_for_deleted_user_is_refused(client, student, auth_headers):
    headers = auth_headers(student)
    student.delete()

    response = client.get(f"{API}/enrolments/me", headers=headers)

    assert response.status_code == 401


def test_wrong_role_is_forbidden(client, student, auth_headers):
    response = client.post(
        f"{API}/courses",
        json={"code": "CS500", "name": "Compilers", "credits": 4, "enrollment_limit": 10},
        headers=auth_headers(student),
    )

    assert response.status_code == 403
    assert response.json()["message"] == "You are not allowed to perform this action"
