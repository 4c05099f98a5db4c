"""Login, current user and class management."""

import pytest

pytestmark = pytest.mark.integration


async def test_health(client):
    response = await client.get("/api/v1/health/")
    assert response.json() == {"status": "ok", "database": "ok"}


async def test_login_and_me(client, admin_user):
    response = await client.post(
        "/api/v1/auth/login", json={"email": "ADMIN@example.com", "password": "Admin@123"}
    )
    assert response.status_code == 200
    body = response.json()
    assert body["token_type"] == "bearer"
    assert body["user"]["role"] == "admin"

    me = await client.get(
        "/api/v1/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"}
    )
    assert me.json()["email"] == "admin@example.com"


async def test_login_wrong_password(client, admin_user):
    response = await client.post("/api/v1/auth/login", json={"email": "admin@example.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


async def test_bad_token(client):
    response = await client.get("/api/v1/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


async def test_admin_creates_class_for_teacher(client, admin_headers, teacher_headers, teacher_user):
    response = await client.post(
        "/api/v1/classes/",
        headers=admin_headers,
        json={"class_name": "Hip Hop B", "user_id": str(teacher_user.id)},
    )
    assert response.status_code == 201

    classes = (await client.get("/api/v1/classes/", headers=teacher_headers)).json()
    assert [c["class_name"] for c in classes] == ["Hip Hop B"]

    me = (await client.get("/api/v1/auth/me", headers=teacher_headers)).json()
    assert me["class_name"] == "Hip Hop B"


async def test_teacher_cannot_create_class(client, teacher_headers):
    response = await client.post("/api/v1/classes/", headers=teacher_headers, json={"class_name": "Jazz"})
    assert response.status_code == 403


async def test_class_name_too_long(client, admin_headers):
    response = await client.post("/api/v1/classes/", headers=admin_headers, json={"class_name": "x" * 21})
    assert response.status_code == 422


async def test_rename_class(client, admin_headers, school_class):
    response = await client.put(
        f"/api/v1/classes/{school_class.id}", headers=admin_headers, json={"class_name": "Ballet B"}
    )
    assert response.json()["class_name"] == "Ballet B"
