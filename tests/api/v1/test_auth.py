# tests/api/v1/test_auth.py

from fastapi.testclient import TestClient

from repair_cafe.core.config import settings

from tests.utils.auth import login
from tests.utils.factories import create_user


def _token_from(email_text: str) -> str:
    return email_text.split("/auth/verify?token=")[1].split()[0]


def test_magic_link_sign_in_flow(client: TestClient, sent_emails):
    response = client.post(
        "/api/v1/auth/magic-link", json={"email": "alice@example.com", "name": "Alice"}
    )
    assert response.status_code == 200
    assert response.json()["success"] is True
    assert len(sent_emails) == 1
    token = _token_from(sent_emails[0]["text"])

    response = client.get("/api/v1/auth/verify", params={"token": token})
    assert response.status_code == 200
    assert response.json()["user"]["email"] == "alice@example.com"
    assert settings.SESSION_COOKIE_NAME in response.cookies

    me = client.get("/api/v1/auth/me")
    assert me.status_code == 200
    assert me.json()["user"]["name"] == "Alice"

    # the link only works once
    again = client.get("/api/v1/auth/verify", params={"token": token})
    assert again.status_code == 400


def test_verify_without_token(client: TestClient):
    response = client.get("/api/v1/auth/verify")
    assert response.status_code == 400
    assert response.json()["error_code"] == "VALIDATION_ERROR"


def test_me_requires_session(client: TestClient):
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "message": "Unauthorized",
        "error_code": "UNAUTHORIZED",
    }


def test_garbage_session_cookie_is_rejected(client: TestClient):
    client.cookies.set(settings.SESSION_COOKIE_NAME, "not-a-jwt")
    response = client.get("/api/v1/auth/me")
    assert response.status_code == 401


def test_logout_clears_cookie(client: TestClient, db_session):
    login(client, create_user(db_session))

    response = client.post("/api/v1/auth/logout")

    assert response.status_code == 200
    assert "max-age=0" in response.headers["set-cookie"].lower()
