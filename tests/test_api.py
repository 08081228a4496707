"""API endpoint tests: health and login."""

import time

from jose import jwt

from cheese_api.config import get_settings


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_login_returns_token(client, auth_headers):
    """Test login issues a token carrying the email and a one hour expiry."""
    before = int(time.time())
    response = client.post(
        "/api/login_check", json={"email": auth_headers.email, "password": "testpass123"}
    )
    after = int(time.time())

    assert response.status_code == 200
    token = response.json()["token"]

    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    assert claims["email"] == auth_headers.email
    assert before + 3600 - 1 <= claims["exp"] <= after + 3600 + 1
    assert set(claims) == {"email", "exp"}


def test_login_unknown_email(client):
    """Test login with an email nobody registered."""
    response = client.post(
        "/api/login_check", json={"email": "nobody@example.com", "password": "whatever123"}
    )
    assert response.status_code == 404


def test_login_wrong_password(client, auth_headers):
    """Test login with wrong password."""
    response = client.post(
        "/api/login_check", json={"email": auth_headers.email, "password": "wrongpass"}
    )
    assert response.status_code == 401


def test_login_is_post_only(client):
    """Test login rejects GET."""
    response = client.get("/api/login_check")
    assert response.status_code == 405


def test_login_missing_fields(client):
    """Test login without a password is a validation error."""
    response = client.post("/api/login_check", json={"email": "test@example.com"})
    assert response.status_code == 422
    paths = [v["propertyPath"] for v in response.json()["violations"]]
    assert paths == ["password"]


def test_invalid_token_rejected(client):
    """Test that a garbage bearer token is refused."""
    response = client.get("/api/users", headers={"Authorization": "Bearer not-a-jwt"})
    assert response.status_code == 401


def test_expired_token_rejected(client, auth_headers):
    """Test that tokens past their exp are refused."""
    settings = get_settings()
    token = jwt.encode(
        {"email": auth_headers.email, "exp": int(time.time()) - 10},
        settings.jwt_secret,
        algorithm=settings.jwt_algorithm,
    )
    response = client.get("/api/users", headers={"Authorization": f"Bearer {token}"})
    assert response.status_code == 401
