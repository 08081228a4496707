"""User resource and credential store tests."""

from cheese_api.models import User
from cheese_api.services.auth import create_user, update_user, verify_password


def test_register_user(client):
    """Test user registration never exposes the password."""
    response = client.post(
        "/api/users", json={"email": "newuser@example.com", "password": "password123"}
    )
    assert response.status_code == 201
    data = response.json()
    assert data["email"] == "newuser@example.com"
    assert data["cheeseListings"] == []
    assert "password" not in data
    assert "password_hash" not in data
    assert "roles" not in data


def test_register_hashes_password(client, db):
    """Test the stored password is a hash of the plaintext."""
    client.post("/api/users", json={"email": "hash@example.com", "password": "password123"})

    user = db.query(User).filter(User.email == "hash@example.com").one()
    assert user.password_hash != "password123"
    assert verify_password("password123", user.password_hash)


def test_register_duplicate_email(client, auth_headers):
    """Test registration with duplicate email fails."""
    response = client.post(
        "/api/users", json={"email": auth_headers.email, "password": "password123"}
    )
    assert response.status_code == 422
    assert response.json()["violations"][0]["propertyPath"] == "email"


def test_register_invalid_email(client):
    """Test registration rejects malformed email addresses."""
    response = client.post("/api/users", json={"email": "not-an-email", "password": "password123"})
    assert response.status_code == 422
    assert response.json()["violations"][0]["propertyPath"] == "email"


def test_update_keeps_password_hash(db):
    """Test re-saving a user does not re-hash the stored password."""
    user = create_user(db, "keep@example.com", "password123")
    original_hash = user.password_hash

    update_user(db, user)
    assert user.password_hash == original_hash

    update_user(db, user, email="kept@example.com")
    assert user.email == "kept@example.com"
    assert user.password_hash == original_hash
    assert verify_password("password123", user.password_hash)


def test_get_user_requires_auth(client, auth_headers):
    """Test user reads need a token."""
    response = client.get(f"/api/users/{auth_headers.user_id}")
    assert response.status_code == 401


def test_get_user(client, auth_headers, make_listing):
    """Test reading a user lists their cheese listing IRIs."""
    listing = make_listing()

    response = client.get(f"/api/users/{auth_headers.user_id}", headers=auth_headers)
    assert response.status_code == 200
    data = response.json()
    assert data["email"] == auth_headers.email
    assert data["cheeseListings"] == [f"/api/cheeses/{listing.id}"]


def test_get_users_admin_sees_roles(client, auth_headers, admin_headers):
    """Test admins see role tags on users."""
    response = client.get("/api/users", headers=admin_headers)
    assert response.status_code == 200
    roles = {user["email"]: user["roles"] for user in response.json()}
    assert roles[admin_headers.email] == ["ROLE_ADMIN", "ROLE_USER"]
    assert roles[auth_headers.email] == ["ROLE_USER"]
    assert response.headers["X-Total-Count"] == "2"


def test_update_own_user(client, auth_headers, db):
    """Test a user can change their email without touching the password."""
    user = db.query(User).filter(User.id == auth_headers.user_id).one()
    original_hash = user.password_hash

    response = client.put(
        f"/api/users/{auth_headers.user_id}",
        headers=auth_headers,
        json={"email": "renamed@example.com", "password": "ignored-value"},
    )
    assert response.status_code == 200
    assert response.json()["email"] == "renamed@example.com"

    db.refresh(user)
    assert user.password_hash == original_hash


def test_update_other_user_forbidden(client, auth_headers, db):
    """Test users cannot edit someone else's account."""
    other = create_user(db, "other@example.com", "password123")

    response = client.put(
        f"/api/users/{other.id}", headers=auth_headers, json={"email": "hijack@example.com"}
    )
    assert response.status_code == 403


def test_change_password(client, auth_headers):
    """Test the change-password flow swaps which password logs in."""
    response = client.put(
        f"/api/users/{auth_headers.user_id}/password",
        headers=auth_headers,
        json={"currentPassword": "testpass123", "newPassword": "newpass456"},
    )
    assert response.status_code == 204

    old = client.post(
        "/api/login_check", json={"email": auth_headers.email, "password": "testpass123"}
    )
    assert old.status_code == 401

    new = client.post(
        "/api/login_check", json={"email": auth_headers.email, "password": "newpass456"}
    )
    assert new.status_code == 200


def test_change_password_wrong_current(client, auth_headers):
    """Test the current password must match."""
    response = client.put(
        f"/api/users/{auth_headers.user_id}/password",
        headers=auth_headers,
        json={"currentPassword": "wrongpass", "newPassword": "newpass456"},
    )
    assert response.status_code == 401
