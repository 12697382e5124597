import pytest

from backend.bookdesk.auth import get_password_hash, verify_password
from backend.bookdesk.models import User


REQUIRED = ["firstName", "lastName", "username", "email", "password"]


def test_register_creates_user(register, db):
    resp = register()
    assert resp.status_code == 201
    data = resp.json()
    assert data["user"]["firstName"] == "Ada"
    assert data["user"]["username"] == "ada"
    assert "password" not in data["user"]
    assert "password_hash" not in data["user"]

    user = db.query(User).filter(User.email == "ada@example.com").one()
    assert user.password_hash == get_password_hash("analytical")
    assert user.password_hash != "analytical"
    assert user.city == "London"


@pytest.mark.parametrize("field", REQUIRED)
def test_register_missing_field_is_rejected(register, db, field):
    resp = register(**{field: ""})
    assert resp.status_code == 400
    assert field in resp.json()["message"]
    assert db.query(User).count() == 0


@pytest.mark.parametrize("field", REQUIRED)
def test_register_absent_field_is_rejected(client, db, field):
    payload = {
        "firstName": "Ada",
        "lastName": "Lovelace",
        "username": "ada",
        "email": "ada@example.com",
        "password": "analytical",
    }
    payload.pop(field)
    resp = client.post("/api/auth/register", json=payload)
    assert resp.status_code == 400
    assert field in resp.json()["message"]
    assert db.query(User).count() == 0


def test_register_duplicate_email_is_storage_error(register, db):
    assert register().status_code == 201
    resp = register(username="ada2")
    assert resp.status_code == 500
    assert "message" in resp.json()
    assert db.query(User).count() == 1


def test_password_digest_is_deterministic():
    first = get_password_hash("hunter2")
    assert first == get_password_hash("hunter2")
    assert first != get_password_hash("hunter3")
    assert "hunter2" not in first
    assert verify_password("hunter2", first)
    assert not verify_password("hunter3", first)
    assert not verify_password("", first)


def test_login_user(client, register):
    register()
    resp = client.post("/api/auth/login", json={
        "email": "ada@example.com", "password": "analytical", "userType": "user",
    })
    assert resp.status_code == 200
    data = resp.json()
    assert data["firstName"] == "Ada"
    assert data["userType"] == "user"


def test_login_admin(client, admin):
    resp = client.post("/api/auth/login", json={
        "email": "root@example.com", "password": "s3cret", "userType": "admin",
    })
    assert resp.status_code == 200
    assert resp.json()["firstName"] == "Root"
    assert resp.json()["userType"] == "admin"


def test_user_credentials_do_not_log_in_as_admin(client, register):
    register()
    resp = client.post("/api/auth/login", json={
        "email": "ada@example.com", "password": "analytical", "userType": "admin",
    })
    assert resp.status_code == 401


def test_login_failures_share_one_message(client, register):
    register()
    unknown = client.post("/api/auth/login", json={
        "email": "nobody@example.com", "password": "analytical", "userType": "user",
    })
    wrong = client.post("/api/auth/login", json={
        "email": "ada@example.com", "password": "wrong", "userType": "user",
    })
    assert unknown.status_code == 401
    assert wrong.status_code == 401
    assert unknown.json() == wrong.json()
    assert unknown.json()["message"] == "Invalid email or password"


@pytest.mark.parametrize("payload", [
    {"password": "x", "userType": "user"},
    {"email": "ada@example.com", "userType": "user"},
    {"email": "ada@example.com", "password": "x"},
    {"email": "ada@example.com", "password": "x", "userType": "librarian"},
])
def test_login_missing_or_bad_fields(client, payload):
    resp = client.post("/api/auth/login", json=payload)
    assert resp.status_code == 400
