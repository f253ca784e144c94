import logging
from datetime import datetime, timezone

from jose import jwt

from fitness_api import models
from fitness_api.auth import create_access_token
from fitness_api.config import settings


def register(client, name="A", email="a@x.com", password="pw"):
    return client.post("/auth/register", json={"name": name, "email": email, "password": password})


def test_register_returns_token_and_public_user(client, db_session):
    r = register(client)
    assert r.status_code == 201
    body = r.json()
    assert body["token"]
    assert set(body["user"].keys()) == {"id", "name", "email"}
    assert body["user"]["name"] == "A"
    assert body["user"]["email"] == "a@x.com"

    stored = db_session.query(models.User).filter(models.User.email == "a@x.com").one()
    assert stored.password_hash != "pw"
    assert stored.id == body["user"]["id"]


def test_register_missing_fields(client):
    r = client.post("/auth/register", json={"name": "A", "email": "a@x.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "Name, email, and password are required."}

    r = client.post("/auth/register", json={"name": "", "email": "a@x.com", "password": "pw"})
    assert r.status_code == 400


def test_register_duplicate_email_conflicts(client):
    assert register(client).status_code == 201
    r = register(client, name="B")
    assert r.status_code == 409
    assert r.json() == {"error": "User already exists with this email."}


def test_email_lookup_is_case_sensitive(client):
    assert register(client, email="a@x.com").status_code == 201
    assert register(client, email="A@x.com").status_code == 201


def test_login_token_subject_matches_user(client):
    user_id = register(client, email="b@x.com", password="hunter22").json()["user"]["id"]

    r = client.post("/auth/login", json={"email": "b@x.com", "password": "hunter22"})
    assert r.status_code == 200
    body = r.json()
    assert body["user"] == {"id": user_id, "name": "A", "email": "b@x.com"}

    payload = jwt.decode(body["token"], settings.secret_key, algorithms=[settings.algorithm])
    assert payload["sub"] == str(user_id)
    assert payload["email"] == "b@x.com"


def test_token_expires_in_seven_days(user):
    token = create_access_token(user)
    payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    remaining = payload["exp"] - datetime.now(timezone.utc).timestamp()
    assert 7 * 86400 - 60 < remaining <= 7 * 86400


def test_login_failures_are_indistinguishable(client):
    register(client)
    wrong_password = client.post("/auth/login", json={"email": "a@x.com", "password": "wrong"})
    unknown_email = client.post("/auth/login", json={"email": "nobody@x.com", "password": "pw"})

    assert wrong_password.status_code == 401
    assert unknown_email.status_code == 401
    assert wrong_password.json() == {"error": "Invalid credentials."}
    assert unknown_email.json() == wrong_password.json()


def test_login_missing_fields(client):
    r = client.post("/auth/login", json={"email": "a@x.com"})
    assert r.status_code == 400
    assert r.json() == {"error": "Email and password are required."}


def test_me_requires_valid_token(client, user):
    token = create_access_token(user)
    r = client.get("/auth/me", headers={"Authorization": f"Bearer {token}"})
    assert r.status_code == 200
    assert r.json()["user"]["email"] == "alex@example.com"

    assert client.get("/auth/me").status_code == 401
    r = client.get("/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert r.status_code == 401
    assert "error" in r.json()


def test_auth_logs_do_not_carry_raw_emails(client, user, caplog):
    with caplog.at_level(logging.INFO, logger="fitness_api.auth"):
        client.post("/auth/login", json={"email": "alex@example.com", "password": "wrong"})
        client.post("/auth/login", json={"email": "nobody@example.com", "password": "pw"})
        register(client, email="alex@example.com")

    assert "alex@example.com" not in caplog.text
    assert "nobody@example.com" not in caplog.text
    assert "a***@example.com" in caplog.text
    assert "n***@example.com" in caplog.text
