"""Login, logout and token handling."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt
import pytest

from cinerate.logic.errors import AuthenticationError
from cinerate.logic.identity import decode_token, issue_token

DEFAULT_PASSWORD = "s3cret-pass"
TEST_SECRET = "functional-test-secret"


def test_login_sets_cookie_and_returns_token(client, seed):
    profile_id = seed.profile(email="login@example.com")

    resp = client.post("/auth/login", json={"email": "login@example.com", "password": DEFAULT_PASSWORD})

    assert resp.status_code == 200
    token = resp.json()["token"]
    assert resp.cookies.get("token") == token
    claims = jwt.decode(token, TEST_SECRET, algorithms=["HS256"])
    assert claims["sub"] == str(profile_id)
    assert claims["adm"] is False


def test_cookie_from_login_authenticates_later_requests(client, seed):
    seed.profile(email="cookie@example.com")
    client.post("/auth/login", json={"email": "cookie@example.com", "password": DEFAULT_PASSWORD})

    resp = client.get("/comments/profile/me")

    assert resp.status_code == 200


def test_wrong_password_is_rejected(client, seed):
    seed.profile(email="login@example.com")

    resp = client.post("/auth/login", json={"email": "login@example.com", "password": "nope"})

    assert resp.status_code == 401
    assert resp.json()["code"] == "INVALID_CREDENTIALS"


def test_unknown_email_is_rejected_the_same_way(client):
    resp = client.post("/auth/login", json={"email": "ghost@example.com", "password": "x"})

    assert resp.status_code == 401
    assert resp.json()["code"] == "INVALID_CREDENTIALS"


def test_login_requires_both_fields(client):
    resp = client.post("/auth/login", json={"email": "a@example.com"})

    assert resp.status_code == 400
    assert resp.json()["code"] == "VALIDATION_ERROR"


def test_logout_clears_cookie(client, seed):
    seed.profile(email="bye@example.com")
    client.post("/auth/login", json={"email": "bye@example.com", "password": DEFAULT_PASSWORD})

    resp = client.post("/auth/logout")

    assert resp.status_code == 200
    assert "token=" in resp.headers.get("set-cookie", "")
    assert client.get("/comments/profile/me").status_code == 401


def test_tampered_token_is_rejected(client, seed):
    profile_id = seed.profile()
    forged = jwt.encode(
        {"sub": str(profile_id), "adm": True, "exp": datetime.now(timezone.utc) + timedelta(minutes=5)},
        "not-the-secret",
        algorithm="HS256",
    )

    resp = client.delete(f"/profiles/admin/{profile_id}", headers={"Authorization": f"Bearer {forged}"})

    assert resp.status_code == 401
    assert resp.json()["code"] == "INVALID_TOKEN"


def test_expired_token_is_rejected(app_config):
    token = issue_token(
        app_config.auth,
        {"profile_id": 1, "email": "old@example.com", "is_admin": False},
        now=datetime.now(timezone.utc) - timedelta(hours=2),
    )

    with pytest.raises(AuthenticationError) as info:
        decode_token(app_config.auth, token)
    assert info.value.code == "TOKEN_EXPIRED"


def test_token_round_trip_carries_admin_flag(app_config):
    token = issue_token(app_config.auth, {"profile_id": 5, "email": "root@example.com", "is_admin": True})

    identity = decode_token(app_config.auth, token)

    assert identity.profile_id == 5
    assert identity.is_admin is True
    assert identity.email == "root@example.com"
