"""Tests for the profile and account settings routes."""

from conftest import auth, signup


def test_me_requires_auth(client):
    assert client.get("/api/me").status_code == 401


def test_me(client):
    data = signup(client, email="me@example.com", name="Me")
    resp = client.get("/api/me", headers=auth(data["access_token"]))
    assert resp.status_code == 200
    body = resp.json()
    assert body["email"] == "me@example.com"
    assert body["is_active"] is True


# ── profile ───────────────────────────────────────────────────────────────────


def test_update_name(client):
    data = signup(client)
    resp = client.put("/api/user/profile", json={"name": "Renamed"}, headers=auth(data["access_token"]))
    assert resp.status_code == 200
    assert resp.json()["name"] == "Renamed"


def test_update_email(client):
    data = signup(client)
    headers = auth(data["access_token"])
    resp = client.put("/api/user/profile", json={"email": "New@Example.com"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["email"] == "new@example.com"
    assert client.get("/api/me", headers=headers).json()["email"] == "new@example.com"


def test_update_email_taken(client):
    signup(client, email="taken@example.com")
    data = signup(client)
    resp = client.put("/api/user/profile", json={"email": "taken@example.com"}, headers=auth(data["access_token"]))
    assert resp.status_code == 409


def test_update_nothing(client):
    data = signup(client)
    resp = client.put("/api/user/profile", json={}, headers=auth(data["access_token"]))
    assert resp.status_code == 400


# ── password ──────────────────────────────────────────────────────────────────


def test_change_password(client):
    data = signup(client, email="pw@example.com", password="secret1")
    resp = client.post(
        "/api/user/change-password",
        json={"currentPassword": "secret1", "newPassword": "secret2"},
        headers=auth(data["access_token"]),
    )
    assert resp.status_code == 200
    assert resp.json()["message"] == "Password changed successfully"

    old = client.post("/api/auth/signin", json={"email": "pw@example.com", "password": "secret1"})
    new = client.post("/api/auth/signin", json={"email": "pw@example.com", "password": "secret2"})
    assert old.status_code == 401
    assert new.status_code == 200


def test_change_password_wrong_current(client):
    data = signup(client, password="secret1")
    resp = client.post(
        "/api/user/change-password",
        json={"currentPassword": "nope-nope", "newPassword": "secret2"},
        headers=auth(data["access_token"]),
    )
    assert resp.status_code == 400


def test_change_password_too_short(client):
    data = signup(client, password="secret1")
    resp = client.post(
        "/api/user/change-password",
        json={"currentPassword": "secret1", "newPassword": "abc"},
        headers=auth(data["access_token"]),
    )
    assert resp.status_code == 422


# ── account deletion ──────────────────────────────────────────────────────────


def test_delete_account(client):
    data = signup(client, email="bye@example.com", password="secret1")
    headers = auth(data["access_token"])
    resp = client.request("DELETE", "/api/user/account", json={"password": "secret1"}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["message"] == "Account deleted successfully"

    # token stops working and signin reports the deactivation
    assert client.get("/api/me", headers=headers).status_code == 401
    signin = client.post("/api/auth/signin", json={"email": "bye@example.com", "password": "secret1"})
    assert signin.status_code == 403


def test_delete_account_wrong_password(client):
    data = signup(client, password="secret1")
    headers = auth(data["access_token"])
    resp = client.request("DELETE", "/api/user/account", json={"password": "wrong-one"}, headers=headers)
    assert resp.status_code == 400
    assert client.get("/api/me", headers=headers).status_code == 200
