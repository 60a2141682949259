from datetime import datetime, timedelta, timezone

from member_platform.member_platform.member_service.main import app
from member_platform.member_platform.member_service.models import User


def register(client, user):
    resp = client.post("/register", json=user)
    assert resp.status_code == 201
    return resp.json()


def auth_header_for(token: str):
    return {"Authorization": f"Bearer {token}"}


def test_get_profile_requires_token(client):
    r = client.get("/profile")
    assert r.status_code == 401
    assert r.json()["message"] == "Access Denied"


def test_get_profile_wrong_scheme_is_treated_as_missing(client, new_user):
    data = register(client, new_user)
    r = client.get("/profile", headers={"Authorization": f"Basic {data['token']}"})
    assert r.status_code == 401


def test_get_profile_malformed_token(client):
    r = client.get("/profile", headers=auth_header_for("not-a-token"))
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid Token"


def test_get_profile_expired_token(client, new_user):
    data = register(client, new_user)
    issued = datetime.now(timezone.utc) - timedelta(hours=25)
    expired = app.state.tokens.issue(data["user"]["id"], issued_at=issued)

    r = client.get("/profile", headers=auth_header_for(expired))
    assert r.status_code == 400


def test_get_profile_returns_own_record_without_password(client, new_user):
    data = register(client, new_user)

    r = client.get("/profile", headers=auth_header_for(data["token"]))
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Profile retrieved successfully"

    profile = body["profile"]
    assert "password" not in profile
    assert profile["id"] == data["user"]["id"]
    assert profile["name"] == new_user["name"]
    assert profile["email"] == new_user["email"]
    assert profile["role"] == "member"
    assert profile["createdAt"]
    # Never logged in through /login: lastLogin is filled in for display only
    assert profile["lastLogin"]


def test_get_profile_user_deleted_after_token_issued(client, new_user):
    data = register(client, new_user)

    db = app.state.store.SessionLocal()
    try:
        db.query(User).filter(User.id == data["user"]["id"]).delete()
        db.commit()
    finally:
        db.close()

    r = client.get("/profile", headers=auth_header_for(data["token"]))
    assert r.status_code == 404
    assert r.json()["message"] == "User not found"


def test_get_profile_store_not_ready(client, new_user):
    data = register(client, new_user)
    app.state.store.monitor.mark_disconnected()

    r = client.get("/profile", headers=auth_header_for(data["token"]))
    assert r.status_code == 503
    assert r.json()["state"] == "disconnected"


def test_update_profile_name_only(client, new_user):
    data = register(client, new_user)
    h = auth_header_for(data["token"])

    r = client.put("/profile", headers=h, json={"name": "X"})
    assert r.status_code == 200
    body = r.json()
    assert body["message"] == "Profile updated successfully"
    assert body["profile"]["name"] == "X"
    assert body["profile"]["email"] == new_user["email"]
    assert body["profile"]["role"] == "member"
    assert body["profile"]["updatedAt"]

    profile = client.get("/profile", headers=h).json()["profile"]
    assert profile["name"] == "X"
    assert profile["email"] == new_user["email"]


def test_update_profile_email(client, new_user):
    data = register(client, new_user)
    h = auth_header_for(data["token"])

    r = client.put("/profile", headers=h, json={"email": "moved@example.com"})
    assert r.status_code == 200
    assert r.json()["profile"]["email"] == "moved@example.com"
    assert r.json()["profile"]["name"] == new_user["name"]

    # New email works for login, the token keeps working since it carries the id
    login = client.post("/login", json={"email": "moved@example.com", "password": new_user["password"]})
    assert login.status_code == 200
    assert client.get("/profile", headers=h).status_code == 200


def test_update_profile_ignores_empty_fields(client, new_user):
    data = register(client, new_user)

    r = client.put("/profile", headers=auth_header_for(data["token"]), json={"name": "", "email": None})
    assert r.status_code == 200
    assert r.json()["profile"]["name"] == new_user["name"]
    assert r.json()["profile"]["email"] == new_user["email"]


def test_update_profile_email_taken_by_another_user(client, new_user):
    data = register(client, new_user)
    other = register(client, {**new_user, "email": "other@example.com"})

    r = client.put("/profile", headers=auth_header_for(data["token"]), json={"email": other["user"]["email"]})
    assert r.status_code == 400
    assert r.json()["message"] == "Email already in use"


def test_update_profile_requires_token(client):
    assert client.put("/profile", json={"name": "X"}).status_code == 401
    assert client.put("/profile", headers=auth_header_for("garbage"), json={"name": "X"}).status_code == 400
