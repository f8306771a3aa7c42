import pytest
from jose import jwt

from notebox.shared.auth import BearerAuth, create_access_token, resolve_token


@pytest.mark.anyio
async def test_bearer_auth_resolves_owner_or_none():
    assert await BearerAuth("demo").current_user_id() == "demo-user"
    assert await BearerAuth(create_access_token("u-42")).current_user_id() == "u-42"
    assert await BearerAuth(create_access_token("u-42", minutes=-5)).current_user_id() is None
    assert await BearerAuth("not-a-jwt").current_user_id() is None
    assert await BearerAuth(None).current_user_id() is None


def test_token_only_names_the_owner():
    token = create_access_token("u-42")
    assert set(jwt.get_unverified_claims(token)) == {"sub", "iat", "exp"}
    principal = resolve_token(token)
    assert (principal.owner_id, principal.mode) == ("u-42", "jwt")


def test_register_token_me_flow(client):
    r = client.post("/auth/register", json={"email": "Ada@Example.com", "password": "s3cret!"})
    assert r.status_code == 201
    owner_id = r.json()["data"]["owner_id"]
    assert r.json()["data"]["email"] == "ada@example.com"

    dup = client.post("/auth/register", json={"email": "ada@example.com", "password": "s3cret!"})
    assert dup.status_code == 400
    assert dup.json()["detail"]["error"]["code"] == "email_taken"

    bad = client.post("/auth/token", data={"username": "ada@example.com", "password": "wrong"})
    assert bad.status_code == 401

    tok = client.post("/auth/token", data={"username": "ada@example.com", "password": "s3cret!"})
    assert tok.status_code == 200 and tok.json()["demo"] is False
    headers = {"Authorization": f"Bearer {tok.json()['access_token']}"}

    created = client.post("/notes", json={"title": "Mine", "content": "Only mine."}, headers=headers)
    assert created.json()["data"]["user_id"] == owner_id

    me = client.get("/auth/me", headers=headers).json()["data"]
    assert me == {"owner_id": owner_id, "email": "ada@example.com", "note_count": 1, "mode": "jwt"}


def test_demo_owner_has_notes_but_no_account(client, demo_headers):
    tok = client.post("/auth/token", data={"username": "demo-user", "password": "anything"})
    assert tok.json() == {"access_token": "demo", "token_type": "bearer", "demo": True}

    me = client.get("/auth/me", headers=demo_headers).json()["data"]
    assert me == {"owner_id": "demo-user", "email": None, "note_count": 0, "mode": "demo"}
