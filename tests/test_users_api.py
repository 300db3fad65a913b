# tests/test_users_api.py
# PURPOSE: registration issues a usable key exactly once.

from todo_api.auth import authenticate, hash_api_key
from todo_api.db_models import UserDB
from todo_api.store_db import get_user_by_key

from conftest import register


def test_register_returns_30_char_alphanumeric_key(client):
    r = client.post("/v1/users/register", json={"email_address": "a@b.com"})
    assert r.status_code == 201
    body = r.json()
    assert set(body) == {"api_key"}
    assert len(body["api_key"]) == 30
    assert body["api_key"].isalnum()


def test_register_then_list_is_empty(client):
    key = register(client, "a@b.com")
    r = client.get("/v1/todos?page=0", headers={"X-Api-Key": key})
    assert r.status_code == 200
    assert r.json()["items"] == []
    assert r.json()["total_count"] == 0


def test_only_digest_is_stored(app, client):
    key = register(client, "a@b.com")

    db = app.state.context.session_factory()
    try:
        user = db.query(UserDB).one()
        assert user.api_key_hash == hash_api_key(key)
        assert user.api_key_hash != key
        # digest lookup resolves to the same user as the gate
        assert get_user_by_key(db, hash_api_key(key)).id == user.id
        assert authenticate({"X-Api-Key": key}, db) == user.id
    finally:
        db.close()


def test_plaintext_key_never_returned_again(client):
    key = register(client, "a@b.com")
    auth = {"X-Api-Key": key}

    created = client.post("/v1/todos", json={"title": "t", "description": "d"}, headers=auth)
    tid = created.json()["id"]
    responses = [
        created,
        client.get("/v1/todos?page=0", headers=auth),
        client.get(f"/v1/todos/{tid}", headers=auth),
        client.get("/v1/"),
    ]
    for r in responses:
        assert key not in r.text
        assert hash_api_key(key) not in r.text


def test_each_registration_gets_its_own_key(client):
    k1 = register(client, "a@b.com")
    k2 = register(client, "a@b.com")
    assert k1 != k2


def test_register_rejects_invalid_email(client):
    r = client.post("/v1/users/register", json={"email_address": "not-an-email"})
    assert r.status_code == 422
    assert r.json()["message"] == "ValidationError"
