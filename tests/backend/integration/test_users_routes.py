from pathlib import Path

import pytest

from klubok.config import settings
from klubok.core.security import create_access_token

pytestmark = pytest.mark.asyncio


async def test_list_users(client, admin_headers):
    resp = await client.get("/users", headers=admin_headers)
    assert resp.status_code == 200
    users = resp.json()["users"]
    assert [u["username"] for u in users] == ["admin", "alice", "bob"]
    for user in users:
        assert set(user) == {"id", "username", "email", "avatar", "phoneNumber", "createdAt"}


async def test_list_users_requires_auth(client):
    resp = await client.get("/users")
    assert resp.status_code == 401


async def test_update_profile_fields(client, auth_header_factory):
    headers = await auth_header_factory("alice@klubok.com", "test123")
    resp = await client.put(
        "/users/profile",
        headers=headers,
        data={"username": "alice_w", "email": "alice.w@klubok.com"},
    )
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["username"] == "alice_w"
    assert user["email"] == "alice.w@klubok.com"

    relogin = await client.post("/login", json={"email": "alice.w@klubok.com", "password": "test123"})
    assert relogin.status_code == 200


async def test_update_profile_password(client, auth_header_factory):
    headers = await auth_header_factory("bob@klubok.com", "test123")

    wrong = await client.put(
        "/users/profile",
        headers=headers,
        data={"currentPassword": "wrong", "newPassword": "bob-new-pass"},
    )
    assert wrong.status_code == 400

    ok = await client.put(
        "/users/profile",
        headers=headers,
        data={"currentPassword": "test123", "newPassword": "bob-new-pass"},
    )
    assert ok.status_code == 200

    old_login = await client.post("/login", json={"email": "bob@klubok.com", "password": "test123"})
    assert old_login.status_code == 401
    new_login = await client.post("/login", json={"email": "bob@klubok.com", "password": "bob-new-pass"})
    assert new_login.status_code == 200


async def test_update_profile_avatar(client, admin_headers):
    resp = await client.put(
        "/users/profile",
        headers=admin_headers,
        files={"avatar": ("me.png", b"\x89PNG fake image bytes", "image/png")},
    )
    assert resp.status_code == 200
    user = resp.json()["user"]
    assert user["avatar"] == f"/avatars/{user['id']}.png"
    stored = Path(settings.AVATAR_DIR) / f"{user['id']}.png"
    assert stored.read_bytes() == b"\x89PNG fake image bytes"

    served = await client.get(user["avatar"])
    assert served.status_code == 200
    assert served.content == b"\x89PNG fake image bytes"


async def test_update_profile_empty_avatar_is_ignored(client, admin_headers):
    resp = await client.put(
        "/users/profile",
        headers=admin_headers,
        files={"avatar": ("empty.jpg", b"", "image/jpeg")},
    )
    assert resp.status_code == 200
    assert resp.json()["user"]["avatar"] is None


async def test_update_profile_conflict(client, auth_header_factory):
    headers = await auth_header_factory("alice@klubok.com", "test123")
    resp = await client.put("/users/profile", headers=headers, data={"username": "bob"})
    assert resp.status_code == 409


async def test_update_profile_unknown_user(client):
    headers = {"Authorization": f"Bearer {create_access_token('vanished')}"}
    resp = await client.put("/users/profile", headers=headers, data={"username": "ghost"})
    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"


async def test_update_profile_requires_auth(client):
    resp = await client.put("/users/profile", data={"username": "anyone"})
    assert resp.status_code == 401


async def _upload_avatar(client, headers, content, content_type="image/png", data=None):
    return await client.put(
        "/users/profile",
        headers=headers,
        data=data or {},
        files={"avatar": ("me.png", content, content_type)},
    )


async def test_rejected_password_change_keeps_avatar(client, auth_header_factory):
    headers = await auth_header_factory("bob@klubok.com", "test123")
    first = await _upload_avatar(client, headers, b"ORIGINAL")
    assert first.status_code == 200
    avatar_url = first.json()["user"]["avatar"]

    rejected = await _upload_avatar(
        client,
        headers,
        b"REPLACED",
        data={"currentPassword": "wrong", "newPassword": "bob-new-pass"},
    )
    assert rejected.status_code == 400

    served = await client.get(avatar_url)
    assert served.content == b"ORIGINAL"


async def test_conflicting_update_writes_no_avatar(client, auth_header_factory):
    headers = await auth_header_factory("alice@klubok.com", "test123")
    resp = await _upload_avatar(client, headers, b"NEVER STORED", content_type="image/jpeg", data={"username": "bob"})
    assert resp.status_code == 409

    me = await client.get("/me", headers=headers)
    user_id = me.json()["user"]["id"]
    assert me.json()["user"]["avatar"] is None
    assert not (Path(settings.AVATAR_DIR) / f"{user_id}.jpg").exists()


async def test_avatar_extension_change_replaces_file(client, admin_headers):
    await _upload_avatar(client, admin_headers, b"PNG BYTES")
    resp = await _upload_avatar(client, admin_headers, b"JPEG BYTES", content_type="image/jpeg")
    user = resp.json()["user"]
    assert user["avatar"] == f"/avatars/{user['id']}.jpg"
    assert not (Path(settings.AVATAR_DIR) / f"{user['id']}.png").exists()


async def test_non_image_avatar_is_rejected(client, admin_headers):
    resp = await _upload_avatar(client, admin_headers, b"#!/bin/sh\necho hi\n", content_type="text/plain")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "VALIDATION"

    me = await client.get("/me", headers=admin_headers)
    assert me.json()["user"]["avatar"] is None
    assert not list(Path(settings.AVATAR_DIR).glob("*"))


async def test_oversized_avatar_is_rejected(client, admin_headers, monkeypatch):
    monkeypatch.setattr(settings, "AVATAR_MAX_BYTES", 16)
    at_limit = await _upload_avatar(client, admin_headers, b"x" * 16)
    assert at_limit.status_code == 200

    too_big = await _upload_avatar(client, admin_headers, b"y" * 17)
    assert too_big.status_code == 400
    served = await client.get(at_limit.json()["user"]["avatar"])
    assert served.content == b"x" * 16
