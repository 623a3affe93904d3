"""
Account endpoint tests — registration, login, profile changes, soft
deletion and follow relationships.
"""
import pytest
from httpx import AsyncClient

from conftest import auth_headers, register


# ---------------------------------------------------------------------------
# Registration and login
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_account(async_client: AsyncClient):
    resp = await async_client.post("/accounts", json={
        "username": "marcelo",
        "name": "Marcelo",
        "description": "Hello there",
        "email": "marcelo@example.com",
        "password": "23042-secret",
    })
    assert resp.status_code == 200
    account = resp.json()
    assert account["id"]
    assert account["username"] == "marcelo"
    assert account["deleted"] is False
    assert "password" not in account


@pytest.mark.asyncio
async def test_create_account_duplicate_username_returns_409(async_client: AsyncClient):
    await register(async_client, "dup")
    resp = await async_client.post("/accounts", json={
        "username": "user_dup",
        "name": "Other",
        "email": "other@example.com",
        "password": "secret-password",
    })
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_account_duplicate_email_returns_409(async_client: AsyncClient):
    await register(async_client, "dupmail")
    resp = await async_client.post("/accounts", json={
        "username": "someone_else",
        "name": "Other",
        "email": "dupmail@example.com",
        "password": "secret-password",
    })
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_create_account_invalid_email_returns_400(async_client: AsyncClient):
    resp = await async_client.post("/accounts", json={
        "username": "bademail",
        "name": "Bad",
        "email": "not-an-email",
        "password": "secret-password",
    })
    assert resp.status_code == 400
    assert "email" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_deleted_account_releases_username(async_client: AsyncClient):
    _, headers = await register(async_client, "reuse")
    await async_client.request("DELETE", "/accounts", headers=headers)

    resp = await async_client.post("/accounts", json={
        "username": "user_reuse",
        "name": "Again",
        "email": "reuse@example.com",
        "password": "secret-password",
    })
    assert resp.status_code == 200


@pytest.mark.asyncio
async def test_login_returns_usable_token(async_client: AsyncClient):
    account_id, _ = await register(async_client, "login")

    resp = await async_client.post(
        "/accounts/login", json={"email": "login@example.com", "password": "secret-password"}
    )
    assert resp.status_code == 200
    token = resp.json()["token"]

    me = await async_client.get(
        f"/accounts/{account_id}", headers={"Authorization": f"Bearer {token}"}
    )
    assert me.status_code == 200
    assert me.json()["id"] == account_id


@pytest.mark.asyncio
async def test_login_wrong_password_returns_401(async_client: AsyncClient):
    await register(async_client, "wrongpw")
    resp = await async_client.post(
        "/accounts/login", json={"email": "wrongpw@example.com", "password": "nope"}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_login_unknown_email_returns_401(async_client: AsyncClient):
    resp = await async_client.post(
        "/accounts/login", json={"email": "ghost@example.com", "password": "nope"}
    )
    assert resp.status_code == 401


# ---------------------------------------------------------------------------
# Profile
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_get_unknown_account_returns_404(async_client: AsyncClient):
    _, headers = await register(async_client, "lookup")
    resp = await async_client.get("/accounts/missing-id", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_update_account_changes_only_supplied_fields(async_client: AsyncClient):
    account_id, headers = await register(async_client, "partial")
    before = (await async_client.get(f"/accounts/{account_id}", headers=headers)).json()

    resp = await async_client.put("/accounts", json={"name": "Renamed"}, headers=headers)
    assert resp.status_code == 200
    after = resp.json()
    assert after["name"] == "Renamed"
    for field in ("username", "email", "description", "created_at"):
        assert after[field] == before[field]


@pytest.mark.asyncio
async def test_update_account_password_allows_new_login(async_client: AsyncClient):
    _, headers = await register(async_client, "newpw")
    resp = await async_client.put("/accounts", json={"password": "brand-new-pw"}, headers=headers)
    assert resp.status_code == 200

    old = await async_client.post(
        "/accounts/login", json={"email": "newpw@example.com", "password": "secret-password"}
    )
    new = await async_client.post(
        "/accounts/login", json={"email": "newpw@example.com", "password": "brand-new-pw"}
    )
    assert old.status_code == 401
    assert new.status_code == 200


@pytest.mark.asyncio
async def test_update_account_taken_username_returns_409(async_client: AsyncClient):
    await register(async_client, "taken")
    _, headers = await register(async_client, "taker")
    resp = await async_client.put("/accounts", json={"username": "user_taken"}, headers=headers)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_update_account_empty_body_returns_400(async_client: AsyncClient):
    _, headers = await register(async_client, "empty_update")
    resp = await async_client.put("/accounts", json={}, headers=headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_delete_account_is_soft(async_client: AsyncClient):
    account_id, headers = await register(async_client, "delete_me")
    resp = await async_client.request("DELETE", "/accounts", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["deleted"] is True

    lookup = await async_client.get(f"/accounts/{account_id}", headers=headers)
    assert lookup.status_code == 404

    again = await async_client.request("DELETE", "/accounts", headers=headers)
    assert again.status_code == 404


# ---------------------------------------------------------------------------
# Follows
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_follow_and_list_both_directions(async_client: AsyncClient):
    alice_id, alice = await register(async_client, "alice")
    bob_id, bob = await register(async_client, "bob")

    resp = await async_client.post(f"/accounts/follow/{bob_id}", headers=alice)
    assert resp.status_code == 200
    assert resp.json()["account_id_followed"] == bob_id

    following = await async_client.get("/accounts/following", headers=alice)
    assert [a["id"] for a in following.json()["items"]] == [bob_id]

    followers = await async_client.get("/accounts/followers", headers=bob)
    assert [a["id"] for a in followers.json()["items"]] == [alice_id]

    other_view = await async_client.get(
        "/accounts/followers", params={"account_id": bob_id}, headers=alice
    )
    assert [a["id"] for a in other_view.json()["items"]] == [alice_id]


@pytest.mark.asyncio
async def test_follow_twice_returns_409(async_client: AsyncClient):
    _, alice = await register(async_client, "alice2")
    bob_id, _ = await register(async_client, "bob2")
    await async_client.post(f"/accounts/follow/{bob_id}", headers=alice)

    resp = await async_client.post(f"/accounts/follow/{bob_id}", headers=alice)
    assert resp.status_code == 409


@pytest.mark.asyncio
async def test_follow_self_returns_400(async_client: AsyncClient):
    account_id, headers = await register(async_client, "narcissus")
    resp = await async_client.post(f"/accounts/follow/{account_id}", headers=headers)
    assert resp.status_code == 400


@pytest.mark.asyncio
async def test_follow_unknown_account_returns_404(async_client: AsyncClient):
    _, headers = await register(async_client, "lonely")
    resp = await async_client.post("/accounts/follow/nobody", headers=headers)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_unfollow_then_follow_again(async_client: AsyncClient):
    _, alice = await register(async_client, "alice3")
    bob_id, _ = await register(async_client, "bob3")
    await async_client.post(f"/accounts/follow/{bob_id}", headers=alice)

    resp = await async_client.delete(f"/accounts/follow/{bob_id}", headers=alice)
    assert resp.status_code == 200
    following = await async_client.get("/accounts/following", headers=alice)
    assert following.json()["items"] == []

    again = await async_client.post(f"/accounts/follow/{bob_id}", headers=alice)
    assert again.status_code == 200


@pytest.mark.asyncio
async def test_unfollow_when_not_following_returns_404(async_client: AsyncClient):
    _, alice = await register(async_client, "alice4")
    bob_id, _ = await register(async_client, "bob4")
    resp = await async_client.delete(f"/accounts/follow/{bob_id}", headers=alice)
    assert resp.status_code == 404


@pytest.mark.asyncio
async def test_followers_unknown_account_returns_404(async_client: AsyncClient):
    resp = await async_client.get(
        "/accounts/followers", params={"account_id": "nobody"}, headers=auth_headers("nobody")
    )
    assert resp.status_code == 404


# ---------------------------------------------------------------------------
# Password length is measured in bytes
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_create_account_multibyte_password_over_limit_returns_400(async_client: AsyncClient):
    resp = await async_client.post("/accounts", json={
        "username": "accented",
        "name": "Accented",
        "email": "accented@example.com",
        "password": "é" * 40,
    })
    assert resp.status_code == 400
    assert "password" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_create_account_password_at_byte_limit(async_client: AsyncClient):
    resp = await async_client.post("/accounts", json={
        "username": "accented36",
        "name": "Accented",
        "email": "accented36@example.com",
        "password": "é" * 36,
    })
    assert resp.status_code == 200

    login = await async_client.post(
        "/accounts/login", json={"email": "accented36@example.com", "password": "é" * 36}
    )
    assert login.status_code == 200


@pytest.mark.asyncio
async def test_update_account_multibyte_password_over_limit_returns_400(async_client: AsyncClient):
    _, headers = await register(async_client, "accent_update")
    resp = await async_client.put("/accounts", json={"password": "é" * 40}, headers=headers)
    assert resp.status_code == 400
    assert "password" in resp.json()["errors"]


@pytest.mark.asyncio
async def test_login_overlong_password_returns_401(async_client: AsyncClient):
    await register(async_client, "overlong")
    resp = await async_client.post(
        "/accounts/login", json={"email": "overlong@example.com", "password": "x" * 100}
    )
    assert resp.status_code == 401


@pytest.mark.asyncio
async def test_update_account_invalid_email_returns_400(async_client: AsyncClient):
    _, headers = await register(async_client, "bad_update_mail")
    resp = await async_client.put("/accounts", json={"email": "nope@"}, headers=headers)
    assert resp.status_code == 400
    assert "email" in resp.json()["errors"]
