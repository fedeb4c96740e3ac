"""Users — public profiles, the admin list, account changes."""

import pytest


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.asyncio
async def test_public_profile_hides_email(client, register, category):
    user, token = await register("quinn", first_name="Quinn")
    for title, status in (("Shown", "published"), ("Hidden", "draft")):
        r = await client.post(
            "/api/posts",
            json={
                "title": title,
                "content": "Some content that is long enough.",
                "category_id": str(category.id),
                "status": status,
            },
            headers=_auth(token),
        )
        assert r.status_code == 201

    r = await client.get(f"/api/users/{user['id']}")
    assert r.status_code == 200
    profile = r.json()["data"]["user"]
    assert profile["username"] == "quinn"
    assert profile["full_name"] == "Quinn"
    assert "email" not in profile
    assert [p["title"] for p in profile["posts"]] == ["Shown"]


@pytest.mark.asyncio
async def test_unknown_profile_is_404(client):
    r = await client.get("/api/users/00000000-0000-0000-0000-000000000000")
    assert r.status_code == 404
    assert r.json()["error"] == "User not found"


@pytest.mark.asyncio
async def test_admin_lists_users(client, register, make_admin):
    await register("rupert")
    await register("sybil")
    _, token = await make_admin()

    r = await client.get("/api/users?search=rup", headers=_auth(token))
    assert r.status_code == 200
    data = r.json()["data"]
    assert [u["username"] for u in data["users"]] == ["rupert"]
    assert data["pagination"]["total"] == 1

    r = await client.get("/api/users?role=admin", headers=_auth(token))
    assert [u["role"] for u in r.json()["data"]["users"]] == ["admin"]


@pytest.mark.asyncio
async def test_user_list_is_admin_only(client, register):
    _, token = await register()
    r = await client.get("/api/users", headers=_auth(token))
    assert r.status_code == 403

    r = await client.get("/api/users")
    assert r.status_code == 401


@pytest.mark.asyncio
async def test_admin_deactivates_account(client, register, make_admin):
    user, user_token = await register("trent")
    _, admin_token = await make_admin()

    r = await client.patch(
        f"/api/users/{user['id']}",
        json={"is_active": False},
        headers=_auth(admin_token),
    )
    assert r.status_code == 200
    assert r.json()["data"]["user"]["is_active"] is False

    # The still-unexpired token stops working on the next request
    r = await client.get("/api/auth/me", headers=_auth(user_token))
    assert r.status_code == 401
    assert r.json()["message"] == "User account is deactivated"


@pytest.mark.asyncio
async def test_promoted_user_gets_admin_access(client, register, make_admin):
    user, user_token = await register("victor")
    _, admin_token = await make_admin()

    assert (await client.get("/api/users", headers=_auth(user_token))).status_code == 403
    r = await client.patch(
        f"/api/users/{user['id']}", json={"role": "admin"}, headers=_auth(admin_token)
    )
    assert r.json()["data"]["user"]["role"] == "admin"
    assert (await client.get("/api/users", headers=_auth(user_token))).status_code == 200


@pytest.mark.asyncio
async def test_patch_rejects_unknown_role(client, register, make_admin):
    user, _ = await register()
    _, admin_token = await make_admin()
    r = await client.patch(
        f"/api/users/{user['id']}", json={"role": "owner"}, headers=_auth(admin_token)
    )
    assert r.status_code == 400
