"""Posts over HTTP — CRUD, visibility, ownership, views, likes, filters."""

import uuid

import pytest
from sqlalchemy import select

from inkwell.db.models import Post
from inkwell.services.post_service import PostService

CONTENT = "FastAPI makes building APIs pleasant. " * 10


def _auth(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def create_post(client, category):
    async def _create(token: str, **overrides):
        body = {
            "title": "Getting Started",
            "content": CONTENT,
            "category_id": str(category.id),
            "status": "published",
            "tags": ["python", "fastapi"],
            **overrides,
        }
        r = await client.post("/api/posts", json=body, headers=_auth(token))
        assert r.status_code == 201, r.text
        return r.json()["data"]["post"]

    return _create


# ═══════════════════════════════════════════════════════════
# Create
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_create_post(register, create_post):
    user, token = await register("writer")
    post = await create_post(token, title="Hello, World!")
    assert post["title"] == "Hello, World!"
    assert post["slug"] == "hello-world"
    assert post["author"]["id"] == user["id"]
    assert post["category"]["name"] == "Technology"
    assert post["tags"] == ["python", "fastapi"]
    assert post["excerpt"].endswith("...")
    assert post["read_time"] == 1
    assert post["published_at"] is not None
    assert post["views"] == 0
    assert post["like_count"] == 0


@pytest.mark.asyncio
async def test_create_post_defaults_to_draft(register, create_post):
    _, token = await register()
    post = await create_post(token, status=None)
    assert post["status"] == "draft"
    assert post["published_at"] is None


@pytest.mark.asyncio
async def test_create_post_requires_auth(client, category):
    r = await client.post(
        "/api/posts",
        json={"title": "x", "content": CONTENT, "category_id": str(category.id)},
    )
    assert r.status_code == 401
    assert r.json()["message"] == "No token provided"


@pytest.mark.asyncio
async def test_create_post_validation(client, register):
    _, token = await register()
    r = await client.post(
        "/api/posts",
        json={"title": "", "content": "short", "category_id": "bad"},
        headers=_auth(token),
    )
    assert r.status_code == 400
    assert "Invalid category ID" in r.json()["error"]


@pytest.mark.asyncio
async def test_create_post_unknown_category(client, register):
    _, token = await register()
    r = await client.post(
        "/api/posts",
        json={
            "title": "Hi",
            "content": CONTENT,
            "category_id": "00000000-0000-0000-0000-000000000000",
        },
        headers=_auth(token),
    )
    assert r.status_code == 400
    assert r.json()["error"] == "Category not found"


@pytest.mark.asyncio
async def test_same_title_gets_suffixed_slug(register, create_post):
    _, alice = await register()
    _, bob = await register()
    first = await create_post(alice, title="Same Title")
    second = await create_post(bob, title="Same Title")
    assert first["slug"] == "same-title"
    assert second["slug"] == f"same-title-{second['id'].replace('-', '')[:8]}"


@pytest.mark.asyncio
async def test_update_keeps_own_slug(client, register, create_post):
    _, token = await register()
    post = await create_post(token, title="Stable Title")
    r = await client.put(
        f"/api/posts/{post['id']}",
        json={
            "title": "Stable Title",
            "content": "Edited content for the same post.",
            "category_id": post["category"]["id"],
        },
        headers=_auth(token),
    )
    assert r.status_code == 200
    assert r.json()["data"]["post"]["slug"] == "stable-title"


# ═══════════════════════════════════════════════════════════
# Read & visibility
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_get_post_counts_views(client, register, create_post):
    _, token = await register()
    post = await create_post(token)
    r1 = await client.get(f"/api/posts/{post['id']}")
    r2 = await client.get(f"/api/posts/{post['id']}")
    assert r1.json()["data"]["post"]["views"] == 1
    assert r2.json()["data"]["post"]["views"] == 2


@pytest.mark.asyncio
async def test_concurrent_views_are_all_counted(app, register, create_post):
    _, token = await register()
    post = await create_post(token)
    post_id = uuid.UUID(post["id"])

    factory = app.state.session_factory
    async with factory() as first, factory() as second:
        svc_a = PostService(first, app.state.logger)
        svc_b = PostService(second, app.state.logger)
        # Both readers load the post before either records its view
        post_a = await svc_a.get_post(post_id)
        post_b = await svc_b.get_post(post_id)
        updated_at = post_a.updated_at
        await svc_a.record_view(post_a)
        await svc_b.record_view(post_b)
        assert post_b.views == 2

    async with factory() as session:
        stored = (await session.execute(select(Post).where(Post.id == post_id))).scalar_one()
        assert stored.views == 2
        assert stored.updated_at == updated_at


@pytest.mark.asyncio
async def test_missing_post_is_404(client):
    r = await client.get("/api/posts/00000000-0000-0000-0000-000000000000")
    assert r.status_code == 404
    assert r.json()["error"] == "Post not found"


@pytest.mark.asyncio
async def test_draft_visible_only_to_author_and_admin(
    client, register, make_admin, create_post
):
    _, author_token = await register("author")
    _, other_token = await register("other")
    _, admin_token = await make_admin()
    draft = await create_post(author_token, status="draft")
    url = f"/api/posts/{draft['id']}"

    assert (await client.get(url)).status_code == 404
    assert (await client.get(url, headers=_auth(other_token))).status_code == 404
    assert (await client.get(url, headers=_auth(author_token))).status_code == 200
    assert (await client.get(url, headers=_auth(admin_token))).status_code == 200


@pytest.mark.asyncio
async def test_bad_token_on_public_read_is_anonymous(client, register, create_post):
    _, token = await register()
    post = await create_post(token)
    r = await client.get(f"/api/posts/{post['id']}", headers=_auth("garbage"))
    assert r.status_code == 200


@pytest.mark.asyncio
async def test_list_shows_published_only(client, register, create_post):
    _, token = await register()
    await create_post(token, title="Public one")
    await create_post(token, title="Secret draft", status="draft")

    r = await client.get("/api/posts")
    assert r.status_code == 200
    data = r.json()["data"]
    assert [p["title"] for p in data["posts"]] == ["Public one"]
    assert data["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_list_own_drafts(client, register, create_post):
    _, token = await register()
    _, other = await register()
    await create_post(token, title="My draft", status="draft")
    await create_post(other, title="Their draft", status="draft")

    r = await client.get("/api/posts?status=draft", headers=_auth(token))
    assert [p["title"] for p in r.json()["data"]["posts"]] == ["My draft"]


@pytest.mark.asyncio
async def test_list_pagination(client, register, create_post):
    _, token = await register()
    for i in range(3):
        await create_post(token, title=f"Post {i}")

    r = await client.get("/api/posts?page=2&limit=2")
    data = r.json()["data"]
    assert len(data["posts"]) == 1
    assert data["pagination"] == {
        "page": 2,
        "limit": 2,
        "total": 3,
        "pages": 2,
        "has_next": False,
        "has_prev": True,
    }


@pytest.mark.asyncio
async def test_list_bad_pagination(client):
    r = await client.get("/api/posts?limit=500")
    assert r.status_code == 400
    assert r.json()["error"] == ["Limit must be between 1 and 100"]


@pytest.mark.asyncio
async def test_list_filters_by_tag_and_search(client, register, create_post):
    _, token = await register()
    await create_post(token, title="About Python", tags=["python"])
    await create_post(token, title="About Rust", tags=["rust"])

    r = await client.get("/api/posts?tags=rust")
    assert [p["title"] for p in r.json()["data"]["posts"]] == ["About Rust"]

    r = await client.get("/api/posts?search=python")
    assert [p["title"] for p in r.json()["data"]["posts"]] == ["About Python"]


@pytest.mark.asyncio
async def test_list_filters_by_author(client, register, create_post):
    alice, alice_token = await register()
    _, bob_token = await register()
    await create_post(alice_token, title="Alice writes")
    await create_post(bob_token, title="Bob writes")

    r = await client.get(f"/api/posts?author={alice['id']}")
    assert [p["title"] for p in r.json()["data"]["posts"]] == ["Alice writes"]


# ═══════════════════════════════════════════════════════════
# Update / delete (ownership)
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_author_updates_post(client, register, create_post):
    _, token = await register()
    post = await create_post(token)
    r = await client.put(
        f"/api/posts/{post['id']}",
        json={
            "title": "Renamed",
            "content": "Entirely new content for the post.",
            "category_id": post["category"]["id"],
            "tags": ["new", "python"],
        },
        headers=_auth(token),
    )
    assert r.status_code == 200
    updated = r.json()["data"]["post"]
    assert updated["title"] == "Renamed"
    assert updated["slug"] == "renamed"
    assert updated["tags"] == ["new", "python"]
    assert updated["excerpt"].startswith("Entirely new content")


@pytest.mark.asyncio
async def test_non_owner_cannot_update(client, register, create_post):
    _, owner = await register()
    _, intruder = await register()
    post = await create_post(owner)
    r = await client.put(
        f"/api/posts/{post['id']}",
        json={"title": "Hijacked", "content": CONTENT, "category_id": post["category"]["id"]},
        headers=_auth(intruder),
    )
    assert r.status_code == 403
    assert r.json() == {
        "success": False,
        "error": "Forbidden",
        "message": "You can only access your own resources",
    }


@pytest.mark.asyncio
async def test_admin_can_delete_any_post(client, register, make_admin, create_post):
    _, owner = await register()
    _, admin_token = await make_admin()
    post = await create_post(owner)

    r = await client.delete(f"/api/posts/{post['id']}", headers=_auth(admin_token))
    assert r.status_code == 200
    assert r.json()["message"] == "Post deleted successfully"
    assert (await client.get(f"/api/posts/{post['id']}")).status_code == 404


@pytest.mark.asyncio
async def test_non_owner_cannot_delete(client, register, create_post):
    _, owner = await register()
    _, intruder = await register()
    post = await create_post(owner)
    r = await client.delete(f"/api/posts/{post['id']}", headers=_auth(intruder))
    assert r.status_code == 403


@pytest.mark.asyncio
async def test_delete_requires_auth(client, register, create_post):
    _, owner = await register()
    post = await create_post(owner)
    r = await client.delete(f"/api/posts/{post['id']}")
    assert r.status_code == 401


# ═══════════════════════════════════════════════════════════
# Likes
# ═══════════════════════════════════════════════════════════


@pytest.mark.asyncio
async def test_like_toggles(client, register, create_post):
    _, author = await register()
    _, fan = await register()
    post = await create_post(author)
    url = f"/api/posts/{post['id']}/like"

    r = await client.post(url, headers=_auth(fan))
    assert r.status_code == 200
    assert r.json()["data"] == {"is_liked": True, "like_count": 1}

    r = await client.post(url, headers=_auth(fan))
    assert r.json()["data"] == {"is_liked": False, "like_count": 0}


@pytest.mark.asyncio
async def test_like_requires_auth(client, register, create_post):
    _, author = await register()
    post = await create_post(author)
    r = await client.post(f"/api/posts/{post['id']}/like")
    assert r.status_code == 401
