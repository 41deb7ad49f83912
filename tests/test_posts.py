"""
API tests for post CRUD, ownership and the delete-with-comments guard.
"""

import pytest


async def _create_post(client, headers, author_id, **overrides):
    body = {"title": "T", "content": "C", "published": False, "authorId": author_id}
    body.update(overrides)
    resp = await client.post("/posts", json=body, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()


class TestCreatePost:
    @pytest.mark.asyncio
    async def test_create_with_published_false(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id)
        assert post["title"] == "T"
        assert post["content"] == "C"
        assert post["published"] is False
        assert post["authorId"] == user_id

    @pytest.mark.asyncio
    @pytest.mark.parametrize("missing", ["title", "content", "published", "authorId"])
    async def test_missing_field(self, client, alice, missing):
        user_id, headers = alice
        body = {"title": "T", "content": "C", "published": True, "authorId": user_id}
        body.pop(missing)
        resp = await client.post("/posts", json=body, headers=headers)
        assert resp.status_code == 400

    @pytest.mark.asyncio
    async def test_unknown_author(self, client, alice):
        _, headers = alice
        resp = await client.post(
            "/posts",
            json={"title": "T", "content": "C", "published": True, "authorId": 9999},
            headers=headers,
        )
        assert resp.status_code == 404
        assert resp.json()["error"] == "Author not found."

    @pytest.mark.asyncio
    async def test_requires_token(self, client):
        resp = await client.post(
            "/posts",
            json={"title": "T", "content": "C", "published": True, "authorId": 1},
        )
        assert resp.status_code == 401


class TestReadPosts:
    @pytest.mark.asyncio
    async def test_list_includes_comments(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id)
        await client.post("/comments", json={"content": "hi", "postId": post["id"]}, headers=headers)

        resp = await client.get("/posts")
        assert resp.status_code == 200
        posts = resp.json()
        assert len(posts) == 1
        assert [c["content"] for c in posts[0]["comments"]] == ["hi"]

    @pytest.mark.asyncio
    async def test_get_by_id(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id)
        resp = await client.get(f"/posts/{post['id']}")
        assert resp.status_code == 200
        assert resp.json()["comments"] == []

    @pytest.mark.asyncio
    async def test_get_missing(self, client):
        resp = await client.get("/posts/42")
        assert resp.status_code == 404
        assert resp.json() == {"error": "Post not found"}

    @pytest.mark.asyncio
    async def test_oversized_id_is_400(self, client):
        resp = await client.get("/posts/99999999999999999999")
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid post ID"

    @pytest.mark.asyncio
    async def test_oversized_author_id_is_400(self, client, alice):
        _, headers = alice
        resp = await client.post(
            "/posts",
            json={"title": "T", "content": "C", "published": True, "authorId": 99999999999999999999},
            headers=headers,
        )
        assert resp.status_code == 400


class TestUpdatePost:
    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id, published=True)

        resp = await client.put(f"/posts/{post['id']}", json={"title": "New"}, headers=headers)
        assert resp.status_code == 200
        updated = resp.json()
        assert updated["title"] == "New"
        assert updated["content"] == "C"
        assert updated["published"] is True

    @pytest.mark.asyncio
    async def test_can_unpublish(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id, published=True)
        resp = await client.put(f"/posts/{post['id']}", json={"published": False}, headers=headers)
        assert resp.json()["published"] is False

    @pytest.mark.asyncio
    async def test_non_owner_forbidden(self, client, alice, bob):
        user_id, headers = alice
        _, bob_headers = bob
        post = await _create_post(client, headers, user_id)

        resp = await client.put(
            f"/posts/{post['id']}",
            json={"title": "Hijack", "content": "x", "published": True},
            headers=bob_headers,
        )
        assert resp.status_code == 403

        unchanged = (await client.get(f"/posts/{post['id']}")).json()
        assert unchanged["title"] == "T"

    @pytest.mark.asyncio
    async def test_invalid_id(self, client, alice):
        _, headers = alice
        resp = await client.put("/posts/abc", json={"title": "x"}, headers=headers)
        assert resp.status_code == 400
        assert resp.json()["error"] == "Invalid post ID"

    @pytest.mark.asyncio
    async def test_missing_post(self, client, alice):
        _, headers = alice
        resp = await client.put("/posts/999", json={"title": "x"}, headers=headers)
        assert resp.status_code == 404


class TestDeletePost:
    @pytest.mark.asyncio
    async def test_delete_without_comments(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id)

        resp = await client.delete(f"/posts/{post['id']}", headers=headers)
        assert resp.status_code == 204
        assert (await client.get(f"/posts/{post['id']}")).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_blocked_by_comments(self, client, alice):
        user_id, headers = alice
        post = await _create_post(client, headers, user_id)
        for text in ("one", "two"):
            await client.post("/comments", json={"content": text, "postId": post["id"]}, headers=headers)

        resp = await client.delete(f"/posts/{post['id']}", headers=headers)
        assert resp.status_code == 400
        body = resp.json()
        assert "warning" in body
        assert body["postId"] == post["id"]
        assert (await client.get(f"/posts/{post['id']}")).status_code == 200

    @pytest.mark.asyncio
    async def test_delete_missing(self, client, alice):
        _, headers = alice
        assert (await client.delete("/posts/999", headers=headers)).status_code == 404

    @pytest.mark.asyncio
    async def test_delete_requires_token(self, client):
        assert (await client.delete("/posts/1")).status_code == 401
