import asyncio
import json

import pytest

from livefeed.core.security import TokenService
from livefeed.main import app
from livefeed.models.post import Post
from livefeed.services.stores import ContentStore


pytestmark = pytest.mark.asyncio


class MockWebSocket:
    def __init__(self):
        self.sent_texts = []

    async def send_text(self, text: str):
        self.sent_texts.append(text)


async def test_create_post_and_broadcast(client, auth_header_factory, new_account):
    headers, user = await auth_header_factory(new_account())
    hub = app.state.hub
    ws = MockWebSocket()
    observer = hub.register(ws)
    try:
        resp = await client.post(
            "/api/v1/posts",
            headers=headers,
            json={"title": "Hello", "content": "first post"},
        )
        events = []
        while not observer.queue.empty():
            events.append(json.loads(observer.queue.get_nowait()))
    finally:
        hub.unregister(ws)

    assert resp.status_code == 201
    data = resp.json()["data"]
    assert data["title"] == "Hello"
    assert data["content"] == "first post"
    assert data["authorId"] == user["id"]
    assert data["author"] == {"id": user["id"], "name": user["name"]}
    assert data["published"] is True
    assert isinstance(data["createdAt"], str) and data["createdAt"]

    assert len(events) == 1
    assert events[0] == {"type": "newEntry", "data": data}
    assert await Post.all().count() == 1


async def test_create_post_without_content(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": "Just a title"})
    assert resp.status_code == 201
    assert resp.json()["data"]["content"] == ""


@pytest.mark.parametrize(
    "headers",
    [
        {},
        {"Authorization": "Bearer not-a-token"},
        {"Authorization": "Basic dXNlcjpwYXNz"},
        {"Authorization": "Bearer " + TokenService("someone-elses-secret-0123456789abc").issue("x")},
    ],
)
async def test_create_post_requires_valid_token(client, headers):
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": "Hello"})
    assert resp.status_code == 401
    assert resp.json()["error"]["code"] == "unauthenticated"
    assert await Post.all().count() == 0


async def test_create_post_empty_title(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": "", "content": "x"})
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_input"
    assert await Post.all().count() == 0


async def test_created_posts_are_listed_newest_first(client, auth_header_factory, new_account):
    headers, user = await auth_header_factory(new_account())
    for title in ("one", "two", "three"):
        resp = await client.post("/api/v1/posts", headers=headers, json={"title": title})
        assert resp.status_code == 201
        await asyncio.sleep(0.01)

    posts = await ContentStore().list_published()

    assert [p.title for p in posts] == ["three", "two", "one"]
    assert all(p.author.name == user["name"] for p in posts)


async def test_create_post_long_title_is_stored_whole(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    title = "T" * 300
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": title})
    assert resp.status_code == 201
    assert resp.json()["data"]["title"] == title
    assert (await Post.first()).title == title


async def test_create_post_title_is_stored_trimmed(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": "  Hello  "})
    assert resp.status_code == 201
    assert resp.json()["data"]["title"] == "Hello"
    assert (await Post.first()).title == "Hello"


async def test_create_post_wrong_title_type_is_invalid_input(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    resp = await client.post("/api/v1/posts", headers=headers, json={"title": 123})
    assert resp.status_code == 400
    assert resp.json() == {
        "success": False,
        "error": {"code": "invalid_input", "message": "Malformed request body"},
    }
    assert await Post.all().count() == 0


async def test_create_post_non_json_body_is_invalid_input(client, auth_header_factory, new_account):
    headers, _ = await auth_header_factory(new_account())
    resp = await client.post(
        "/api/v1/posts",
        headers={**headers, "Content-Type": "application/json"},
        content=b"{not json",
    )
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "invalid_input"
    assert await Post.all().count() == 0
