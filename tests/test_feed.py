from thethought.feed.service import pagination_meta, offset_for, can_view
from thethought.posts.models import Post

from conftest import auth


def test_pagination_meta_second_page():
    meta = pagination_meta(2, 10, 15, "Posts")
    assert meta == {
        "currentPage": 2,
        "totalPages": 2,
        "totalPosts": 15,
        "hasNext": False,
        "hasPrev": True,
    }


def test_pagination_meta_empty():
    meta = pagination_meta(1, 10, 0, "Reels")
    assert meta["totalPages"] == 0
    assert meta["totalReels"] == 0
    assert meta["hasNext"] is False
    assert meta["hasPrev"] is False


def test_offset_for():
    assert offset_for(1, 10) == 0
    assert offset_for(3, 20) == 40


def test_can_view_rules():
    post = Post(user_id=1, content="x", visibility="followers")
    assert can_view(post, 1, False)
    assert can_view(post, 2, True)
    assert not can_view(post, 2, False)
    assert not can_view(post, None, False)

    post.visibility = "private"
    assert can_view(post, 1, False)
    assert not can_view(post, 2, True)


async def test_page_two_of_fifteen_posts(client, alice):
    for i in range(15):
        r = await client.post("/api/posts/", json={"content": f"thought {i}"}, headers=alice["headers"])
        assert r.status_code == 201

    r = await client.get("/api/posts/", params={"page": 2, "limit": 10})
    assert r.status_code == 200
    body = r.json()
    assert len(body["posts"]) == 5
    assert body["pagination"]["hasNext"] is False
    assert body["pagination"]["hasPrev"] is True
    assert body["pagination"]["totalPosts"] == 15
    # más nuevo primero: la página 2 termina con el primero publicado
    assert body["posts"][-1]["content"] == "thought 0"


async def test_feed_visibility(client, alice, bob, carol):
    for vis in ("public", "followers", "private"):
        r = await client.post(
            "/api/posts/", json={"content": f"alice {vis}", "visibility": vis}, headers=alice["headers"]
        )
        assert r.status_code == 201

    # anónimo: solo públicos
    r = await client.get("/api/posts/")
    assert [p["content"] for p in r.json()["posts"]] == ["alice public"]

    # bob sigue a alice: públicos + followers, nunca privados
    r = await client.post("/api/users/alice/follow/", headers=bob["headers"])
    assert r.json()["isFollowing"] is True
    r = await client.get("/api/posts/", headers=bob["headers"])
    assert [p["content"] for p in r.json()["posts"]] == ["alice followers", "alice public"]

    # carol no sigue a nadie
    r = await client.get("/api/posts/", params={"token": carol["token"]})
    assert [p["content"] for p in r.json()["posts"]] == ["alice public"]


async def test_limit_out_of_range_is_400(client):
    r = await client.get("/api/posts/", params={"limit": 500})
    assert r.status_code == 400
    assert "error" in r.json()


async def test_invalid_token_is_401(client):
    r = await client.get("/api/posts/", headers=auth("nope"))
    assert r.status_code == 401
    assert r.json() == {"error": "invalid token"}
