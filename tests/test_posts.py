from thethought.posts import service as posts_svc
from thethought.profile.service import DELETED_USERNAME


async def _post(client, user, content="hello world", visibility="public"):
    r = await client.post(
        "/api/posts/", json={"content": content, "visibility": visibility}, headers=user["headers"]
    )
    assert r.status_code == 201, r.text
    return r.json()["post"]


async def test_create_post_derives_hashtags(client, alice):
    r = await client.post(
        "/api/posts/", json={"content": "  hello #Foo #foo #BAR  "}, headers=alice["headers"]
    )
    assert r.status_code == 201
    body = r.json()
    assert body["message"] == "Post created successfully"
    post = body["post"]
    assert post["content"] == "hello #Foo #foo #BAR"
    assert post["hashtags"] == ["foo", "foo", "bar"]
    assert post["author"]["username"] == "alice"
    assert post["author"]["displayName"] == "Alice"
    assert post["likeCount"] == 0
    assert post["isLiked"] is False


async def test_create_requires_auth(client):
    r = await client.post("/api/posts/", json={"content": "hi"})
    assert r.status_code == 401
    assert r.json() == {"error": "missing token"}


async def test_create_validation(client, alice):
    r = await client.post("/api/posts/", json={"content": "   "}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Content is required"}

    r = await client.post("/api/posts/", json={"content": "x" * 1001}, headers=alice["headers"])
    assert r.status_code == 400

    r = await client.post(
        "/api/posts/", json={"content": "ok", "visibility": "friends"}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid visibility"}


async def test_toggle_like_twice_restores_state(client, alice, bob):
    post = await _post(client, alice)
    url = f"/api/posts/{post['id']}/like/"

    r = await client.post(url, headers=bob["headers"])
    assert r.json() == {"message": "Post liked", "isLiked": True, "likeCount": 1}

    r = await client.post(url, headers=bob["headers"])
    assert r.json() == {"message": "Post unliked", "isLiked": False, "likeCount": 0}

    r = await client.get(f"/api/posts/{post['id']}/", headers=bob["headers"])
    assert r.json()["post"]["isLiked"] is False
    assert r.json()["post"]["likeCount"] == 0


async def test_like_missing_post_is_404(client, bob):
    r = await client.post("/api/posts/999/like/", headers=bob["headers"])
    assert r.status_code == 404
    assert r.json() == {"error": "Post not found"}


async def test_comments_are_ordered(client, alice, bob):
    post = await _post(client, alice)
    for text in ("first", "second"):
        r = await client.post(
            f"/api/posts/{post['id']}/comment/", json={"content": text}, headers=bob["headers"]
        )
        assert r.status_code == 201
        assert r.json()["comment"]["author"]["username"] == "bob"

    r = await client.get(f"/api/posts/{post['id']}/comments/")
    assert [c["content"] for c in r.json()] == ["first", "second"]

    r = await client.get(f"/api/posts/{post['id']}/")
    single = r.json()["post"]
    assert single["commentCount"] == 2
    assert [c["content"] for c in single["comments"]] == ["first", "second"]


async def test_empty_comment_rejected(client, alice, bob):
    post = await _post(client, alice)
    r = await client.post(
        f"/api/posts/{post['id']}/comment/", json={"content": ""}, headers=bob["headers"]
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Comment content is required"}


async def test_share_is_one_way(client, alice, bob):
    post = await _post(client, alice)
    url = f"/api/posts/{post['id']}/share/"
    assert (await client.post(url, headers=bob["headers"])).json()["shareCount"] == 1
    assert (await client.post(url, headers=bob["headers"])).json()["shareCount"] == 1
    assert (await client.post(url, headers=alice["headers"])).json()["shareCount"] == 2


async def test_delete_only_by_author(client, alice, bob):
    post = await _post(client, alice)
    await client.post(f"/api/posts/{post['id']}/like/", headers=bob["headers"])

    r = await client.delete(f"/api/posts/{post['id']}/", headers=bob["headers"])
    assert r.status_code == 403
    assert r.json() == {"error": "Not authorized to delete this post"}

    r = await client.delete(f"/api/posts/{post['id']}/", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json() == {"message": "Post deleted successfully"}

    r = await client.get(f"/api/posts/{post['id']}/")
    assert r.status_code == 404


async def test_single_fetch_enforces_visibility(client, alice, bob):
    private = await _post(client, alice, "secret", "private")
    followers = await _post(client, alice, "friends only", "followers")

    r = await client.get(f"/api/posts/{private['id']}/", headers=bob["headers"])
    assert r.status_code == 403
    r = await client.get(f"/api/posts/{followers['id']}/")
    assert r.status_code == 403

    await client.post("/api/users/alice/follow/", headers=bob["headers"])
    r = await client.get(f"/api/posts/{followers['id']}/", headers=bob["headers"])
    assert r.status_code == 200

    r = await client.get(f"/api/posts/{private['id']}/", headers=alice["headers"])
    assert r.status_code == 200


async def test_edit_recomputes_hashtags(client, alice, bob):
    post = await _post(client, alice, "old #one")
    r = await client.patch(
        f"/api/posts/{post['id']}/", json={"content": "new #Two"}, headers=bob["headers"]
    )
    assert r.status_code == 403

    r = await client.patch(
        f"/api/posts/{post['id']}/", json={"content": "new #Two"}, headers=alice["headers"]
    )
    assert r.status_code == 200
    assert r.json()["post"]["hashtags"] == ["two"]


async def test_search_content_and_hashtag(client, alice):
    await _post(client, alice, "Learning Python today")
    await _post(client, alice, "weekend #python")
    await _post(client, alice, "private python", "private")
    await _post(client, alice, "nothing here")

    r = await client.get("/api/posts/search/python/")
    body = r.json()
    assert [p["content"] for p in body["posts"]] == ["weekend #python", "Learning Python today"]
    assert body["pagination"]["totalPosts"] == 2

    r = await client.get("/api/posts/search/PYTHON/")
    assert len(r.json()["posts"]) == 2


async def test_search_treats_wildcards_literally(client, alice):
    await _post(client, alice, "100% sure")
    await _post(client, alice, "100 percent")
    r = await client.get("/api/posts/search/100%25/")
    assert [p["content"] for p in r.json()["posts"]] == ["100% sure"]


async def test_orphan_author_renders_placeholder(db):
    post = await posts_svc.create(db, 4242, "left behind", "public")
    await db.commit()
    data = await posts_svc.get(db, post.id, None)
    assert data["author"] == {
        "id": 4242,
        "username": DELETED_USERNAME,
        "display_name": DELETED_USERNAME,
        "profile_pic": None,
    }
