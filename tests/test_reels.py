import os

from thethought.core.config import settings
from thethought.core.errors import ValidationError
from thethought.reels import service as reels_svc


def _video(name="clip.mp4", mimetype="video/mp4", size=2048):
    return {"video": (name, b"\x00" * size, mimetype)}


async def _upload(client, user, caption="my #Reel", duration="12", visibility=None):
    data = {"caption": caption, "duration": duration}
    if visibility:
        data["visibility"] = visibility
    r = await client.post("/api/reels/", files=_video(), data=data, headers=user["headers"])
    assert r.status_code == 201, r.text
    return r.json()["reel"]


def _stored_files():
    folder = os.path.join(settings.MEDIA_DIR, "reels")
    return os.listdir(folder) if os.path.isdir(folder) else []


async def test_upload_reel(client, alice):
    reel = await _upload(client, alice)
    assert reel["caption"] == "my #Reel"
    assert reel["hashtags"] == ["reel"]
    assert reel["duration"] == 12
    assert reel["views"] == 0
    assert reel["videoUrl"].startswith("/media/reels/")
    assert reel["videoUrl"].endswith(".mp4")
    assert len(_stored_files()) == 1


async def test_upload_requires_video(client, alice):
    r = await client.post(
        "/api/reels/", data={"caption": "x", "duration": "5"}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Video file is required"}


async def test_upload_rejects_non_video(client, alice):
    r = await client.post(
        "/api/reels/",
        files=_video("notes.txt", "text/plain"),
        data={"duration": "5"},
        headers=alice["headers"],
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid file type. Only video files are allowed."}
    assert _stored_files() == []


async def test_upload_validates_duration_before_saving(client, alice):
    r = await client.post("/api/reels/", files=_video(), data={}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Video duration is required"}

    r = await client.post("/api/reels/", files=_video(), data={"duration": "-3"}, headers=alice["headers"])
    assert r.status_code == 400
    assert r.json() == {"error": "Invalid video duration"}
    assert _stored_files() == []


async def test_upload_too_large(client, alice, monkeypatch):
    monkeypatch.setattr(settings, "REEL_MAX_BYTES", 1024)
    r = await client.post(
        "/api/reels/", files=_video(size=4096), data={"duration": "5"}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Video file too large"}
    assert _stored_files() == []


async def test_caption_defaults_empty(client, alice):
    r = await client.post(
        "/api/reels/", files=_video(), data={"duration": "3"}, headers=alice["headers"]
    )
    assert r.status_code == 201
    assert r.json()["reel"]["caption"] == ""


async def test_fetch_increments_views(client, alice, bob):
    reel = await _upload(client, alice)
    r = await client.get(f"/api/reels/{reel['id']}/")
    assert r.json()["reel"]["views"] == 1
    r = await client.get(f"/api/reels/{reel['id']}/", headers=bob["headers"])
    assert r.json()["reel"]["views"] == 2


async def test_like_comment_share(client, alice, bob):
    reel = await _upload(client, alice)
    base = f"/api/reels/{reel['id']}"

    r = await client.post(f"{base}/like/", headers=bob["headers"])
    assert r.json()["isLiked"] is True
    r = await client.post(f"{base}/like/", headers=bob["headers"])
    assert r.json() == {"message": "Reel unliked", "isLiked": False, "likeCount": 0}

    r = await client.post(f"{base}/comment/", json={"content": "x" * 501}, headers=bob["headers"])
    assert r.status_code == 400
    r = await client.post(f"{base}/comment/", json={"content": "nice"}, headers=bob["headers"])
    assert r.status_code == 201

    r = await client.post(f"{base}/share/", headers=bob["headers"])
    assert r.json()["shareCount"] == 1

    r = await client.get("/api/reels/")
    listed = r.json()["reels"][0]
    assert listed["commentCount"] == 1
    assert listed["shareCount"] == 1
    assert r.json()["pagination"]["totalReels"] == 1


async def test_delete_removes_video(client, alice, bob):
    reel = await _upload(client, alice)

    r = await client.delete(f"/api/reels/{reel['id']}/", headers=bob["headers"])
    assert r.status_code == 403
    assert len(_stored_files()) == 1

    r = await client.delete(f"/api/reels/{reel['id']}/", headers=alice["headers"])
    assert r.status_code == 200
    assert r.json() == {"message": "Reel deleted successfully"}
    assert _stored_files() == []
    assert (await client.get(f"/api/reels/{reel['id']}/")).status_code == 404


async def test_delete_with_missing_file_still_succeeds(client, alice):
    reel = await _upload(client, alice)
    for name in _stored_files():
        os.remove(os.path.join(settings.MEDIA_DIR, "reels", name))

    r = await client.delete(f"/api/reels/{reel['id']}/", headers=alice["headers"])
    assert r.status_code == 200


async def test_search_reels_by_caption_and_tag(client, alice):
    await _upload(client, alice, caption="Sunset at the beach")
    await _upload(client, alice, caption="city #sunset")
    await _upload(client, alice, caption="hidden sunset", visibility="private")

    r = await client.get("/api/reels/search/sunset/")
    assert [x["caption"] for x in r.json()["reels"]] == ["city #sunset", "Sunset at the beach"]


async def test_failed_insert_removes_saved_video(client, alice, monkeypatch):
    async def _broken_create(*args, **kwargs):
        raise RuntimeError("db down")

    monkeypatch.setattr(reels_svc, "create", _broken_create)
    r = await client.post(
        "/api/reels/", files=_video(), data={"duration": "5"}, headers=alice["headers"]
    )
    assert r.status_code == 500
    assert r.json() == {"error": "Server error"}
    assert _stored_files() == []


async def test_failed_insert_keeps_app_error(client, alice, monkeypatch):
    async def _rejecting_create(*args, **kwargs):
        raise ValidationError("Caption is too long")

    monkeypatch.setattr(reels_svc, "create", _rejecting_create)
    r = await client.post(
        "/api/reels/", files=_video(), data={"duration": "5"}, headers=alice["headers"]
    )
    assert r.status_code == 400
    assert r.json() == {"error": "Caption is too long"}
    assert _stored_files() == []


async def test_user_reels_respect_item_visibility(client, alice, bob):
    await _upload(client, alice, caption="pub")
    await _upload(client, alice, caption="mine", visibility="private")

    r = await client.get("/api/users/alice/reels/", headers=bob["headers"])
    assert [x["caption"] for x in r.json()["reels"]] == ["pub"]

    r = await client.get("/api/users/alice/reels/", headers=alice["headers"])
    assert [x["caption"] for x in r.json()["reels"]] == ["mine", "pub"]
