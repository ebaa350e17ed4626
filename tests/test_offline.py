import json

import pytest

from thethought.core.errors import ValidationError, NotFoundError
from thethought.offline import LocalStateStore, OfflineApp


@pytest.fixture
def state_path(tmp_path):
    return str(tmp_path / "state.json")


@pytest.fixture
def app(state_path):
    return OfflineApp(LocalStateStore(state_path))


def test_missing_file_starts_empty(state_path):
    store = LocalStateStore(state_path)
    assert store.state.thoughts == []
    assert store.state.theme == "light"
    assert store.state.profile.privacy == "public"


def test_corrupt_file_starts_empty(state_path):
    with open(state_path, "w", encoding="utf-8") as fh:
        fh.write("{not json")
    store = LocalStateStore(state_path)
    assert store.state.reels == []


def test_every_mutation_is_persisted(app, state_path):
    app.post_thought("first")
    app.set_theme("dark")

    with open(state_path, encoding="utf-8") as fh:
        raw = json.load(fh)
    assert raw["theme"] == "dark"
    assert raw["thoughts"][0]["text"] == "first"

    again = OfflineApp(LocalStateStore(state_path))
    assert [t.text for t in again.state.thoughts] == ["first"]
    assert again.state.theme == "dark"


def test_post_thought_newest_first(app):
    app.post_thought("one")
    app.post_thought("  two  ")
    assert [t.text for t in app.state.thoughts] == ["two", "one"]
    assert app.state.thoughts[0].username == "You"

    with pytest.raises(ValidationError):
        app.post_thought("   ")
    with pytest.raises(ValidationError):
        app.post_thought("x" * 281)


def test_remaining_chars(app):
    assert app.remaining_chars("") == 280
    assert app.remaining_chars("hello") == 275


def test_toggle_like_and_reshare(app, state_path):
    t = app.post_thought("likeable")

    assert app.toggle_like(t.id).likes == 1
    assert app.toggle_like(t.id).likes == 0
    assert app.toggle_reshare(t.id).reshares == 1

    reloaded = LocalStateStore(state_path).state.thoughts[0]
    assert reloaded.likes == 0
    assert reloaded.reshares == 1
    assert reloaded.reshared is True

    with pytest.raises(NotFoundError):
        app.toggle_like(123)


def test_like_count_never_negative(app):
    t = app.post_thought("edge")
    t.liked = True  # estado heredado inconsistente
    assert app.toggle_like(t.id).likes == 0


def test_post_reel(app):
    with pytest.raises(ValidationError):
        app.post_reel(None, "caption")

    reel = app.post_reel("blob:video-1")
    assert reel.caption == "No caption"
    assert app.state.reels[0].video_url == "blob:video-1"


def test_search_relevance_and_history(app):
    app.update_profile(display_name="Pythonista")
    app.post_thought("nothing relevant")          # solo coincide el usuario
    app.post_thought("I love python")             # coincide el texto
    app.post_reel("blob:1", "python reel")

    results = app.search("  PYTHON ")
    assert [r["relevance"] for r in results] == [2, 2, 1]
    assert [r["type"] for r in results] == ["thought", "reel", "thought"]
    assert results[0]["data"].text == "I love python"

    assert app.search("") == []
    for i in range(12):
        app.search(f"q{i}")
    app.search("q11")
    history = app.search_history()
    assert len(history) == 10
    assert history[0] == "q11"
    assert history.count("q11") == 1


def test_profile_settings(app):
    app.update_profile(display_name="Me", username="me", bio="bio")
    app.set_privacy("private")
    app.set_profile_pic("data:image/png;base64,AAA")
    with pytest.raises(ValidationError):
        app.set_privacy("friends")
    with pytest.raises(ValidationError):
        app.set_theme("blue")

    app.post_thought("a thought")
    app.post_reel("blob:2", "a reel")
    summary = app.profile_summary()
    assert summary["display_name"] == "Me"
    assert summary["privacy"] == "private"
    assert summary["profile_pic"].startswith("data:image/png")
    assert summary["posts_count"] == 2
    assert [p["type"] for p in summary["posts"]] == ["reel", "thought"]


def test_profile_summary_defaults(app):
    summary = app.profile_summary()
    assert summary["display_name"] == "Your Name"
    assert summary["username"] == "username"
    assert summary["posts_count"] == 0


def test_messages(app):
    with pytest.raises(ValidationError):
        app.send_message(None, "hi")
    with pytest.raises(ValidationError):
        app.send_message(2, "  ")
    with pytest.raises(ValidationError):
        app.send_message("abc", "hi")

    app.send_message(2, "first")
    app.send_message("3", "second")
    assert [m.text for m in app.list_messages()] == ["second", "first"]
    assert app.list_messages()[0].recipient_id == 3


def test_failed_save_rolls_back_memory(app, state_path, monkeypatch):
    app.post_thought("kept")

    def _disk_full(*args, **kwargs):
        raise OSError("disk full")

    monkeypatch.setattr(app.store, "save", _disk_full)
    with pytest.raises(OSError):
        app.post_thought("lost")
    with pytest.raises(OSError):
        app.set_theme("dark")

    assert [t.text for t in app.state.thoughts] == ["kept"]
    assert app.state.theme == "light"

    monkeypatch.undo()
    again = OfflineApp(LocalStateStore(state_path))
    assert [t.text for t in again.state.thoughts] == ["kept"]
