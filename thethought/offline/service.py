# thethought/offline/service.py
from __future__ import annotations

import time
from datetime import datetime, timezone

from thethought.core.errors import ValidationError, NotFoundError
from thethought.offline.store import (
    THEMES,
    LocalMessage,
    LocalReel,
    LocalStateStore,
    Thought,
)

MAX_THOUGHT_LENGTH = 280
HISTORY_LIMIT = 10
PRIVACY_OPTIONS = ("public", "private")


class OfflineApp:
    """
    Operaciones de la app sin red. Cada mutación pasa por
    `store.mutate()`, que persiste el estado completo.
    """

    def __init__(self, store: LocalStateStore, max_length: int = MAX_THOUGHT_LENGTH):
        self.store = store
        self.max_length = max_length

    @property
    def state(self):
        return self.store.state

    def _next_id(self) -> int:
        # milisegundos como id, pero siempre creciente
        used = [t.id for t in self.state.thoughts] + [r.id for r in self.state.reels]
        used += [m.id for m in self.state.messages]
        return max([int(time.time() * 1000)] + [i + 1 for i in used])

    def _author_name(self) -> str:
        return self.state.profile.display_name or "You"

    def _thought(self, thought_id: int) -> Thought:
        for t in self.state.thoughts:
            if str(t.id) == str(thought_id):
                return t
        raise NotFoundError("Thought not found")

    # -------------------------
    # 💭 thoughts
    # -------------------------
    def remaining_chars(self, text: str) -> int:
        return self.max_length - len(text)

    def post_thought(self, text: str | None) -> Thought:
        value = (text or "").strip()
        if not value:
            raise ValidationError("You can't post an empty thought!")
        if len(value) > self.max_length:
            raise ValidationError("Thought too long")

        thought = Thought(id=self._next_id(), username=self._author_name(), text=value)
        with self.store.mutate() as state:
            state.thoughts.insert(0, thought)
        return thought

    def toggle_like(self, thought_id: int) -> Thought:
        thought = self._thought(thought_id)
        with self.store.mutate():
            thought.liked = not thought.liked
            thought.likes = thought.likes + 1 if thought.liked else max(0, thought.likes - 1)
        return thought

    def toggle_reshare(self, thought_id: int) -> Thought:
        thought = self._thought(thought_id)
        with self.store.mutate():
            thought.reshared = not thought.reshared
            thought.reshares = (
                thought.reshares + 1 if thought.reshared else max(0, thought.reshares - 1)
            )
        return thought

    # -------------------------
    # 🎬 reels
    # -------------------------
    def post_reel(self, video_url: str | None, caption: str | None = None) -> LocalReel:
        if not video_url:
            raise ValidationError("Please select a video first!")
        reel = LocalReel(
            id=self._next_id(),
            username=self._author_name(),
            caption=(caption or "").strip() or "No caption",
            video_url=video_url,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        with self.store.mutate() as state:
            state.reels.insert(0, reel)
        return reel

    # -------------------------
    # 🔎 búsqueda
    # -------------------------
    def search(self, query: str | None) -> list[dict]:
        """
        Resultados `{"type", "data", "relevance"}`: 2 si el texto o
        caption contiene la consulta, 1 si solo coincide el usuario.
        """
        q = (query or "").strip().lower()
        if not q:
            return []

        if q not in self.state.search_history:
            with self.store.mutate() as state:
                state.search_history.insert(0, q)
                del state.search_history[HISTORY_LIMIT:]

        results = []
        for thought in self.state.thoughts:
            in_text = q in thought.text.lower()
            if in_text or q in thought.username.lower():
                results.append({"type": "thought", "data": thought, "relevance": 2 if in_text else 1})
        for reel in self.state.reels:
            in_caption = q in reel.caption.lower()
            if in_caption or q in reel.username.lower():
                results.append({"type": "reel", "data": reel, "relevance": 2 if in_caption else 1})

        # sort es estable: a igual relevancia se mantiene el orden de arriba
        results.sort(key=lambda r: r["relevance"], reverse=True)
        return results

    def search_history(self) -> list[str]:
        return list(self.state.search_history)

    # -------------------------
    # 👤 perfil y ajustes
    # -------------------------
    def update_profile(
        self,
        display_name: str | None = None,
        username: str | None = None,
        bio: str | None = None,
    ):
        with self.store.mutate() as state:
            if display_name is not None:
                state.profile.display_name = display_name
            if username is not None:
                state.profile.username = username
            if bio is not None:
                state.profile.bio = bio
        return self.state.profile

    def set_privacy(self, privacy: str):
        if privacy not in PRIVACY_OPTIONS:
            raise ValidationError("Invalid privacy setting")
        with self.store.mutate() as state:
            state.profile.privacy = privacy
        return self.state.profile

    def set_profile_pic(self, data_url: str):
        with self.store.mutate() as state:
            state.profile.profile_pic = data_url
        return self.state.profile

    def set_theme(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValidationError("Invalid theme")
        with self.store.mutate() as state:
            state.theme = theme
        return theme

    def profile_summary(self) -> dict:
        me = self.state.profile
        posts = [{"type": "thought", **t.model_dump()} for t in self.state.thoughts]
        posts += [{"type": "reel", **r.model_dump()} for r in self.state.reels]
        posts.sort(key=lambda p: p["id"], reverse=True)
        return {
            "display_name": me.display_name or "Your Name",
            "username": me.username or "username",
            "bio": me.bio or "Your bio goes here...",
            "profile_pic": me.profile_pic,
            "privacy": me.privacy,
            "posts_count": len(self.state.thoughts) + len(self.state.reels),
            "followers_count": me.followers,
            "following_count": me.following,
            "posts": posts,
        }

    # -------------------------
    # ✉️ mensajes
    # -------------------------
    def send_message(self, recipient_id, text: str | None) -> LocalMessage:
        try:
            to = int(recipient_id or 0)
        except (TypeError, ValueError):
            to = 0
        body = (text or "").strip()
        if not to or not body:
            raise ValidationError("Enter recipient and message")

        msg = LocalMessage(id=self._next_id(), recipient_id=to, text=body)
        with self.store.mutate() as state:
            state.messages.append(msg)
        return msg

    def list_messages(self) -> list[LocalMessage]:
        return list(reversed(self.state.messages))
