# thethought/offline/store.py
"""
Estado local de la variante offline (sin backend).

Todo vive en un único archivo JSON: se lee completo al construir el
store y se reescribe completo en cada mutación. La escritura va a un
temporal en el mismo directorio y luego `os.replace`, así un corte a
mitad nunca deja el archivo a medias.
"""
from __future__ import annotations

import logging
import os
import tempfile
from contextlib import contextmanager
from typing import Iterator, Literal

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from thethought.core.config import settings

log = logging.getLogger("uvicorn")

THEMES = ("light", "dark")


class Thought(BaseModel):
    id: int
    author_id: int = 1
    username: str = "You"
    handle: str = "@you"
    text: str
    avatar_seed: int = 1
    likes: int = 0
    reshares: int = 0
    liked: bool = False
    reshared: bool = False


class LocalReel(BaseModel):
    id: int
    username: str = "You"
    handle: str = "@you"
    caption: str = "No caption"
    video_url: str
    avatar_seed: int = 1
    likes: int = 0
    comments: int = 0
    timestamp: str


class LocalMessage(BaseModel):
    id: int
    sender_id: int = 1
    recipient_id: int
    text: str


class LocalProfile(BaseModel):
    display_name: str | None = None
    username: str | None = None
    bio: str | None = None
    profile_pic: str | None = None
    privacy: Literal["public", "private"] = "public"
    followers: int = 0
    following: int = 0


class LocalState(BaseModel):
    thoughts: list[Thought] = Field(default_factory=list)
    messages: list[LocalMessage] = Field(default_factory=list)
    profile: LocalProfile = Field(default_factory=LocalProfile)
    reels: list[LocalReel] = Field(default_factory=list)
    search_history: list[str] = Field(default_factory=list)
    theme: Literal["light", "dark"] = "light"


class LocalStateStore:
    def __init__(self, path: str | None = None):
        self.path = path or settings.OFFLINE_STATE_PATH
        self.state = self.load()

    def load(self) -> LocalState:
        if not os.path.exists(self.path):
            log.info(f"🗂️ sin estado local en {self.path}, se empieza vacío")
            return LocalState()
        try:
            with open(self.path, "r", encoding="utf-8") as fh:
                return LocalState.model_validate_json(fh.read())
        except (OSError, PydanticValidationError) as e:
            log.warning(f"⚠️ estado local ilegible ({self.path}): {e!r}; se empieza vacío")
            return LocalState()

    def save(self) -> None:
        folder = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(folder, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=folder, prefix=".state-", suffix=".json")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(self.state.model_dump_json(indent=2))
            os.replace(tmp, self.path)
        except OSError:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    @contextmanager
    def mutate(self) -> Iterator[LocalState]:
        """
        with store.mutate() as state:
            state.theme = "dark"

        Persiste al salir del bloque. Si el bloque o la escritura fallan,
        el estado en memoria vuelve a la copia previa.
        """
        snapshot = self.state.model_copy(deep=True)
        try:
            yield self.state
            self.save()
        except BaseException:
            self.state = snapshot
            raise
