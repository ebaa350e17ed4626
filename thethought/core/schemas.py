# thethought/core/schemas.py
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Base de los schemas de la API: atributos snake_case en Python,
    claves camelCase en el JSON (`likeCount`, `isRead`, ...).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class AuthorOut(CamelModel):
    id: int
    username: str
    display_name: str | None = None
    profile_pic: str | None = None


class CommentIn(CamelModel):
    content: str | None = None


class CommentOut(CamelModel):
    id: int
    author: AuthorOut
    content: str
    created_at: datetime


class LikeToggleOut(CamelModel):
    message: str
    is_liked: bool
    like_count: int


class ShareOut(CamelModel):
    message: str
    share_count: int


class MessageOut(CamelModel):
    """Respuesta simple de confirmación."""
    message: str


class CommentEnvelope(CamelModel):
    message: str
    comment: CommentOut
