# thethought/posts/schemas.py
from datetime import datetime

from pydantic import Field

from thethought.core.schemas import CamelModel, AuthorOut, CommentOut


class PostCreate(CamelModel):
    content: str | None = None
    visibility: str = "public"


class PostUpdate(CamelModel):
    content: str | None = None
    visibility: str | None = None


class PostOut(CamelModel):
    id: int
    author: AuthorOut
    content: str
    visibility: str
    hashtags: list[str] = []
    created_at: datetime
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    is_liked: bool = False
    comments: list[CommentOut] | None = None


class PostPage(CamelModel):
    posts: list[PostOut]
    pagination: dict[str, int | bool] = Field(default_factory=dict)


class PostEnvelope(CamelModel):
    message: str | None = None
    post: PostOut
