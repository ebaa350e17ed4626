# thethought/reels/schemas.py
from datetime import datetime

from pydantic import Field

from thethought.core.schemas import CamelModel, AuthorOut, CommentOut


class ReelUpdate(CamelModel):
    caption: str | None = None
    visibility: str | None = None


class ReelOut(CamelModel):
    id: int
    author: AuthorOut
    caption: str = ""
    video_url: str
    thumbnail_url: str | None = None
    duration: int
    views: int = 0
    visibility: str
    hashtags: list[str] = []
    created_at: datetime
    like_count: int = 0
    comment_count: int = 0
    share_count: int = 0
    is_liked: bool = False
    comments: list[CommentOut] | None = None


class ReelPage(CamelModel):
    reels: list[ReelOut]
    pagination: dict[str, int | bool] = Field(default_factory=dict)


class ReelEnvelope(CamelModel):
    message: str | None = None
    reel: ReelOut
