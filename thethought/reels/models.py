# thethought/reels/models.py
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, func
from sqlalchemy.types import UnicodeText

from thethought.db.base import Base, JSONType
from thethought.social.models import MembershipMixin, CommentMixin

CAPTION_MAX = 500
COMMENT_MAX = 500


class Reel(Base):
    __tablename__ = "reels"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)

    caption: Mapped[str] = mapped_column(UnicodeText, nullable=False, default="", server_default="")
    # ruta relativa dentro de /media (ej: "reels/xxxx.mp4")
    video_path: Mapped[str] = mapped_column(String(255), nullable=False)
    thumbnail_path: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # duración en segundos
    duration: Mapped[int] = mapped_column(Integer, nullable=False)

    visibility: Mapped[str] = mapped_column(
        String(16), nullable=False, default="public", server_default="public"
    )
    hashtags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    views: Mapped[int] = mapped_column(Integer, nullable=False, default=0, server_default="0")

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )


class ReelLike(MembershipMixin, Base):
    __tablename__ = "reel_likes"
    __item_table__ = "reels"


class ReelShare(MembershipMixin, Base):
    __tablename__ = "reel_shares"
    __item_table__ = "reels"


class ReelComment(CommentMixin, Base):
    __tablename__ = "reel_comments"
    __item_table__ = "reels"
