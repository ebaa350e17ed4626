# thethought/posts/models.py
from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, DateTime, func
from sqlalchemy.types import UnicodeText

from thethought.db.base import Base, JSONType
from thethought.social.models import MembershipMixin, CommentMixin

CONTENT_MAX = 1000
COMMENT_MAX = 1000


class Post(Base):
    """Un "thought": texto corto con visibilidad propia."""
    __tablename__ = "posts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    # referencia sin FK: el autor puede haber sido borrado
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    content: Mapped[str] = mapped_column(UnicodeText, nullable=False)
    visibility: Mapped[str] = mapped_column(
        String(16), nullable=False, default="public", server_default="public"
    )
    # derivados del contenido, en orden y con duplicados
    hashtags: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), index=True
    )


class PostLike(MembershipMixin, Base):
    __tablename__ = "post_likes"
    __item_table__ = "posts"


class PostShare(MembershipMixin, Base):
    __tablename__ = "post_shares"
    __item_table__ = "posts"


class PostComment(CommentMixin, Base):
    __tablename__ = "post_comments"
    __item_table__ = "posts"
