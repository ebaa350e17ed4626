# thethought/profile/models.py
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Integer, Text, ForeignKey
from thethought.db.base import Base

PRIVACY_PUBLIC = "public"
PRIVACY_PRIVATE = "private"
PRIVACY_CHOICES = (PRIVACY_PUBLIC, PRIVACY_PRIVATE)


class Profile(Base):
    __tablename__ = "profiles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        unique=True,
    )
    display_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    # ruta relativa en /media (p.ej. "avatars/abc.jpg")
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    privacy: Mapped[str] = mapped_column(
        String(16), nullable=False, default=PRIVACY_PUBLIC, server_default=PRIVACY_PUBLIC
    )
