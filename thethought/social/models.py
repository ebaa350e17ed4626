# thethought/social/models.py
"""
Mixins para las interacciones que comparten posts y reels.

Cada tabla concreta define `__tablename__` y `__item_table__` (la tabla
del item al que cuelga). Likes y shares son conjuntos: una fila por
(item, usuario) garantizada por la restricción única.
"""
from datetime import datetime

from sqlalchemy import Integer, Text, DateTime, ForeignKey, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, declared_attr


class _ItemChildMixin:
    __item_table__: str

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)

    @declared_attr
    def item_id(cls) -> Mapped[int]:
        return mapped_column(
            Integer,
            ForeignKey(f"{cls.__item_table__}.id", ondelete="CASCADE"),
            index=True,
            nullable=False,
        )

    # sin FK: si el usuario se borra, el item muestra "[deleted]"
    user_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


class MembershipMixin(_ItemChildMixin):
    @declared_attr.directive
    def __table_args__(cls):
        return (
            UniqueConstraint("item_id", "user_id", name=f"uq_{cls.__tablename__}_item_user"),
        )


class CommentMixin(_ItemChildMixin):
    content: Mapped[str] = mapped_column(Text, nullable=False)
