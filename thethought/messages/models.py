# thethought/messages/models.py
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    event,
    false,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import UnicodeText

from thethought.db.base import Base, JSONType

CONTENT_MAX = 1000
MESSAGE_TYPES = ("text", "image", "video", "post_share", "reel_share")


def conversation_id_for(user_a: int | str, user_b: int | str) -> str:
    """
    Id determinista del hilo entre dos usuarios: los dos ids como texto,
    ordenados lexicográficamente y unidos con "_". No depende de quién
    escribió primero.
    """
    return "_".join(sorted([str(user_a), str(user_b)]))


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_conversation_created", "conversation_id", "created_at"),
        Index("ix_messages_recipient_read", "recipient_id", "is_read"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, index=True)
    sender_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)
    recipient_id: Mapped[int] = mapped_column(Integer, index=True, nullable=False)

    content: Mapped[str] = mapped_column(UnicodeText, nullable=False)
    message_type: Mapped[str] = mapped_column(
        String(16), nullable=False, default="text", server_default="text"
    )
    # [{url, filename, mimetype, size}]
    attachments: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)

    is_read: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    reply_to_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("messages.id", ondelete="SET NULL"), nullable=True
    )

    # se asigna una sola vez al crear; nunca se recalcula
    conversation_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now()
    )


@event.listens_for(Message, "before_insert")
def _assign_conversation_id(mapper, connection, target: Message) -> None:
    if not target.conversation_id:
        target.conversation_id = conversation_id_for(target.sender_id, target.recipient_id)
