# thethought/messages/schemas.py
from datetime import datetime

from pydantic import Field

from thethought.core.schemas import CamelModel, AuthorOut


class AttachmentIn(CamelModel):
    url: str
    filename: str | None = None
    mimetype: str | None = None
    size: int | None = None


class MessageCreate(CamelModel):
    recipient_id: int | None = None
    content: str | None = None
    message_type: str = "text"
    attachments: list[AttachmentIn] = Field(default_factory=list)
    reply_to: int | None = None


class ReplyPreview(CamelModel):
    id: int
    sender_id: int
    content: str


class MessageItemOut(CamelModel):
    id: int
    conversation_id: str
    sender: AuthorOut
    recipient: AuthorOut
    content: str
    message_type: str
    attachments: list[dict] = Field(default_factory=list)
    is_read: bool
    read_at: datetime | None = None
    reply_to: ReplyPreview | None = None
    created_at: datetime


class MessageEnvelope(CamelModel):
    message: str | None = None
    data: MessageItemOut


class ConversationOut(CamelModel):
    conversation_id: str
    other_user: AuthorOut
    last_message: MessageItemOut
    unread_count: int


class ThreadPage(CamelModel):
    messages: list[MessageItemOut]
    pagination: dict[str, int | bool] = Field(default_factory=dict)


class UnreadCountOut(CamelModel):
    unread_count: int
