# thethought/messages/repository.py
from datetime import datetime, timezone

from sqlalchemy import select, update, func, or_, desc
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.messages.models import Message


async def create_message(
    db: AsyncSession,
    *,
    sender_id: int,
    recipient_id: int,
    content: str,
    message_type: str = "text",
    attachments: list | None = None,
    reply_to_id: int | None = None,
    conversation_id: str,
) -> Message:
    msg = Message(
        sender_id=sender_id,
        recipient_id=recipient_id,
        content=content,
        message_type=message_type,
        attachments=attachments or [],
        reply_to_id=reply_to_id,
        conversation_id=conversation_id,
    )
    db.add(msg)
    await db.flush()
    await db.refresh(msg)
    return msg


async def get_message(db: AsyncSession, message_id: int) -> Message | None:
    res = await db.execute(select(Message).where(Message.id == message_id))
    return res.scalar_one_or_none()


async def get_messages(db: AsyncSession, ids: list[int]) -> dict[int, Message]:
    if not ids:
        return {}
    res = await db.execute(select(Message).where(Message.id.in_(ids)))
    return {m.id: m for m in res.scalars()}


async def list_user_messages(db: AsyncSession, user_id: int) -> list[Message]:
    """Todos los mensajes donde participa el usuario, más recientes primero."""
    res = await db.execute(
        select(Message)
        .where(or_(Message.sender_id == user_id, Message.recipient_id == user_id))
        .order_by(desc(Message.created_at), desc(Message.id))
    )
    return list(res.scalars())


async def list_conversation(
    db: AsyncSession, conversation_id: str, limit: int = 20, offset: int = 0
) -> list[Message]:
    res = await db.execute(
        select(Message)
        .where(Message.conversation_id == conversation_id)
        .order_by(desc(Message.created_at), desc(Message.id))
        .limit(limit)
        .offset(offset)
        # el UPDATE masivo de leídos no toca la identity map
        .execution_options(populate_existing=True)
    )
    return list(res.scalars())


async def count_conversation(db: AsyncSession, conversation_id: str) -> int:
    res = await db.execute(
        select(func.count()).select_from(Message).where(Message.conversation_id == conversation_id)
    )
    return int(res.scalar_one() or 0)


async def mark_conversation_read(db: AsyncSession, conversation_id: str, recipient_id: int) -> int:
    """
    Marca como leídos los no leídos dirigidos a `recipient_id` en el hilo.
    Devuelve cuántos cambió.
    """
    res = await db.execute(
        update(Message)
        .where(
            Message.conversation_id == conversation_id,
            Message.recipient_id == recipient_id,
            Message.is_read.is_(False),
        )
        .values(is_read=True, read_at=datetime.now(timezone.utc))
        .execution_options(synchronize_session=False)
    )
    await db.flush()
    return int(res.rowcount or 0)


async def count_unread(db: AsyncSession, user_id: int) -> int:
    res = await db.execute(
        select(func.count())
        .select_from(Message)
        .where(Message.recipient_id == user_id, Message.is_read.is_(False))
    )
    return int(res.scalar_one() or 0)


async def delete_message(db: AsyncSession, msg: Message) -> None:
    await db.delete(msg)
    await db.flush()
