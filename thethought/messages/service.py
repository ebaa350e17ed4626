# thethought/messages/service.py
"""
Mensajes directos: resolución de conversaciones.

El hilo entre dos usuarios se identifica con `conversation_id_for`, así
que no hay tabla de conversaciones: la bandeja se arma agrupando los
mensajes del usuario en Python.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone

from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.errors import ValidationError, AuthorizationError, NotFoundError
from thethought.feed.service import pagination_meta, offset_for
from thethought.messages import repository as repo
from thethought.messages.models import Message, CONTENT_MAX, MESSAGE_TYPES, conversation_id_for
from thethought.profile.service import summaries_for
from thethought.users.repository import get_by_id

log = logging.getLogger("uvicorn")

THREAD_LIMIT = 20

# alias corto para routers y tests
conversation_id = conversation_id_for


def _reply_preview(msg: Message | None) -> dict | None:
    if msg is None:
        return None
    return {"id": msg.id, "sender_id": msg.sender_id, "content": msg.content}


async def hydrate_messages(db: AsyncSession, messages: list[Message]) -> list[dict]:
    people = await summaries_for(
        db, [m.sender_id for m in messages] + [m.recipient_id for m in messages]
    )
    replies = await repo.get_messages(db, [m.reply_to_id for m in messages if m.reply_to_id])
    return [
        {
            "id": m.id,
            "conversation_id": m.conversation_id,
            "sender": people[m.sender_id],
            "recipient": people[m.recipient_id],
            "content": m.content,
            "message_type": m.message_type,
            "attachments": list(m.attachments or []),
            "is_read": m.is_read,
            "read_at": m.read_at,
            "reply_to": _reply_preview(replies.get(m.reply_to_id)),
            "created_at": m.created_at,
        }
        for m in messages
    ]


async def send(
    db: AsyncSession,
    sender_id: int,
    recipient_id: int | None,
    content: str | None,
    *,
    message_type: str | None = None,
    attachments: list[dict] | None = None,
    reply_to: int | None = None,
) -> Message:
    text = (content or "").strip()
    if recipient_id is None or not text:
        raise ValidationError("Recipient and content are required")
    if len(text) > CONTENT_MAX:
        raise ValidationError("Message too long")

    message_type = message_type or "text"
    if message_type not in MESSAGE_TYPES:
        raise ValidationError("Invalid message type")

    if not await get_by_id(db, recipient_id):
        raise NotFoundError("Recipient not found")

    if reply_to is not None and not await repo.get_message(db, reply_to):
        raise NotFoundError("Message to reply not found")

    msg = await repo.create_message(
        db,
        sender_id=sender_id,
        recipient_id=recipient_id,
        content=text,
        message_type=message_type,
        attachments=attachments or [],
        reply_to_id=reply_to,
        conversation_id=conversation_id_for(sender_id, recipient_id),
    )
    log.info(f"✉️ mensaje {msg.id} de {sender_id} para {recipient_id}")
    return msg


async def list_conversations(db: AsyncSession, user_id: int) -> list[dict]:
    """
    Bandeja del usuario:
      1) todos sus mensajes, más recientes primero
      2) partición por conversation_id
      3) por grupo: último mensaje + no leídos dirigidos a `user_id`
      4) orden por fecha del último mensaje, descendente
    """
    messages = await repo.list_user_messages(db, user_id)

    groups: dict[str, dict] = {}
    for m in messages:
        group = groups.get(m.conversation_id)
        if group is None:
            # la lista viene ordenada: el primero que aparece es el último enviado
            group = groups[m.conversation_id] = {"last": m, "unread": 0}
        if m.recipient_id == user_id and not m.is_read:
            group["unread"] += 1

    ordered = sorted(
        groups.items(),
        key=lambda kv: (kv[1]["last"].created_at, kv[1]["last"].id),
        reverse=True,
    )

    lasts = [g["last"] for _, g in ordered]
    hydrated = await hydrate_messages(db, lasts)

    out = []
    for (conv_id, group), last in zip(ordered, hydrated):
        m = group["last"]
        other = last["recipient"] if m.sender_id == user_id else last["sender"]
        out.append({
            "conversation_id": conv_id,
            "other_user": other,
            "last_message": last,
            "unread_count": group["unread"],
        })
    return out


async def list_thread(
    db: AsyncSession,
    user_id: int,
    other_user_id: int,
    page: int = 1,
    limit: int = THREAD_LIMIT,
) -> dict:
    conv_id = conversation_id_for(user_id, other_user_id)

    # abrir el hilo marca como leído todo lo que le llegó al usuario
    changed = await repo.mark_conversation_read(db, conv_id, user_id)
    if changed:
        log.info(f"👀 {changed} mensajes leídos en {conv_id}")

    messages = await repo.list_conversation(db, conv_id, limit, offset_for(page, limit))
    total = await repo.count_conversation(db, conv_id)

    # la página viene de más nuevo a más viejo; se muestra cronológica
    messages.reverse()
    return {
        "messages": await hydrate_messages(db, messages),
        "pagination": pagination_meta(page, limit, total, "Messages"),
    }


async def get_message_or_404(db: AsyncSession, message_id: int) -> Message:
    msg = await repo.get_message(db, message_id)
    if not msg:
        raise NotFoundError("Message not found")
    return msg


async def mark_read(db: AsyncSession, message_id: int, requester_id: int) -> Message:
    msg = await get_message_or_404(db, message_id)
    if msg.recipient_id != requester_id:
        raise AuthorizationError("Not authorized to mark this message as read")
    if not msg.is_read:
        msg.is_read = True
        msg.read_at = datetime.now(timezone.utc)
        await db.flush()
    return msg


async def delete(db: AsyncSession, message_id: int, requester_id: int) -> None:
    msg = await get_message_or_404(db, message_id)
    if msg.sender_id != requester_id:
        raise AuthorizationError("Not authorized to delete this message")
    await repo.delete_message(db, msg)
    log.info(f"🗑️ mensaje {message_id} eliminado por {requester_id}")


async def unread_count(db: AsyncSession, user_id: int) -> int:
    return await repo.count_unread(db, user_id)
