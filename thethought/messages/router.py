# thethought/messages/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.json import UTF8JSONResponse
from thethought.core.schemas import MessageOut
from thethought.db.session import get_session
from thethought.feed.service import MAX_LIMIT
from thethought.messages import service as svc
from thethought.messages.schemas import (
    MessageCreate,
    MessageEnvelope,
    ConversationOut,
    ThreadPage,
    UnreadCountOut,
)
from thethought.users.deps import get_current_user
from thethought.users.models import User

router = APIRouter(
    prefix="/api/messages",
    tags=["messages"],
    default_response_class=UTF8JSONResponse,
)


@router.get("/conversations/", response_model=list[ConversationOut])
async def conversations(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_conversations(db, user.id)


@router.get("/conversation/{user_id}/", response_model=ThreadPage)
async def thread(
    user_id: int,
    page: int = Query(1, ge=1),
    limit: int = Query(svc.THREAD_LIMIT, ge=1, le=MAX_LIMIT),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.list_thread(db, user.id, user_id, page, limit)
    # el marcado como leído es una escritura
    await db.commit()
    return data


@router.post("/send/", response_model=MessageEnvelope, status_code=201)
async def send_message(
    payload: MessageCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    msg = await svc.send(
        db,
        user.id,
        payload.recipient_id,
        payload.content,
        message_type=payload.message_type,
        attachments=[a.model_dump() for a in payload.attachments],
        reply_to=payload.reply_to,
    )
    await db.commit()
    hydrated = await svc.hydrate_messages(db, [msg])
    return {"message": "Message sent successfully", "data": hydrated[0]}


@router.get("/unread/count/", response_model=UnreadCountOut)
async def unread(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    return {"unread_count": await svc.unread_count(db, user.id)}


@router.put("/{message_id}/read/", response_model=MessageEnvelope)
async def read_message(
    message_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    msg = await svc.mark_read(db, message_id, user.id)
    await db.commit()
    hydrated = await svc.hydrate_messages(db, [msg])
    return {"message": "Message marked as read", "data": hydrated[0]}


@router.delete("/{message_id}/", response_model=MessageOut)
async def delete_message(
    message_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete(db, message_id, user.id)
    await db.commit()
    return {"message": "Message deleted successfully"}
