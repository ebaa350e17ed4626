# thethought/reels/router.py
from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.errors import AppError, UnexpectedError, ValidationError
from thethought.core.json import UTF8JSONResponse
from thethought.core.schemas import (
    CommentIn,
    CommentOut,
    CommentEnvelope,
    LikeToggleOut,
    ShareOut,
    MessageOut,
)
from thethought.db.session import get_session
from thethought.feed.service import DEFAULT_LIMIT, MAX_LIMIT
from thethought.media.storage import save_reel_video, delete_media
from thethought.reels import service as svc
from thethought.reels.schemas import ReelUpdate, ReelPage, ReelEnvelope
from thethought.users.deps import get_current_user, get_optional_user
from thethought.users.models import User

router = APIRouter(
    prefix="/api/reels",
    tags=["reels"],
    default_response_class=UTF8JSONResponse,
)


@router.get("/", response_model=ReelPage)
async def list_reels(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_feed(db, viewer.id if viewer else None, page, limit)


@router.post("/", response_model=ReelEnvelope, status_code=201)
async def upload_reel(
    video: UploadFile | None = File(None),
    caption: str | None = Form(None),
    duration: str | None = Form(None),
    visibility: str | None = Form(None),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    if video is None:
        raise ValidationError("Video file is required")

    # primero validamos el form; luego recién tocamos disco
    clean_caption, seconds, vis = svc.prepare_upload(caption, duration, visibility)
    rel_path = save_reel_video(video)

    try:
        reel = await svc.create(
            db, user.id, rel_path, caption=clean_caption, duration=seconds, visibility=vis
        )
        await db.commit()
    except Exception as e:
        await db.rollback()
        # 🧹 best-effort: el video quedó guardado pero la fila no
        delete_media(rel_path)
        if isinstance(e, AppError):
            raise
        raise UnexpectedError(f"no se pudo guardar el reel {rel_path}: {e!r}") from e

    hydrated = await svc.hydrate_reels(db, [reel], viewer_id=user.id)
    return {"message": "Reel uploaded successfully", "reel": hydrated[0]}


@router.get("/search/{query}/", response_model=ReelPage)
async def search_reels(
    query: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.search(db, query, viewer.id if viewer else None, page, limit)


@router.get("/{reel_id}/", response_model=ReelEnvelope)
async def get_reel(
    reel_id: int,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    reel = await svc.get(db, reel_id, viewer.id if viewer else None)
    await db.commit()
    return {"reel": reel}


@router.patch("/{reel_id}/", response_model=ReelEnvelope)
async def edit_reel(
    reel_id: int,
    body: ReelUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    reel = await svc.update(db, reel_id, user.id, caption=body.caption, visibility=body.visibility)
    await db.commit()
    hydrated = await svc.hydrate_reels(db, [reel], viewer_id=user.id)
    return {"message": "Reel updated successfully", "reel": hydrated[0]}


@router.post("/{reel_id}/like/", response_model=LikeToggleOut)
async def toggle_like(
    reel_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    liked, count = await svc.toggle_like(db, reel_id, user.id)
    await db.commit()
    return {
        "message": "Reel liked" if liked else "Reel unliked",
        "is_liked": liked,
        "like_count": count,
    }


@router.post("/{reel_id}/comment/", response_model=CommentEnvelope, status_code=201)
async def comment_reel(
    reel_id: int,
    payload: CommentIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await svc.add_comment(db, reel_id, user.id, payload.content)
    await db.commit()
    return {"message": "Comment added successfully", "comment": comment}


@router.get("/{reel_id}/comments/", response_model=list[CommentOut])
async def reel_comments(
    reel_id: int,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_comments(db, reel_id, viewer.id if viewer else None)


@router.post("/{reel_id}/share/", response_model=ShareOut)
async def share_reel(
    reel_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    count = await svc.share(db, reel_id, user.id)
    await db.commit()
    return {"message": "Reel shared successfully", "share_count": count}


@router.delete("/{reel_id}/", response_model=MessageOut)
async def delete_reel(
    reel_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    video_path = await svc.delete(db, reel_id, user.id)
    await db.commit()

    # borrar archivo físico; si ya no está solo queda en el log
    delete_media(video_path)
    return {"message": "Reel deleted successfully"}
