# thethought/reels/service.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.errors import ValidationError, AuthorizationError, NotFoundError
from thethought.feed.service import (
    VISIBILITY_CHOICES,
    VISIBILITY_PUBLIC,
    author_clause,
    can_view,
    feed_clause,
    paginate,
    pagination_meta,
)
from thethought.media.storage import media_url
from thethought.reels import repository as repo
from thethought.reels.models import Reel, ReelLike, ReelShare, ReelComment, CAPTION_MAX, COMMENT_MAX
from thethought.social import interactions
from thethought.social.hashtags import extract_hashtags
from thethought.users.repository import following_ids, is_following

log = logging.getLogger("uvicorn")


def _check_visibility(visibility: str | None) -> str:
    visibility = visibility or VISIBILITY_PUBLIC
    if visibility not in VISIBILITY_CHOICES:
        raise ValidationError("Invalid visibility")
    return visibility


def _clean_caption(caption: str | None) -> str:
    value = (caption or "").strip()
    if len(value) > CAPTION_MAX:
        raise ValidationError("Caption too long")
    return value


def _clean_duration(duration) -> int:
    if duration is None or str(duration).strip() == "":
        raise ValidationError("Video duration is required")
    try:
        seconds = int(float(duration))
    except (TypeError, ValueError):
        raise ValidationError("Invalid video duration")
    if seconds <= 0:
        raise ValidationError("Invalid video duration")
    return seconds


def prepare_upload(caption: str | None, duration, visibility: str | None) -> tuple[str, int, str]:
    """
    Valida los campos del formulario ANTES de guardar el video,
    para no dejar archivos huérfanos por errores de entrada.
    """
    return _clean_caption(caption), _clean_duration(duration), _check_visibility(visibility)


async def hydrate_reels(
    db: AsyncSession,
    reels: list[Reel],
    *,
    viewer_id: int | None = None,
    with_comments: bool = False,
) -> list[dict]:
    base = await interactions.hydrate_counters(
        db,
        reels,
        like_model=ReelLike,
        share_model=ReelShare,
        comment_model=ReelComment,
        viewer_id=viewer_id,
    )
    out = []
    for reel, data in zip(reels, base):
        data.update(
            caption=reel.caption,
            video_url=media_url(reel.video_path),
            thumbnail_url=media_url(reel.thumbnail_path),
            duration=reel.duration,
            views=reel.views,
        )
        if with_comments:
            comments = await interactions.list_comments(db, ReelComment, reel.id)
            data["comments"] = await interactions.hydrate_comments(db, comments)
        out.append(data)
    return out


async def get_reel_or_404(db: AsyncSession, reel_id: int) -> Reel:
    reel = await repo.get_reel(db, reel_id)
    if not reel:
        raise NotFoundError("Reel not found")
    return reel


async def create(
    db: AsyncSession,
    author_id: int,
    video_path: str,
    *,
    caption: str,
    duration: int,
    visibility: str,
) -> Reel:
    return await repo.create_reel(
        db,
        user_id=author_id,
        video_path=video_path,
        duration=duration,
        caption=caption,
        visibility=visibility,
    )


async def get(db: AsyncSession, reel_id: int, viewer_id: int | None) -> dict:
    """Cada lectura individual cuenta como una vista."""
    reel = await get_reel_or_404(db, reel_id)
    follows = bool(viewer_id) and await is_following(db, viewer_id, reel.user_id)
    if not can_view(reel, viewer_id, follows):
        raise AuthorizationError("Not authorized to view this reel")
    await repo.increment_views(db, reel_id)
    await db.refresh(reel)
    return (await hydrate_reels(db, [reel], viewer_id=viewer_id, with_comments=True))[0]


async def update(
    db: AsyncSession,
    reel_id: int,
    requester_id: int,
    *,
    caption: str | None = None,
    visibility: str | None = None,
) -> Reel:
    reel = await get_reel_or_404(db, reel_id)
    if reel.user_id != requester_id:
        raise AuthorizationError("Not authorized to edit this reel")
    if caption is not None:
        reel.caption = _clean_caption(caption)
        reel.hashtags = extract_hashtags(reel.caption)
    if visibility is not None:
        reel.visibility = _check_visibility(visibility)
    await db.flush()
    return reel


async def toggle_like(db: AsyncSession, reel_id: int, user_id: int) -> tuple[bool, int]:
    await get_reel_or_404(db, reel_id)
    return await interactions.toggle_member(db, ReelLike, reel_id, user_id)


async def add_comment(db: AsyncSession, reel_id: int, user_id: int, content: str | None) -> dict:
    text = interactions.clean_text(
        content, COMMENT_MAX,
        required_msg="Comment content is required",
        too_long_msg="Comment too long",
    )
    await get_reel_or_404(db, reel_id)
    comment = await interactions.create_comment(db, ReelComment, reel_id, user_id, text)
    return (await interactions.hydrate_comments(db, [comment]))[0]


async def list_comments(db: AsyncSession, reel_id: int, viewer_id: int | None) -> list[dict]:
    reel = await get_reel_or_404(db, reel_id)
    follows = bool(viewer_id) and await is_following(db, viewer_id, reel.user_id)
    if not can_view(reel, viewer_id, follows):
        raise AuthorizationError("Not authorized to view this reel")
    comments = await interactions.list_comments(db, ReelComment, reel_id)
    return await interactions.hydrate_comments(db, comments)


async def share(db: AsyncSession, reel_id: int, user_id: int) -> int:
    await get_reel_or_404(db, reel_id)
    return await interactions.add_member(db, ReelShare, reel_id, user_id)


async def delete(db: AsyncSession, reel_id: int, requester_id: int) -> str:
    """
    Borra la fila. Devuelve la ruta del video para que el caller lo
    elimine del disco después del commit.
    """
    reel = await get_reel_or_404(db, reel_id)
    if reel.user_id != requester_id:
        raise AuthorizationError("Not authorized to delete this reel")
    video_path = reel.video_path
    await repo.delete_reel(db, reel)
    log.info(f"🗑️ reel {reel_id} eliminado por {requester_id}")
    return video_path


async def list_feed(db: AsyncSession, viewer_id: int | None, page: int, limit: int) -> dict:
    following = await following_ids(db, viewer_id) if viewer_id else []
    reels, total = await paginate(
        db, Reel, feed_clause(Reel, viewer_id, following), page=page, limit=limit
    )
    return {
        "reels": await hydrate_reels(db, reels, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Reels"),
    }


async def list_by_author(
    db: AsyncSession, author_id: int, viewer_id: int | None, page: int, limit: int
) -> dict:
    follows = bool(viewer_id) and await is_following(db, viewer_id, author_id)
    reels, total = await paginate(
        db, Reel, author_clause(Reel, author_id, viewer_id, follows), page=page, limit=limit
    )
    return {
        "reels": await hydrate_reels(db, reels, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Reels"),
    }


async def search(db: AsyncSession, query: str, viewer_id: int | None, page: int, limit: int) -> dict:
    reels, total = await paginate(db, Reel, repo.search_clause(query), page=page, limit=limit)
    return {
        "reels": await hydrate_reels(db, reels, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Reels"),
    }
