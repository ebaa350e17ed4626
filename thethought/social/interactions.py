# thethought/social/interactions.py
"""
Likes, shares y comentarios sobre cualquier item (post o reel).

Las funciones reciben la clase del modelo concreto (PostLike, ReelShare,
...) para no duplicar la lógica entre posts y reels.

Likes y shares se aplican como operaciones atómicas sobre filas únicas:
nunca se carga el item entero para reescribirlo.
"""
from __future__ import annotations

from typing import Iterable

from sqlalchemy import select, func, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.errors import ValidationError
from thethought.profile.service import summaries_for


def clean_text(
    text: str | None,
    max_length: int,
    *,
    required_msg: str = "Content is required",
    too_long_msg: str = "Content too long",
) -> str:
    """Recorta y valida un texto obligatorio."""
    value = (text or "").strip()
    if not value:
        raise ValidationError(required_msg)
    if len(value) > max_length:
        raise ValidationError(too_long_msg)
    return value


# -------------------------
# ❤️ conjuntos (likes / shares)
# -------------------------
async def count_members(db: AsyncSession, model, item_id: int) -> int:
    res = await db.execute(
        select(func.count()).select_from(model).where(model.item_id == item_id)
    )
    return int(res.scalar_one() or 0)


async def _insert_member(db: AsyncSession, model, item_id: int, user_id: int) -> None:
    try:
        async with db.begin_nested():
            db.add(model(item_id=item_id, user_id=user_id))
    except IntegrityError:
        # otra petición lo insertó primero: el conjunto ya lo contiene
        pass


async def toggle_member(
    db: AsyncSession, model, item_id: int, user_id: int
) -> tuple[bool, int]:
    """
    Quita al usuario si está, lo agrega si no.
    Devuelve (es_miembro, total).
    """
    res = await db.execute(
        delete(model).where(model.item_id == item_id, model.user_id == user_id)
    )
    if res.rowcount:
        member = False
    else:
        await _insert_member(db, model, item_id, user_id)
        member = True
    await db.flush()
    return member, await count_members(db, model, item_id)


async def add_member(db: AsyncSession, model, item_id: int, user_id: int) -> int:
    """Agrega sin toggle (idempotente). Devuelve el total."""
    res = await db.execute(
        select(model.id).where(model.item_id == item_id, model.user_id == user_id)
    )
    if res.first() is None:
        await _insert_member(db, model, item_id, user_id)
        await db.flush()
    return await count_members(db, model, item_id)


async def counts_for(db: AsyncSession, model, item_ids: Iterable[int]) -> dict[int, int]:
    ids = list(item_ids)
    if not ids:
        return {}
    res = await db.execute(
        select(model.item_id, func.count(model.id))
        .where(model.item_id.in_(ids))
        .group_by(model.item_id)
    )
    return {item_id: int(total) for item_id, total in res.all()}


async def member_item_ids(
    db: AsyncSession, model, user_id: int | None, item_ids: Iterable[int]
) -> set[int]:
    ids = list(item_ids)
    if not user_id or not ids:
        return set()
    res = await db.execute(
        select(model.item_id).where(model.user_id == user_id, model.item_id.in_(ids))
    )
    return {row[0] for row in res.all()}


# -------------------------
# 💬 comentarios
# -------------------------
async def create_comment(db: AsyncSession, model, item_id: int, user_id: int, content: str):
    c = model(item_id=item_id, user_id=user_id, content=content)
    db.add(c)
    await db.flush()
    await db.refresh(c)
    return c


async def list_comments(db: AsyncSession, model, item_id: int) -> list:
    res = await db.execute(
        select(model)
        .where(model.item_id == item_id)
        .order_by(model.created_at.asc(), model.id.asc())
    )
    return list(res.scalars())


async def hydrate_comments(db: AsyncSession, comments: list) -> list[dict]:
    authors = await summaries_for(db, [c.user_id for c in comments])
    return [
        {
            "id": c.id,
            "author": authors[c.user_id],
            "content": c.content,
            "created_at": c.created_at,
        }
        for c in comments
    ]


# -------------------------
# 📦 hidratación común de items
# -------------------------
async def hydrate_counters(
    db: AsyncSession,
    items: list,
    *,
    like_model,
    share_model,
    comment_model,
    viewer_id: int | None = None,
) -> list[dict]:
    """
    Para cada item devuelve autor + contadores + si el viewer dio like.
    Los campos propios de cada tipo los agrega el servicio del item.
    """
    ids = [it.id for it in items]
    authors = await summaries_for(db, [it.user_id for it in items])
    likes = await counts_for(db, like_model, ids)
    shares = await counts_for(db, share_model, ids)
    comments = await counts_for(db, comment_model, ids)
    liked = await member_item_ids(db, like_model, viewer_id, ids)

    return [
        {
            "id": it.id,
            "author": authors[it.user_id],
            "hashtags": list(it.hashtags or []),
            "visibility": it.visibility,
            "created_at": it.created_at,
            "like_count": likes.get(it.id, 0),
            "comment_count": comments.get(it.id, 0),
            "share_count": shares.get(it.id, 0),
            "is_liked": it.id in liked,
        }
        for it in items
    ]
