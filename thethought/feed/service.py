# thethought/feed/service.py
"""
Armado de feeds: reglas de visibilidad + paginación.

Lo usan tanto posts como reels (cualquier modelo con `user_id`,
`visibility`, `created_at` e `id`).
"""
from __future__ import annotations

import math

from sqlalchemy import select, func, desc, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

VISIBILITY_PUBLIC = "public"
VISIBILITY_FOLLOWERS = "followers"
VISIBILITY_PRIVATE = "private"
VISIBILITY_CHOICES = (VISIBILITY_PUBLIC, VISIBILITY_FOLLOWERS, VISIBILITY_PRIVATE)

DEFAULT_LIMIT = 10
MAX_LIMIT = 50


def pagination_meta(page: int, limit: int, total: int, label: str) -> dict:
    """
    `label` define la clave del total: "Posts" → `totalPosts`.
    """
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "currentPage": page,
        "totalPages": total_pages,
        f"total{label}": total,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def offset_for(page: int, limit: int) -> int:
    return (max(page, 1) - 1) * limit


def feed_clause(model, viewer_id: int | None, following: list[int] | None = None):
    """
    Anónimo → solo públicos.
    Autenticado → públicos + (public|followers) de los autores que sigue.
    """
    public = model.visibility == VISIBILITY_PUBLIC
    if not viewer_id or not following:
        return public
    return or_(
        public,
        and_(
            model.user_id.in_(following),
            model.visibility.in_((VISIBILITY_PUBLIC, VISIBILITY_FOLLOWERS)),
        ),
    )


def author_clause(model, author_id: int, viewer_id: int | None, viewer_follows_author: bool):
    """
    Items de un autor que el viewer puede ver (mismas reglas que can_view).
    """
    own = model.user_id == author_id
    if viewer_id is not None and viewer_id == author_id:
        return own
    if viewer_follows_author:
        return and_(own, model.visibility.in_((VISIBILITY_PUBLIC, VISIBILITY_FOLLOWERS)))
    return and_(own, model.visibility == VISIBILITY_PUBLIC)


def can_view(item, viewer_id: int | None, viewer_follows_author: bool) -> bool:
    if item.visibility == VISIBILITY_PUBLIC:
        return True
    if viewer_id is not None and viewer_id == item.user_id:
        return True
    if item.visibility == VISIBILITY_FOLLOWERS:
        return viewer_follows_author
    return False


async def paginate(
    db: AsyncSession,
    model,
    *where,
    page: int = 1,
    limit: int = DEFAULT_LIMIT,
) -> tuple[list, int]:
    """
    Devuelve (items de la página, total) ordenados del más reciente al
    más antiguo; el id desempata fechas iguales.
    """
    count_q = select(func.count()).select_from(model).where(*where)
    total = int((await db.execute(count_q)).scalar_one() or 0)

    q = (
        select(model)
        .where(*where)
        .order_by(desc(model.created_at), desc(model.id))
        .limit(limit)
        .offset(offset_for(page, limit))
    )
    res = await db.execute(q)
    return list(res.scalars()), total


async def count_items(db: AsyncSession, model, *where) -> int:
    res = await db.execute(select(func.count()).select_from(model).where(*where))
    return int(res.scalar_one() or 0)


async def latest(db: AsyncSession, model, *where, limit: int = DEFAULT_LIMIT) -> list:
    """Los `limit` items más recientes que cumplen `where`."""
    res = await db.execute(
        select(model)
        .where(*where)
        .order_by(desc(model.created_at), desc(model.id))
        .limit(limit)
    )
    return list(res.scalars())
