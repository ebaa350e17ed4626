# thethought/reels/repository.py
from sqlalchemy import select, update, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.text import contains_pattern, LIKE_ESCAPE
from thethought.feed.service import VISIBILITY_PUBLIC
from thethought.reels.models import Reel
from thethought.social.hashtags import extract_hashtags, hashtag_clause


async def create_reel(
    db: AsyncSession,
    user_id: int,
    video_path: str,
    duration: int,
    caption: str = "",
    visibility: str = VISIBILITY_PUBLIC,
) -> Reel:
    reel = Reel(
        user_id=user_id,
        video_path=video_path,
        duration=duration,
        caption=caption,
        visibility=visibility,
        hashtags=extract_hashtags(caption),
    )
    db.add(reel)
    await db.flush()
    await db.refresh(reel)
    return reel


async def get_reel(db: AsyncSession, reel_id: int) -> Reel | None:
    res = await db.execute(select(Reel).where(Reel.id == reel_id))
    return res.scalar_one_or_none()


async def increment_views(db: AsyncSession, reel_id: int) -> int:
    """
    Suma una vista en la propia DB (sin leer-modificar-guardar).
    """
    await db.execute(
        update(Reel)
        .where(Reel.id == reel_id)
        .values(views=Reel.views + 1)
        .execution_options(synchronize_session=False)
    )
    res = await db.execute(select(Reel.views).where(Reel.id == reel_id))
    return int(res.scalar_one_or_none() or 0)


async def delete_reel(db: AsyncSession, reel: Reel) -> None:
    await db.delete(reel)
    await db.flush()


def search_clause(query: str):
    return and_(
        or_(
            Reel.caption.ilike(contains_pattern(query), escape=LIKE_ESCAPE),
            hashtag_clause(Reel.hashtags, query),
        ),
        Reel.visibility == VISIBILITY_PUBLIC,
    )
