# thethought/profile/repository.py
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from thethought.profile.models import Profile


async def get_by_user_id(db: AsyncSession, user_id: int) -> Profile | None:
    res = await db.execute(select(Profile).where(Profile.user_id == user_id))
    return res.scalar_one_or_none()


async def create_profile(db: AsyncSession, user_id: int, *, display_name=None) -> Profile:
    prof = Profile(user_id=user_id, display_name=display_name)
    db.add(prof)
    await db.flush()
    await db.refresh(prof)
    return prof
