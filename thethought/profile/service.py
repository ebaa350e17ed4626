# thethought/profile/service.py
from __future__ import annotations

from typing import Iterable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.profile.models import Profile, PRIVACY_PUBLIC
from thethought.profile.repository import get_by_user_id, create_profile
from thethought.users.models import User

DELETED_USERNAME = "[deleted]"


async def ensure_profile(
    db: AsyncSession,
    user_id: int,
    *,
    display_name: str | None = None,
) -> Profile:
    """
    Garantiza que el usuario tenga perfil. No hace commit (lo hace el caller).
    """
    prof = await get_by_user_id(db, user_id)
    if prof:
        if display_name is not None and prof.display_name != display_name:
            prof.display_name = display_name
            await db.flush()
        return prof
    return await create_profile(db, user_id, display_name=display_name)


def to_media_url(rel: str | None) -> str | None:
    """Convierte una ruta relativa en /media/... para el front."""
    if not rel:
        return None
    if rel.startswith("/"):
        return rel
    return f"/media/{rel}"


def user_summary(user: User, profile: Profile | None) -> dict:
    return {
        "id": user.id,
        "username": user.username,
        "display_name": (profile.display_name if profile else None) or user.username,
        "profile_pic": to_media_url(profile.avatar) if profile else None,
    }


def deleted_user(user_id: int) -> dict:
    # referencias huérfanas: el autor ya no existe
    return {
        "id": user_id,
        "username": DELETED_USERNAME,
        "display_name": DELETED_USERNAME,
        "profile_pic": None,
    }


async def summaries_for(db: AsyncSession, user_ids: Iterable[int]) -> dict[int, dict]:
    """
    Resuelve muchos ids a su proyección resumida en una sola consulta.
    Los ids sin usuario devuelven el placeholder de usuario eliminado.
    """
    ids = {uid for uid in user_ids if uid is not None}
    if not ids:
        return {}
    res = await db.execute(
        select(User, Profile)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(User.id.in_(ids))
    )
    out = {user.id: user_summary(user, prof) for user, prof in res.all()}
    for uid in ids - out.keys():
        out[uid] = deleted_user(uid)
    return out


def privacy_of(profile: Profile | None) -> str:
    return profile.privacy if profile else PRIVACY_PUBLIC
