# thethought/users/service.py
from __future__ import annotations

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.errors import ValidationError, AuthorizationError, NotFoundError
from thethought.core.security import hash_password, create_access_token, verify_password
from thethought.feed.service import (
    VISIBILITY_PUBLIC,
    count_items,
    latest,
    offset_for,
    pagination_meta,
)
from thethought.posts import service as posts_svc
from thethought.posts.models import Post
from thethought.profile.models import Profile, PRIVACY_CHOICES, PRIVACY_PRIVATE
from thethought.profile.repository import get_by_user_id
from thethought.profile.service import ensure_profile, to_media_url, user_summary, privacy_of
from thethought.reels import service as reels_svc
from thethought.reels.models import Reel
from thethought.users import repository as repo
from thethought.users.models import User
from thethought.users.schemas import UserCreate

log = logging.getLogger("uvicorn")

RECENT_LIMIT = 10
FOLLOW_LIMIT = 20


def _public_user(user: User, profile: Profile | None) -> dict:
    data = user_summary(user, profile)
    data.update(
        bio=profile.bio if profile else None,
        privacy=privacy_of(profile),
        created_at=user.created_at,
    )
    return data


async def register_user(db: AsyncSession, data: UserCreate) -> tuple[dict, str]:
    if await repo.get_by_username(db, data.username):
        raise ValidationError("Username already exists")
    if await repo.get_by_email(db, data.email):
        raise ValidationError("Email already exists")

    hashed = hash_password(data.password)
    user = await repo.create_user(db, data.username, data.email, hashed)
    prof = await ensure_profile(db, user.id, display_name=data.display_name)
    log.info(f"👤 usuario registrado: {user.username}")

    # El commit lo hace el router
    return user_summary(user, prof), create_access_token(sub=str(user.id))


async def authenticate_user(db: AsyncSession, username_or_email: str, password: str) -> User | None:
    user = await repo.get_by_username(db, username_or_email)
    if not user and "@" in username_or_email:
        user = await repo.get_by_email(db, username_or_email)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


async def login_user(db: AsyncSession, username_or_email: str, password: str) -> tuple[User, str]:
    user = await authenticate_user(db, username_or_email, password)
    if not user:
        raise ValueError("invalid credentials")
    return user, create_access_token(sub=str(user.id))


async def me(db: AsyncSession, user: User) -> dict:
    prof = await ensure_profile(db, user.id)
    data = _public_user(user, prof)
    data["email"] = user.email
    return data


async def update_me(
    db: AsyncSession,
    user: User,
    *,
    display_name: str | None = None,
    bio: str | None = None,
    privacy: str | None = None,
) -> dict:
    prof = await ensure_profile(db, user.id)
    if display_name is not None:
        prof.display_name = display_name.strip() or None
    if bio is not None:
        prof.bio = bio.strip() or None
    if privacy is not None:
        if privacy not in PRIVACY_CHOICES:
            raise ValidationError("Invalid privacy setting")
        prof.privacy = privacy
    await db.flush()
    return await me(db, user)


async def set_avatar(db: AsyncSession, user: User, rel_path: str) -> tuple[str | None, dict]:
    """
    Guarda la nueva ruta del avatar. Devuelve (ruta anterior, respuesta)
    para que el router borre el archivo viejo después del commit.
    """
    prof = await ensure_profile(db, user.id)
    previous = prof.avatar
    prof.avatar = rel_path
    await db.flush()
    return previous, {"avatar": rel_path, "url": to_media_url(rel_path)}


async def _get_user_or_404(db: AsyncSession, username: str) -> User:
    user = await repo.get_by_username(db, username)
    if not user:
        raise NotFoundError("User not found")
    return user


async def _viewer_follows(db: AsyncSession, viewer_id: int | None, user_id: int) -> bool:
    return bool(viewer_id) and await repo.is_following(db, viewer_id, user_id)


async def get_profile(db: AsyncSession, username: str, viewer_id: int | None) -> dict:
    user = await _get_user_or_404(db, username)
    prof = await get_by_user_id(db, user.id)

    posts = await latest(
        db, Post, Post.user_id == user.id, Post.visibility == VISIBILITY_PUBLIC, limit=RECENT_LIMIT
    )
    reels = await latest(
        db, Reel, Reel.user_id == user.id, Reel.visibility == VISIBILITY_PUBLIC, limit=RECENT_LIMIT
    )

    return {
        "user": _public_user(user, prof),
        "posts": await posts_svc.hydrate_posts(db, posts, viewer_id=viewer_id),
        "reels": await reels_svc.hydrate_reels(db, reels, viewer_id=viewer_id),
        "posts_count": await count_items(db, Post, Post.user_id == user.id),
        "reels_count": await count_items(db, Reel, Reel.user_id == user.id),
        "followers_count": await repo.count_followers(db, user.id),
        "following_count": await repo.count_following(db, user.id),
        "is_following": (
            await _viewer_follows(db, viewer_id, user.id) if viewer_id else None
        ),
    }


async def _check_private(db: AsyncSession, user: User, viewer_id: int | None, what: str) -> None:
    """
    Perfil privado: solo el dueño y sus seguidores ven el contenido
    (anónimos tampoco).
    """
    prof = await get_by_user_id(db, user.id)
    if privacy_of(prof) != PRIVACY_PRIVATE:
        return
    if viewer_id == user.id:
        return
    if await _viewer_follows(db, viewer_id, user.id):
        return
    raise AuthorizationError(f"This user's {what} are private")


async def list_posts(
    db: AsyncSession, username: str, viewer_id: int | None, page: int, limit: int
) -> dict:
    user = await _get_user_or_404(db, username)
    await _check_private(db, user, viewer_id, "posts")
    return await posts_svc.list_by_author(db, user.id, viewer_id, page, limit)


async def list_reels(
    db: AsyncSession, username: str, viewer_id: int | None, page: int, limit: int
) -> dict:
    user = await _get_user_or_404(db, username)
    await _check_private(db, user, viewer_id, "reels")
    return await reels_svc.list_by_author(db, user.id, viewer_id, page, limit)


async def list_followers(db: AsyncSession, username: str, page: int, limit: int = FOLLOW_LIMIT) -> dict:
    user = await _get_user_or_404(db, username)
    rows = await repo.list_followers(db, user.id, limit, offset_for(page, limit))
    total = await repo.count_followers(db, user.id)
    return {
        "users": [user_summary(u, p) for u, p in rows],
        "pagination": pagination_meta(page, limit, total, "Followers"),
    }


async def list_following(db: AsyncSession, username: str, page: int, limit: int = FOLLOW_LIMIT) -> dict:
    user = await _get_user_or_404(db, username)
    rows = await repo.list_following(db, user.id, limit, offset_for(page, limit))
    total = await repo.count_following(db, user.id)
    return {
        "users": [user_summary(u, p) for u, p in rows],
        "pagination": pagination_meta(page, limit, total, "Following"),
    }


async def search_users(db: AsyncSession, query: str, page: int, limit: int) -> dict:
    rows = await repo.search_users(db, query, limit, offset_for(page, limit))
    total = await repo.count_search_users(db, query)
    return {
        "users": [user_summary(u, p) for u, p in rows],
        "pagination": pagination_meta(page, limit, total, "Users"),
    }


async def toggle_follow(db: AsyncSession, follower: User, username: str) -> dict:
    target = await _get_user_or_404(db, username)
    if target.id == follower.id:
        raise ValidationError("You cannot follow yourself")

    now_following = await repo.toggle_follow(db, follower.id, target.id)
    return {
        "message": "User followed" if now_following else "User unfollowed",
        "is_following": now_following,
        "followers_count": await repo.count_followers(db, target.id),
    }
