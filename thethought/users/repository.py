# thethought/users/repository.py
from sqlalchemy import select, func, delete, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.text import contains_pattern, LIKE_ESCAPE
from thethought.users.models import User, Follow
from thethought.profile.models import Profile


async def get_by_username(db: AsyncSession, username: str) -> User | None:
    res = await db.execute(select(User).where(User.username == username))
    return res.scalar_one_or_none()


async def get_by_email(db: AsyncSession, email: str) -> User | None:
    res = await db.execute(select(User).where(User.email == email))
    return res.scalar_one_or_none()


async def get_by_id(db: AsyncSession, user_id: int) -> User | None:
    res = await db.execute(select(User).where(User.id == user_id))
    return res.scalar_one_or_none()


async def create_user(db: AsyncSession, username: str, email: str, hashed_password: str) -> User:
    user = User(username=username, email=email, hashed_password=hashed_password)
    db.add(user)
    await db.flush()
    await db.refresh(user)
    return user


# -------------------------
# 👥 grafo social
# -------------------------
async def following_ids(db: AsyncSession, user_id: int) -> list[int]:
    res = await db.execute(select(Follow.following_id).where(Follow.follower_id == user_id))
    return [row[0] for row in res.all()]


async def is_following(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    res = await db.execute(
        select(Follow.id).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    return res.first() is not None


async def toggle_follow(db: AsyncSession, follower_id: int, following_id: int) -> bool:
    """
    Sigue / deja de seguir. Devuelve True si tras la operación lo sigue.
    """
    res = await db.execute(
        delete(Follow).where(
            Follow.follower_id == follower_id,
            Follow.following_id == following_id,
        )
    )
    if res.rowcount:
        await db.flush()
        return False

    try:
        async with db.begin_nested():
            db.add(Follow(follower_id=follower_id, following_id=following_id))
    except IntegrityError:
        # doble click concurrente: la arista ya existe
        pass
    return True


async def count_followers(db: AsyncSession, user_id: int) -> int:
    res = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.following_id == user_id)
    )
    return int(res.scalar_one() or 0)


async def count_following(db: AsyncSession, user_id: int) -> int:
    res = await db.execute(
        select(func.count()).select_from(Follow).where(Follow.follower_id == user_id)
    )
    return int(res.scalar_one() or 0)


async def list_followers(db: AsyncSession, user_id: int, limit: int = 20, offset: int = 0):
    """Filas (User, Profile | None) de quienes siguen a `user_id`."""
    q = (
        select(User, Profile)
        .join(Follow, Follow.follower_id == User.id)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(Follow.following_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)
    return res.all()


async def list_following(db: AsyncSession, user_id: int, limit: int = 20, offset: int = 0):
    """Filas (User, Profile | None) de a quienes sigue `user_id`."""
    q = (
        select(User, Profile)
        .join(Follow, Follow.following_id == User.id)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(Follow.follower_id == user_id)
        .order_by(Follow.created_at.desc(), Follow.id.desc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)
    return res.all()


# -------------------------
# 🔎 búsqueda
# -------------------------
def _search_clause(query: str):
    pattern = contains_pattern(query)
    return or_(
        User.username.ilike(pattern, escape=LIKE_ESCAPE),
        Profile.display_name.ilike(pattern, escape=LIKE_ESCAPE),
    )


async def search_users(db: AsyncSession, query: str, limit: int = 10, offset: int = 0):
    q = (
        select(User, Profile)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(_search_clause(query))
        .order_by(User.username.asc())
        .limit(limit)
        .offset(offset)
    )
    res = await db.execute(q)
    return res.all()


async def count_search_users(db: AsyncSession, query: str) -> int:
    q = (
        select(func.count(User.id))
        .select_from(User)
        .outerjoin(Profile, Profile.user_id == User.id)
        .where(_search_clause(query))
    )
    res = await db.execute(q)
    return int(res.scalar_one() or 0)
