# thethought/users/router.py
from fastapi import APIRouter, Depends, HTTPException, Query, UploadFile, File
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.json import UTF8JSONResponse
from thethought.db.session import get_session
from thethought.feed.service import DEFAULT_LIMIT, MAX_LIMIT
from thethought.media.storage import save_avatar, delete_media
from thethought.posts.schemas import PostPage
from thethought.reels.schemas import ReelPage
from thethought.users import service as svc
from thethought.users.deps import get_current_user, get_optional_user
from thethought.users.models import User
from thethought.users.schemas import (
    UserCreate,
    TokenOut,
    MeOut,
    ProfilePatch,
    AvatarOut,
    ProfilePageOut,
    UserPage,
    FollowToggleOut,
)

router = APIRouter(
    prefix="/api/users",
    tags=["users"],
    default_response_class=UTF8JSONResponse,
)


@router.post("/register/", response_model=TokenOut, status_code=201)
async def register(payload: UserCreate, db: AsyncSession = Depends(get_session)):
    summary, token = await svc.register_user(db, payload)
    await db.commit()
    return {"access_token": token, "token_type": "bearer", "user": summary}


@router.post("/login/", response_model=TokenOut)
async def login(
    form: OAuth2PasswordRequestForm = Depends(),
    db: AsyncSession = Depends(get_session),
):
    """
    Acepta x-www-form-urlencoded con:
    - username
    - password
    (puedes usar también el email como username)
    """
    try:
        _, token = await svc.login_user(db, form.username, form.password)
    except ValueError:
        raise HTTPException(status_code=401, detail="invalid credentials")
    return {"access_token": token, "token_type": "bearer"}


@router.get("/me/", response_model=MeOut)
async def me(
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.me(db, user)
    # ensure_profile puede haber creado el perfil
    await db.commit()
    return data


@router.patch("/me/", response_model=MeOut)
async def update_me(
    payload: ProfilePatch,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.update_me(
        db,
        user,
        display_name=payload.display_name,
        bio=payload.bio,
        privacy=payload.privacy,
    )
    await db.commit()
    return data


@router.post("/me/avatar/", response_model=AvatarOut)
async def me_avatar(
    file: UploadFile = File(...),
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    # guarda archivo en /media/avatars/xxxx.ext
    rel_path = save_avatar(file)
    try:
        previous, data = await svc.set_avatar(db, user, rel_path)
        await db.commit()
    except Exception:
        await db.rollback()
        delete_media(rel_path)
        raise

    delete_media(previous)
    return data


@router.get("/search/{query}/", response_model=UserPage)
async def search(
    query: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    return await svc.search_users(db, query, page, limit)


@router.get("/{username}/", response_model=ProfilePageOut)
async def profile(
    username: str,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.get_profile(db, username, viewer.id if viewer else None)


@router.get("/{username}/posts/", response_model=PostPage)
async def user_posts(
    username: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_posts(db, username, viewer.id if viewer else None, page, limit)


@router.get("/{username}/reels/", response_model=ReelPage)
async def user_reels(
    username: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_reels(db, username, viewer.id if viewer else None, page, limit)


@router.get("/{username}/followers/", response_model=UserPage)
async def followers(
    username: str,
    page: int = Query(1, ge=1),
    limit: int = Query(svc.FOLLOW_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_followers(db, username, page, limit)


@router.get("/{username}/following/", response_model=UserPage)
async def following(
    username: str,
    page: int = Query(1, ge=1),
    limit: int = Query(svc.FOLLOW_LIMIT, ge=1, le=MAX_LIMIT),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_following(db, username, page, limit)


@router.post("/{username}/follow/", response_model=FollowToggleOut)
async def follow(
    username: str,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    data = await svc.toggle_follow(db, user, username)
    await db.commit()
    return data
