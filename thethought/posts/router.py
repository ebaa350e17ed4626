# thethought/posts/router.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

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
from thethought.posts import service as svc
from thethought.posts.schemas import (
    PostCreate,
    PostUpdate,
    PostPage,
    PostEnvelope,
)
from thethought.users.deps import get_current_user, get_optional_user
from thethought.users.models import User

router = APIRouter(
    prefix="/api/posts",
    tags=["posts"],
    default_response_class=UTF8JSONResponse,
)


@router.get("/", response_model=PostPage)
async def feed_list(
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_feed(db, viewer.id if viewer else None, page, limit)


@router.post("/", response_model=PostEnvelope, status_code=201)
async def publish(
    payload: PostCreate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    post = await svc.create(db, user.id, payload.content, payload.visibility)
    await db.commit()
    hydrated = await svc.hydrate_posts(db, [post], viewer_id=user.id)
    return {"message": "Post created successfully", "post": hydrated[0]}


@router.get("/search/{query}/", response_model=PostPage)
async def search_posts(
    query: str,
    page: int = Query(1, ge=1),
    limit: int = Query(DEFAULT_LIMIT, ge=1, le=MAX_LIMIT),
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.search(db, query, viewer.id if viewer else None, page, limit)


@router.get("/{post_id}/", response_model=PostEnvelope)
async def get_post(
    post_id: int,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return {"post": await svc.get(db, post_id, viewer.id if viewer else None)}


@router.patch("/{post_id}/", response_model=PostEnvelope)
async def edit_post(
    post_id: int,
    body: PostUpdate,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    """Solo el autor puede editar; los hashtags se recalculan."""
    post = await svc.update(
        db, post_id, user.id, content=body.content, visibility=body.visibility
    )
    await db.commit()
    hydrated = await svc.hydrate_posts(db, [post], viewer_id=user.id)
    return {"message": "Post updated successfully", "post": hydrated[0]}


@router.post("/{post_id}/like/", response_model=LikeToggleOut)
async def toggle_like(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    liked, count = await svc.toggle_like(db, post_id, user.id)
    await db.commit()
    return {
        "message": "Post liked" if liked else "Post unliked",
        "is_liked": liked,
        "like_count": count,
    }


@router.post("/{post_id}/comment/", response_model=CommentEnvelope, status_code=201)
async def comment_post(
    post_id: int,
    payload: CommentIn,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    comment = await svc.add_comment(db, post_id, user.id, payload.content)
    await db.commit()
    return {"message": "Comment added successfully", "comment": comment}


@router.get("/{post_id}/comments/", response_model=list[CommentOut])
async def post_comments(
    post_id: int,
    viewer: User | None = Depends(get_optional_user),
    db: AsyncSession = Depends(get_session),
):
    return await svc.list_comments(db, post_id, viewer.id if viewer else None)


@router.post("/{post_id}/share/", response_model=ShareOut)
async def share_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    count = await svc.share(db, post_id, user.id)
    await db.commit()
    return {"message": "Post shared successfully", "share_count": count}


@router.delete("/{post_id}/", response_model=MessageOut)
async def delete_post(
    post_id: int,
    user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_session),
):
    await svc.delete(db, post_id, user.id)
    await db.commit()
    return {"message": "Post deleted successfully"}
