# thethought/posts/service.py
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
from thethought.posts import repository as repo
from thethought.posts.models import Post, PostLike, PostShare, PostComment, CONTENT_MAX, COMMENT_MAX
from thethought.social import interactions
from thethought.social.hashtags import extract_hashtags
from thethought.users.repository import following_ids, is_following

log = logging.getLogger("uvicorn")


def _check_visibility(visibility: str | None) -> str:
    visibility = visibility or VISIBILITY_PUBLIC
    if visibility not in VISIBILITY_CHOICES:
        raise ValidationError("Invalid visibility")
    return visibility


async def hydrate_posts(
    db: AsyncSession,
    posts: list[Post],
    *,
    viewer_id: int | None = None,
    with_comments: bool = False,
) -> list[dict]:
    base = await interactions.hydrate_counters(
        db,
        posts,
        like_model=PostLike,
        share_model=PostShare,
        comment_model=PostComment,
        viewer_id=viewer_id,
    )
    out = []
    for post, data in zip(posts, base):
        data["content"] = post.content
        if with_comments:
            comments = await interactions.list_comments(db, PostComment, post.id)
            data["comments"] = await interactions.hydrate_comments(db, comments)
        out.append(data)
    return out


async def get_post_or_404(db: AsyncSession, post_id: int) -> Post:
    post = await repo.get_post(db, post_id)
    if not post:
        raise NotFoundError("Post not found")
    return post


async def create(db: AsyncSession, author_id: int, content: str | None, visibility: str | None) -> Post:
    text = interactions.clean_text(content, CONTENT_MAX)
    return await repo.create_post(db, author_id, text, _check_visibility(visibility))


async def get(db: AsyncSession, post_id: int, viewer_id: int | None) -> dict:
    post = await get_post_or_404(db, post_id)
    follows = bool(viewer_id) and await is_following(db, viewer_id, post.user_id)
    if not can_view(post, viewer_id, follows):
        raise AuthorizationError("Not authorized to view this post")
    return (await hydrate_posts(db, [post], viewer_id=viewer_id, with_comments=True))[0]


async def update(
    db: AsyncSession,
    post_id: int,
    requester_id: int,
    *,
    content: str | None = None,
    visibility: str | None = None,
) -> Post:
    post = await get_post_or_404(db, post_id)
    if post.user_id != requester_id:
        raise AuthorizationError("Not authorized to edit this post")
    if content is not None:
        post.content = interactions.clean_text(content, CONTENT_MAX)
        post.hashtags = extract_hashtags(post.content)
    if visibility is not None:
        post.visibility = _check_visibility(visibility)
    await db.flush()
    return post


async def toggle_like(db: AsyncSession, post_id: int, user_id: int) -> tuple[bool, int]:
    await get_post_or_404(db, post_id)
    return await interactions.toggle_member(db, PostLike, post_id, user_id)


async def add_comment(db: AsyncSession, post_id: int, user_id: int, content: str | None) -> dict:
    text = interactions.clean_text(
        content, COMMENT_MAX,
        required_msg="Comment content is required",
        too_long_msg="Comment too long",
    )
    await get_post_or_404(db, post_id)
    comment = await interactions.create_comment(db, PostComment, post_id, user_id, text)
    return (await interactions.hydrate_comments(db, [comment]))[0]


async def list_comments(db: AsyncSession, post_id: int, viewer_id: int | None) -> list[dict]:
    post = await get_post_or_404(db, post_id)
    follows = bool(viewer_id) and await is_following(db, viewer_id, post.user_id)
    if not can_view(post, viewer_id, follows):
        raise AuthorizationError("Not authorized to view this post")
    comments = await interactions.list_comments(db, PostComment, post_id)
    return await interactions.hydrate_comments(db, comments)


async def share(db: AsyncSession, post_id: int, user_id: int) -> int:
    await get_post_or_404(db, post_id)
    return await interactions.add_member(db, PostShare, post_id, user_id)


async def delete(db: AsyncSession, post_id: int, requester_id: int) -> None:
    post = await get_post_or_404(db, post_id)
    if post.user_id != requester_id:
        raise AuthorizationError("Not authorized to delete this post")
    await repo.delete_post(db, post)
    log.info(f"🗑️ post {post_id} eliminado por {requester_id}")


async def list_feed(db: AsyncSession, viewer_id: int | None, page: int, limit: int) -> dict:
    following = await following_ids(db, viewer_id) if viewer_id else []
    posts, total = await paginate(
        db, Post, feed_clause(Post, viewer_id, following), page=page, limit=limit
    )
    return {
        "posts": await hydrate_posts(db, posts, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Posts"),
    }


async def list_by_author(
    db: AsyncSession, author_id: int, viewer_id: int | None, page: int, limit: int
) -> dict:
    follows = bool(viewer_id) and await is_following(db, viewer_id, author_id)
    posts, total = await paginate(
        db, Post, author_clause(Post, author_id, viewer_id, follows), page=page, limit=limit
    )
    return {
        "posts": await hydrate_posts(db, posts, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Posts"),
    }


async def search(db: AsyncSession, query: str, viewer_id: int | None, page: int, limit: int) -> dict:
    posts, total = await paginate(db, Post, repo.search_clause(query), page=page, limit=limit)
    return {
        "posts": await hydrate_posts(db, posts, viewer_id=viewer_id),
        "pagination": pagination_meta(page, limit, total, "Posts"),
    }
