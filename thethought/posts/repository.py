# thethought/posts/repository.py
from sqlalchemy import select, or_, and_
from sqlalchemy.ext.asyncio import AsyncSession

from thethought.core.text import contains_pattern, LIKE_ESCAPE
from thethought.feed.service import VISIBILITY_PUBLIC
from thethought.posts.models import Post
from thethought.social.hashtags import extract_hashtags, hashtag_clause


async def create_post(
    db: AsyncSession,
    user_id: int,
    content: str,
    visibility: str = VISIBILITY_PUBLIC,
) -> Post:
    post = Post(
        user_id=user_id,
        content=content,
        visibility=visibility,
        hashtags=extract_hashtags(content),
    )
    db.add(post)
    await db.flush()
    await db.refresh(post)
    return post


async def get_post(db: AsyncSession, post_id: int) -> Post | None:
    res = await db.execute(select(Post).where(Post.id == post_id))
    return res.scalar_one_or_none()


async def delete_post(db: AsyncSession, post: Post) -> None:
    await db.delete(post)
    await db.flush()


def search_clause(query: str):
    """Públicos cuyo contenido contiene `query` o que llevan `#query`."""
    return and_(
        or_(
            Post.content.ilike(contains_pattern(query), escape=LIKE_ESCAPE),
            hashtag_clause(Post.hashtags, query),
        ),
        Post.visibility == VISIBILITY_PUBLIC,
    )
