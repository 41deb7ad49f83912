"""
Database helper functions — unique-key lookups and JSON projections.

"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from database.models import Comment, Post, User



def _isoformat(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


# ── Lookups ─────────────────────────────────────────────────────────


async def get_user_by_id(session: AsyncSession, user_id: int) -> Optional[User]:
    result = await session.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def get_user_by_email(session: AsyncSession, email: str) -> Optional[User]:
    result = await session.execute(select(User).where(User.email == email))
    return result.scalar_one_or_none()


async def list_users(session: AsyncSession) -> List[User]:
    result = await session.execute(select(User).order_by(User.id))
    return list(result.scalars().all())


async def get_post(
    session: AsyncSession,
    post_id: int,
    with_comments: bool = False,
) -> Optional[Post]:
    """Fetch a post, optionally with its comments eagerly loaded."""
    stmt = select(Post).where(Post.id == post_id)
    if with_comments:
        stmt = stmt.options(selectinload(Post.comments))
    result = await session.execute(stmt)
    return result.scalar_one_or_none()


async def list_posts(session: AsyncSession) -> List[Post]:
    result = await session.execute(
        select(Post).options(selectinload(Post.comments)).order_by(Post.id)
    )
    return list(result.scalars().all())


async def get_comment(session: AsyncSession, comment_id: int) -> Optional[Comment]:
    result = await session.execute(select(Comment).where(Comment.id == comment_id))
    return result.scalar_one_or_none()


async def list_comments(
    session: AsyncSession,
    post_id: Optional[int] = None,
) -> List[Comment]:
    """All comments, optionally restricted to one post, with their users loaded."""
    stmt = select(Comment).options(selectinload(Comment.user)).order_by(Comment.id)
    if post_id is not None:
        stmt = stmt.where(Comment.post_id == post_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())


# ── Projections ─────────────────────────────────────────────────────


def user_to_dict(user: User) -> Dict[str, Any]:
    """Public view of a user. The password hash is never included."""
    return {"id": user.id, "username": user.username, "email": user.email}


def comment_to_dict(comment: Comment) -> Dict[str, Any]:
    return {
        "id": comment.id,
        "content": comment.content,
        "postId": comment.post_id,
        "userId": comment.user_id,
        "username": comment.username,
        "email": comment.email,
        "createdAt": _isoformat(comment.created_at),
    }


def comment_view(comment: Comment) -> Dict[str, Any]:
    """
    List-view projection of a comment.

    Username and email come from the linked user; a comment whose user
    cannot be resolved is shown as ``Anonymous`` / ``No Email``.
    """
    user = comment.user
    return {
        "id": comment.id,
        "content": comment.content,
        "postId": comment.post_id,
        "created_at": _isoformat(comment.created_at),
        "username": (user.username if user else None) or "Anonymous",
        "email": (user.email if user else None) or "No Email",
    }


def post_to_dict(post: Post, include_comments: bool = True) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "id": post.id,
        "title": post.title,
        "content": post.content,
        "published": post.published,
        "authorId": post.author_id,
    }
    if include_comments:
        data["comments"] = [comment_to_dict(c) for c in post.comments]
    return data
