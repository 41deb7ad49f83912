"""
Post API routes.

Reads are public; create / update / delete require a Bearer token.
Only a post's author may update it, and a post with comments cannot be
deleted until its comments are removed.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import current_user_id, db_session, get_current_user
from database.helpers import get_post, get_user_by_id, list_posts, post_to_dict
from database.models import Post
from utils.errors import Conflict, Forbidden, NotFound, Unauthenticated, ValidationError, internal_error
from utils.schemas import PostCreate, PostUpdate
from utils.validators import is_present, parse_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

_INVALID_ID = "Invalid post ID"


@router.get("")
async def get_all_posts(
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """Every post with its comments attached."""
    try:
        posts = await list_posts(session)
    except SQLAlchemyError as exc:
        logger.error("Error fetching posts: %s", exc)
        raise internal_error("Failed to fetch posts", exc)
    return [post_to_dict(p) for p in posts]


@router.get("/{post_id}")
async def get_post_by_id(
    post_id: str,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    pid = parse_id(post_id, _INVALID_ID)
    try:
        post = await get_post(session, pid, with_comments=True)
    except SQLAlchemyError as exc:
        logger.error("Error fetching post %s: %s", pid, exc)
        raise internal_error("Failed to fetch post", exc)

    if post is None:
        raise NotFound("Post not found")
    return post_to_dict(post)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_post(
    req: PostCreate,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """
    Create a post for ``authorId``.

    ``published`` must be present but may be ``false``.
    """
    if not (
        is_present(req.title)
        and is_present(req.content)
        and req.published is not None
        and is_present(req.authorId)
    ):
        raise ValidationError(
            "Missing required fields: title, content, published, and authorId are required."
        )
    author_id = parse_id(req.authorId, "Invalid author ID")

    try:
        if await get_user_by_id(session, author_id) is None:
            raise NotFound("Author not found.")

        post = Post(
            title=req.title,
            content=req.content,
            published=req.published,
            author_id=author_id,
        )
        session.add(post)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error creating post: %s", exc)
        raise internal_error("Failed to create post", exc)

    logger.info("Created post %s by user %s", post.id, author_id)
    return post_to_dict(post, include_comments=False)


@router.put("/{post_id}")
async def update_post(
    post_id: str,
    req: PostUpdate,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Partially update a post owned by the caller."""
    user_id = current_user_id(claims)
    if user_id is None:
        raise Unauthenticated("Unauthorized: No valid user id found")
    pid = parse_id(post_id, _INVALID_ID)

    # Absent fields stay untouched
    changes = {k: v for k, v in req.model_dump(exclude_unset=True).items() if v is not None}

    try:
        post = await get_post(session, pid)
        if post is None:
            raise NotFound("Post not found")
        if post.author_id != user_id:
            raise Forbidden("Forbidden: You cannot update someone else's post")

        for field, value in changes.items():
            setattr(post, field, value)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error updating post %s: %s", pid, exc)
        raise internal_error("Failed to update post", exc)

    logger.info("Updated post %s by user %s (%s)", pid, user_id, ", ".join(changes) or "no changes")
    return post_to_dict(post, include_comments=False)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_post(
    post_id: str,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Response:
    """Delete a post that has no comments."""
    pid = parse_id(post_id, _INVALID_ID)

    try:
        post = await get_post(session, pid, with_comments=True)
        if post is None:
            raise NotFound("Post not found")
        if post.comments:
            raise Conflict(
                "Post has related comments",
                extra={
                    "warning": "You cannot delete this post because it has related comments",
                    "postId": pid,
                },
            )

        await session.delete(post)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error deleting post %s: %s", pid, exc)
        raise internal_error("Failed to delete post", exc)

    logger.info("Deleted post %s", pid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
