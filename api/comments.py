"""
Comment API routes.

Reads are public; create / update / delete require a Bearer token.  Update
and delete are open to any authenticated caller unless
``config.enforce_comment_ownership`` is set, in which case only the
comment's author may change it.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import current_user_id, db_session, get_current_user
from config.settings import config
from database.helpers import (
    comment_to_dict,
    comment_view,
    get_comment,
    get_post,
    get_user_by_id,
    list_comments,
    user_to_dict,
)
from database.models import Comment
from utils.errors import Forbidden, InternalError, NotFound, ValidationError, internal_error
from utils.schemas import CommentCreate, CommentUpdate
from utils.validators import is_present, parse_id, parse_optional_id

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/comments", tags=["comments"])

_INVALID_ID = "Invalid comment ID"


def _check_owner(comment: Comment, claims: Dict[str, Any]) -> None:
    if config.enforce_comment_ownership and comment.user_id != current_user_id(claims):
        raise Forbidden("Forbidden: You cannot modify someone else's comment")


@router.get("")
async def get_all_comments(
    post_id: Optional[str] = Query(None, alias="postId"),
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """All comments, optionally filtered by ``?postId=``."""
    pid = parse_optional_id(post_id, "Invalid post ID")
    try:
        comments = await list_comments(session, post_id=pid)
    except SQLAlchemyError as exc:
        logger.error("Error fetching comments: %s", exc)
        raise internal_error("Failed to fetch comments", exc)
    return [comment_view(c) for c in comments]


@router.get("/{comment_id}")
async def get_comment_by_id(
    comment_id: str,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    cid = parse_id(comment_id, _INVALID_ID)
    try:
        comment = await get_comment(session, cid)
    except SQLAlchemyError as exc:
        logger.error("Error fetching comment %s: %s", cid, exc)
        raise internal_error("Failed to fetch comment", exc)

    if comment is None:
        raise NotFound("Comment not found")
    return comment_to_dict(comment)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    req: CommentCreate,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """
    Comment on a post as the authenticated user.

    The user's current username and email are copied onto the comment.
    """
    user_id = current_user_id(claims)
    if not (is_present(req.content) and is_present(req.postId) and user_id is not None):
        raise ValidationError("Missing required fields")
    post_id = parse_id(req.postId, "Invalid post ID")

    try:
        if await get_post(session, post_id) is None:
            raise NotFound("Post not found")
        user = await get_user_by_id(session, user_id)
        if user is None:
            raise NotFound("User not found")

        comment = Comment(
            content=req.content,
            post_id=post_id,
            user_id=user.id,
            username=user.username,
            email=user.email,
        )
        session.add(comment)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error creating comment: %s", exc)
        raise internal_error("Failed to create comment", exc)

    logger.info("Created comment %s on post %s by user %s", comment.id, post_id, user.id)
    body = comment_to_dict(comment)
    body["user"] = user_to_dict(user)
    return body


@router.put("/{comment_id}")
async def update_comment(
    comment_id: str,
    req: CommentUpdate,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    cid = parse_id(comment_id, _INVALID_ID)
    if not is_present(req.content):
        raise ValidationError("Content is required")

    try:
        comment = await get_comment(session, cid)
        if comment is None:
            # Reported as a store failure, not a 404
            raise InternalError("Failed to update comment", details="Comment not found")
        _check_owner(comment, claims)

        comment.content = req.content
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error updating comment %s: %s", cid, exc)
        raise internal_error("Failed to update comment", exc)

    logger.info("Updated comment %s", cid)
    return comment_to_dict(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_comment(
    comment_id: str,
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Response:
    cid = parse_id(comment_id, _INVALID_ID)

    try:
        comment = await get_comment(session, cid)
        if comment is None:
            raise InternalError("Failed to delete comment", details="Comment not found")
        _check_owner(comment, claims)

        await session.delete(comment)
        await session.commit()
    except SQLAlchemyError as exc:
        await session.rollback()
        logger.error("Error deleting comment %s: %s", cid, exc)
        raise internal_error("Failed to delete comment", exc)

    logger.info("Deleted comment %s", cid)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
