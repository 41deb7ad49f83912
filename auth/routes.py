"""
Auth API routes — register, login, logout, current user, user list.

Routes are mounted at the application root (``/register``, ``/login``,
``/logout``, ``/auth/me``, ``/users``).
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from fastapi import APIRouter, Depends, status
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from auth.dependencies import current_user_id, db_session, get_current_user
from auth.jwt import create_token
from auth.password import hash_password, verify_password
from config.settings import config
from database.helpers import get_user_by_email, get_user_by_id, list_users, user_to_dict
from database.models import User
from utils.errors import Conflict, NotFound, Unauthorized, ValidationError, internal_error
from utils.schemas import LoginRequest, RegisterRequest
from utils.validators import is_present, is_valid_email

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])


@router.post("/register", status_code=status.HTTP_201_CREATED)
async def register(
    req: RegisterRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Register a new user."""
    if not (is_present(req.username) and is_present(req.email) and is_present(req.password)):
        raise ValidationError("All fields are required")
    if not is_valid_email(req.email):
        raise ValidationError("Invalid email format")
    if len(req.password) < config.password_min_length:
        raise ValidationError(
            f"Password must be at least {config.password_min_length} characters long"
        )
    if len(req.password.encode()) > config.password_max_bytes:
        raise ValidationError(
            f"Password must be at most {config.password_max_bytes} bytes long"
        )

    try:
        if await get_user_by_email(session, req.email) is not None:
            raise Conflict("User with this email already exists")

        user = User(
            username=req.username,
            email=req.email,
            password_hash=hash_password(req.password),
        )
        session.add(user)
        await session.commit()
    except IntegrityError:
        await session.rollback()
        raise Conflict("User with this email already exists")
    except (SQLAlchemyError, ValueError) as exc:
        await session.rollback()
        logger.error("Failed to register %s: %s", req.email, exc)
        raise internal_error("Failed to register user", exc)

    logger.info("Registered user %s (%s)", user.username, user.id)
    return user_to_dict(user)


@router.post("/login")
async def login(
    req: LoginRequest,
    session: AsyncSession = Depends(db_session),
) -> Dict[str, str]:
    """Login with email + password."""
    if not (is_present(req.email) and is_present(req.password)):
        raise ValidationError("Email and password are required")

    try:
        user = await get_user_by_email(session, req.email)
    except SQLAlchemyError as exc:
        logger.error("Login lookup failed for %s: %s", req.email, exc)
        raise internal_error("Login failed", exc)

    if user is None:
        raise NotFound("User not found")
    if not verify_password(req.password, user.password_hash):
        raise Unauthorized("Invalid credentials")

    token = create_token(user.id, user.email)
    logger.info("Login: %s (%s)", user.username, user.id)
    return {"token": token}


@router.post("/logout")
async def logout(claims: Dict[str, Any] = Depends(get_current_user)) -> Dict[str, str]:
    """
    Acknowledge a logout.

    Tokens are stateless, so nothing changes server-side: the client is
    expected to discard its token.
    """
    return {"message": "Logged out successfully"}


@router.get("/auth/me")
async def me(
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> Dict[str, Any]:
    """Return the authenticated user's profile."""
    user_id = current_user_id(claims)
    if user_id is None:
        raise ValidationError("Token payload invalid: missing user id")

    try:
        user = await get_user_by_id(session, user_id)
    except SQLAlchemyError as exc:
        raise internal_error("Failed to fetch user", exc)

    if user is None:
        raise NotFound("User not found")
    return user_to_dict(user)


@router.get("/users")
async def get_all_users(
    claims: Dict[str, Any] = Depends(get_current_user),
    session: AsyncSession = Depends(db_session),
) -> List[Dict[str, Any]]:
    """List every user (without password hashes)."""
    try:
        users = await list_users(session)
    except SQLAlchemyError as exc:
        logger.error("Error fetching users: %s", exc)
        raise internal_error("Failed to fetch users", exc)
    return [user_to_dict(u) for u in users]
