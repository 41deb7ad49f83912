"""
Pydantic request bodies.

Fields are optional at the schema level so that missing values reach the
controllers, which answer with the API's own 400 messages.
"""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel


class RegisterRequest(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginRequest(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


class PostCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None
    published: Optional[bool] = None
    authorId: Optional[Union[int, str]] = None


class PostUpdate(BaseModel):
    """Partial update: only fields present in the body are applied."""

    title: Optional[str] = None
    content: Optional[str] = None
    published: Optional[bool] = None


class CommentCreate(BaseModel):
    content: Optional[str] = None
    postId: Optional[Union[int, str]] = None


class CommentUpdate(BaseModel):
    content: Optional[str] = None
