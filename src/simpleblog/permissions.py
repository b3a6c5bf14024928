# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Optional

from fastapi import HTTPException, Request

from simpleblog.auth.session import SessionCodec
from simpleblog.config import Settings
from simpleblog.infra.posts_repo import Post, get_post

logger = logging.getLogger(__name__)

HOME_URL = "/"
NO_POST_URL = "/no-post"


@dataclass(frozen=True)
class CurrentUser:
    id: int
    username: str


def redirect_to(url: str) -> HTTPException:
    return HTTPException(status_code=303, headers={"Location": url})


def load_user_from_cookie(token: Optional[str], codec: SessionCodec) -> Optional[CurrentUser]:
    result = codec.verify(token)
    if not result.ok or result.session is None:
        return None
    return CurrentUser(id=result.session.user_id, username=result.session.username)


def current_user_optional(request: Request) -> Optional[CurrentUser]:
    """The user decoded by the auth middleware for this request (None if anonymous)."""
    return getattr(request.state, "user", None)


def require_user(request: Request) -> CurrentUser:
    u = current_user_optional(request)
    if u:
        return u
    raise redirect_to(HOME_URL)


def load_owned_post(conn: sqlite3.Connection, post_id: int, user: CurrentUser) -> Post:
    """Fetch a post fresh from the store and make sure `user` authored it.

    Missing posts redirect to the not-found page, foreign posts to home.
    """
    post = get_post(conn, post_id)
    if post is None:
        raise redirect_to(NO_POST_URL)
    if post.author_id != user.id:
        logger.warning("User %s denied mutation of post %s (owner %s)", user.id, post_id, post.author_id)
        raise redirect_to(HOME_URL)
    return post


def cookie_settings(settings: Settings) -> dict:
    return {
        "httponly": True,
        "samesite": "strict",
        "secure": settings.cookie_secure,
        "max_age": settings.session_max_age,
    }
