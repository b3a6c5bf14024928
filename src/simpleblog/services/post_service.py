# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional, Tuple

from simpleblog.core.utils import as_text, now_iso, strip_tags
from simpleblog.infra import posts_repo
from simpleblog.infra.posts_repo import Post

logger = logging.getLogger(__name__)


def clean_post_fields(title, body) -> Tuple[str, str, List[str]]:
    """Sanitise a post form and collect errors.

    Titles lose all markup; bodies are markdown source and are only trimmed
    here (escaping happens at render time).
    """
    title = strip_tags(title)
    body = as_text(body).strip()
    errors: List[str] = []
    if not title:
        errors.append("You must provide a title")
    if not body:
        errors.append("You must provide body content")
    return title, body, errors


def create_post(conn: sqlite3.Connection, *, author_id: int, title, body) -> Tuple[Optional[int], Post, List[str]]:
    """Create a post for author_id.

    Returns (new_id, draft, errors); new_id is None when validation failed,
    and draft holds the cleaned values for re-rendering the form.
    """
    title, body, errors = clean_post_fields(title, body)
    draft = Post(id=0, title=title, body=body, author_id=author_id, created_date="")
    if errors:
        return None, draft, errors
    post_id = posts_repo.create_post(conn, title=title, body=body, author_id=author_id, created_date=now_iso())
    logger.info("User %s created post %s", author_id, post_id)
    return post_id, draft, []


def edit_post(conn: sqlite3.Connection, post: Post, title, body) -> Tuple[Post, List[str]]:
    """Update an already ownership-checked post.

    Returns the post as it should be displayed (updated or draft) plus errors.
    """
    title, body, errors = clean_post_fields(title, body)
    updated = Post(
        id=post.id,
        title=title,
        body=body,
        author_id=post.author_id,
        created_date=post.created_date,
        author_username=post.author_username,
    )
    if errors:
        return updated, errors
    posts_repo.update_post(conn, post.id, title=title, body=body)
    logger.info("User %s edited post %s", post.author_id, post.id)
    return updated, []


def delete_post(conn: sqlite3.Connection, post: Post) -> None:
    posts_repo.delete_post(conn, post.id)
    logger.info("User %s deleted post %s", post.author_id, post.id)
