# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import List, Optional


@dataclass(frozen=True)
class Post:
    id: int
    title: str
    body: str
    author_id: int
    created_date: str
    author_username: str = ""


def _to_post(row: sqlite3.Row) -> Post:
    keys = row.keys()
    return Post(
        id=int(row["id"]),
        title=row["title"],
        body=row["body"],
        author_id=int(row["author_id"]),
        created_date=row["created_date"],
        author_username=row["username"] if "username" in keys else "",
    )


def get_post(conn: sqlite3.Connection, post_id: int) -> Optional[Post]:
    """Load a post joined with its author's username."""
    row = conn.execute(
        """
        SELECT posts.*, users.username
        FROM posts
        INNER JOIN users ON posts.author_id = users.id
        WHERE posts.id = ?
        """,
        (post_id,),
    ).fetchone()
    return _to_post(row) if row is not None else None


def list_posts_by_author(conn: sqlite3.Connection, author_id: int) -> List[Post]:
    """Newest first."""
    rows = conn.execute(
        "SELECT * FROM posts WHERE author_id = ? ORDER BY created_date DESC, id DESC",
        (author_id,),
    ).fetchall()
    return [_to_post(r) for r in rows]


def create_post(conn: sqlite3.Connection, *, title: str, body: str, author_id: int, created_date: str) -> int:
    cur = conn.execute(
        "INSERT INTO posts (title, body, author_id, created_date) VALUES (?, ?, ?, ?)",
        (title, body, author_id, created_date),
    )
    return int(cur.lastrowid)


def update_post(conn: sqlite3.Connection, post_id: int, *, title: str, body: str) -> None:
    """Title and body only; created_date is never touched."""
    conn.execute("UPDATE posts SET title = ?, body = ? WHERE id = ?", (title, body, post_id))


def delete_post(conn: sqlite3.Connection, post_id: int) -> None:
    conn.execute("DELETE FROM posts WHERE id = ?", (post_id,))
