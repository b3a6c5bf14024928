# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class UserRecord:
    id: int
    username: str
    password_hash: str


def _to_user(row: Optional[sqlite3.Row]) -> Optional[UserRecord]:
    if row is None:
        return None
    return UserRecord(id=int(row["id"]), username=row["username"], password_hash=row["password"])


def get_user_by_username(conn: sqlite3.Connection, username: str) -> Optional[UserRecord]:
    """Exact, case-sensitive lookup."""
    row = conn.execute("SELECT * FROM users WHERE username = ?", (username,)).fetchone()
    return _to_user(row)


def create_user(conn: sqlite3.Connection, username: str, password_hash: str) -> UserRecord:
    """Insert a user row.

    Raises sqlite3.IntegrityError when the username already exists.
    """
    cur = conn.execute("INSERT INTO users (username, password) VALUES (?, ?)", (username, password_hash))
    return UserRecord(id=int(cur.lastrowid), username=username, password_hash=password_hash)


def update_password_hash(conn: sqlite3.Connection, user_id: int, password_hash: str) -> None:
    conn.execute("UPDATE users SET password = ? WHERE id = ?", (password_hash, user_id))
