# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import re
import sqlite3
from typing import List, Optional, Tuple

from simpleblog.auth.passwords import hash_password, needs_rehash, verify_password
from simpleblog.core.utils import as_text
from simpleblog.infra.users_repo import UserRecord, get_user_by_username, update_password_hash

logger = logging.getLogger(__name__)

USERNAME_RE = re.compile(r"^[a-zA-Z0-9]+$")
USERNAME_MIN, USERNAME_MAX = 3, 10
PASSWORD_MIN, PASSWORD_MAX = 8, 18

INVALID_CREDENTIALS = "Invalid username/password"
USERNAME_TAKEN = "Username is already taken"


def validate_registration(conn: sqlite3.Connection, username, password) -> Tuple[str, str, List[str]]:
    """Check a registration form.

    Returns the cleaned username and password plus every error found; the
    caller must not write anything when the error list is non-empty.
    """
    username = as_text(username).strip()
    password = as_text(password)
    errors: List[str] = []

    if not username:
        errors.append("You must provide a username")
    if username and len(username) < USERNAME_MIN:
        errors.append(f"Username cannot be less than {USERNAME_MIN} characters")
    if username and len(username) > USERNAME_MAX:
        errors.append(f"Username cannot be more than {USERNAME_MAX} characters")
    if username and not USERNAME_RE.match(username):
        errors.append("Username can only contains letters and numbers")

    if username and get_user_by_username(conn, username) is not None:
        errors.append(USERNAME_TAKEN)

    if not password:
        errors.append("You must provide a Password")
    if password and len(password) < PASSWORD_MIN:
        errors.append(f"Password cannot be less than {PASSWORD_MIN} characters")
    if password and len(password) > PASSWORD_MAX:
        errors.append(f"Password cannot be more than {PASSWORD_MAX} characters")

    return username, password, errors


def authenticate(conn: sqlite3.Connection, username, password) -> Optional[UserRecord]:
    """Return the user for a correct username/password pair, else None.

    Unknown user and wrong password are deliberately indistinguishable.
    """
    username = as_text(username)
    password = as_text(password)
    if not username.strip() or not password:
        return None
    u = get_user_by_username(conn, username)
    if not u:
        return None
    if not verify_password(u.password_hash, password):
        return None
    if needs_rehash(u.password_hash):
        new_hash = hash_password(password)
        update_password_hash(conn, u.id, new_hash)
        logger.info("Upgraded password hash for user %s", u.id)
        u = UserRecord(id=u.id, username=u.username, password_hash=new_hash)
    return u
