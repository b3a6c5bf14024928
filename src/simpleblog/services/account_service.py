# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional, Tuple

from simpleblog.auth.passwords import hash_password
from simpleblog.auth.users import USERNAME_TAKEN, validate_registration
from simpleblog.infra.users_repo import UserRecord, create_user

logger = logging.getLogger(__name__)


def register_user(conn: sqlite3.Connection, username, password) -> Tuple[Optional[UserRecord], List[str]]:
    """Validate and create a user.

    Nothing is written unless every check passes. A concurrent insert of the
    same username surfaces as the usual "taken" error.
    """
    username, password, errors = validate_registration(conn, username, password)
    if errors:
        return None, errors

    try:
        user = create_user(conn, username, hash_password(password))
    except sqlite3.IntegrityError:
        return None, [USERNAME_TAKEN]

    logger.info("Registered user %s (id=%s)", user.username, user.id)
    return user, []
