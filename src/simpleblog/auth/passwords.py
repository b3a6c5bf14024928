# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""argon2 password hashes for the users table.

Each hash embeds its own random salt and cost parameters, so hashes made
under older parameters still verify and can be upgraded on the next login.
"""

from __future__ import annotations

from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerifyMismatchError

_PH = PasswordHasher()


def hash_password(plain: str, *, hasher: Optional[PasswordHasher] = None) -> str:
    if not plain:
        raise ValueError("Empty password")
    return (hasher or _PH).hash(plain)


def verify_password(hash_value: str, plain: str) -> bool:
    if not hash_value or not plain:
        return False
    try:
        return _PH.verify(hash_value, plain)
    except (VerifyMismatchError, InvalidHashError):
        return False


def needs_rehash(hash_value: str) -> bool:
    """True when a stored hash was made with weaker parameters than the current ones."""
    try:
        return _PH.check_needs_rehash(hash_value)
    except InvalidHashError:
        return False
