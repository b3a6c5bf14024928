# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Signed session tokens.

A token is an itsdangerous timestamped payload carrying the user id, the
username and an explicit ``exp`` (epoch seconds). Verification never raises:
every failure (missing, malformed, tampered, expired) collapses into the same
``INVALID`` result.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from itsdangerous import BadData, URLSafeTimedSerializer

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 60 * 60 * 24  # 24 hours
DEFAULT_SALT = "simpleblog.session.v1"


@dataclass(frozen=True)
class SessionData:
    user_id: int
    username: str


@dataclass(frozen=True)
class VerifyResult:
    ok: bool
    session: Optional[SessionData] = None


INVALID = VerifyResult(ok=False)


class SessionCodec:
    def __init__(
        self,
        secret: str,
        *,
        salt: str = DEFAULT_SALT,
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        if not secret:
            raise RuntimeError("A signing secret is required for session tokens")
        self._serializer = URLSafeTimedSerializer(secret_key=secret, salt=salt)
        self.max_age = max_age
        self._clock = clock

    def issue(self, user_id: int, username: str) -> str:
        return self._serializer.dumps(
            {
                "exp": int(self._clock()) + self.max_age,
                "skyColor": "blue",
                "userId": int(user_id),
                "userName": username,
            }
        )

    def verify(self, token: Optional[str]) -> VerifyResult:
        if not token:
            return INVALID
        try:
            data = self._serializer.loads(token, max_age=self.max_age)
        except BadData:
            logger.debug("Rejected session token (bad signature or age)")
            return INVALID

        if not isinstance(data, dict):
            return INVALID
        exp = data.get("exp")
        user_id = data.get("userId")
        username = data.get("userName")
        if not isinstance(exp, (int, float)) or exp <= self._clock():
            logger.debug("Rejected session token (expired)")
            return INVALID
        if isinstance(user_id, bool) or not isinstance(user_id, int):
            return INVALID
        if not isinstance(username, str) or not username.strip():
            return INVALID
        return VerifyResult(ok=True, session=SessionData(user_id=user_id, username=username))
