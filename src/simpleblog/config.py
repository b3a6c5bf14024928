# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Process-wide settings, read once from the environment at startup."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv

TRUTHY = {"1", "true", "yes", "y"}

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _flag(value: Optional[str], default: bool) -> bool:
    if value is None or value.strip() == "":
        return default
    return value.strip().lower() in TRUTHY


@dataclass(frozen=True)
class Settings:
    secret_key: str
    db_path: Path = Path("ourApp.db")
    cookie_name: str = "ourSimpleApp"
    session_max_age: int = 60 * 60 * 24
    session_salt: str = "simpleblog.session.v1"
    cookie_secure: bool = True
    host: str = "0.0.0.0"
    port: int = 3000
    reload: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, *, dotenv: bool = True) -> "Settings":
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        secret = environ.get("JWTSECRET") or environ.get("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing JWTSECRET (or SECRET_KEY) in environment")

        return cls(
            secret_key=secret,
            db_path=Path(environ.get("BLOG_DB_PATH", "ourApp.db")),
            cookie_name=environ.get("BLOG_COOKIE_NAME", "ourSimpleApp"),
            session_max_age=int(environ.get("BLOG_SESSION_MAX_AGE", str(60 * 60 * 24))),
            session_salt=environ.get("BLOG_SESSION_SALT", "simpleblog.session.v1"),
            cookie_secure=_flag(environ.get("BLOG_COOKIE_SECURE"), True),
            host=environ.get("BLOG_HOST", "0.0.0.0"),
            port=int(environ.get("BLOG_PORT", "3000")),
            reload=_flag(environ.get("BLOG_RELOAD"), False),
            log_level=environ.get("BLOG_LOG_LEVEL", "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
