#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from simpleblog.config import Settings, configure_logging
from simpleblog.infra.db import Database
from simpleblog.services.account_service import register_user


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)
    db = Database(settings.db_path)
    db.init_schema()

    username = input("Username: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    with db.connection() as conn:
        user, errors = register_user(conn, username, pw1)
    if errors:
        raise SystemExit("\n".join(errors))
    print(f"OK -> {user.username} (id={user.id}) in {db.path}")


if __name__ == "__main__":
    main()
