#!/usr/bin/env python3
"""Create an account directly in the database.

Used to bootstrap the first administrator, since self-registration only
creates standard accounts.
"""

from __future__ import annotations

from getpass import getpass

from vrec.auth.users import create_user
from vrec.db import init_db, make_engine, make_session_factory
from vrec.errors import AppError
from vrec.models import Role
from vrec.settings import Settings


def main() -> None:
    settings = Settings.from_env()
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    engine = make_engine(settings.database_url)
    init_db(engine)

    email = input("Email: ").strip()
    role_in = (input("Role [user/admin]: ").strip().lower() or "user")
    try:
        role = Role(role_in)
    except ValueError:
        raise SystemExit(f"Unknown role: {role_in}")

    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    db = make_session_factory(engine)()
    try:
        user = create_user(db, email, pw1, role)
    except AppError as e:
        raise SystemExit(e.message)
    finally:
        db.close()

    print(f"OK -> user {user.id} ({user.email}, {user.role.value}) in {settings.database_url}")


if __name__ == "__main__":
    main()
