#!/usr/bin/env python3
from __future__ import annotations

from getpass import getpass

from authgate.auth.passwords import make_hasher
from authgate.config import Settings, configure_logging
from authgate.infra.db import init_db, make_engine, make_session_factory
from authgate.services.account_service import AccountService


def main() -> None:
    settings = Settings.from_env()
    configure_logging(settings.log_level)

    engine = make_engine(settings.database_url)
    init_db(engine)
    accounts = AccountService(
        make_session_factory(engine),
        make_hasher(settings.hash_time_cost, settings.hash_memory_cost, settings.hash_parallelism),
    )

    email = input("Email: ").strip()
    pw1 = getpass("Password: ")
    pw2 = getpass("Repeat password: ")
    if pw1 != pw2:
        raise SystemExit("Passwords do not match")

    result = accounts.signup(email, pw1)
    if not result.ok:
        raise SystemExit(result.error.message)
    print(f"OK -> user {result.identity.id} <{result.identity.email}>")


if __name__ == "__main__":
    main()
