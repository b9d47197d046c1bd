# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from argon2 import DEFAULT_MEMORY_COST, DEFAULT_PARALLELISM, DEFAULT_TIME_COST

_TRUE = {"1", "true", "yes", "y"}


def _env(name: str, default: str = "") -> str:
    return os.getenv(f"AUTHGATE_{name}", default)


def _env_bool(name: str, default: str = "false") -> bool:
    return _env(name, default).strip().lower() in _TRUE


@dataclass(frozen=True)
class Settings:
    secret_key: str
    database_url: str = "sqlite:///data/authgate.db"
    cookie_name: str = "authgate_session"
    session_max_age: int = 28800  # 8 hours
    session_salt: str = "authgate.session.v1"
    cookie_secure: bool = False
    hash_time_cost: int = DEFAULT_TIME_COST
    hash_memory_cost: int = DEFAULT_MEMORY_COST
    hash_parallelism: int = DEFAULT_PARALLELISM
    host: str = "0.0.0.0"
    port: int = 8080
    reload: bool = False
    log_level: str = "INFO"

    @classmethod
    def from_env(cls) -> "Settings":
        secret = _env("SECRET_KEY") or os.getenv("SECRET_KEY")
        if not secret:
            raise RuntimeError("Missing AUTHGATE_SECRET_KEY (or SECRET_KEY) in environment")
        return cls(
            secret_key=secret,
            database_url=_env("DATABASE_URL", cls.database_url),
            cookie_name=_env("COOKIE_NAME", cls.cookie_name),
            session_max_age=int(_env("SESSION_MAX_AGE", str(cls.session_max_age))),
            session_salt=_env("SESSION_SALT", cls.session_salt),
            cookie_secure=_env_bool("COOKIE_SECURE"),
            hash_time_cost=int(_env("HASH_TIME_COST", str(cls.hash_time_cost))),
            hash_memory_cost=int(_env("HASH_MEMORY_COST", str(cls.hash_memory_cost))),
            hash_parallelism=int(_env("HASH_PARALLELISM", str(cls.hash_parallelism))),
            host=_env("HOST", cls.host),
            port=int(_env("PORT", str(cls.port))),
            reload=_env_bool("RELOAD"),
            log_level=_env("LOG_LEVEL", cls.log_level).upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
