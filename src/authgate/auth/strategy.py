# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from argon2 import PasswordHasher
from sqlalchemy.orm import Session, sessionmaker

from authgate.auth.emails import normalize_email
from authgate.auth.passwords import verify_password
from authgate.errors import AuthenticationFailure, StorageUnavailable, ValidationError
from authgate.infra.user_repo import get_user_by_email

logger = logging.getLogger(__name__)

IDENTITY_VERSION = 1

NO_SUCH_ACCOUNT = "no such account"
WRONG_PASSWORD = "wrong password"
STORAGE_UNAVAILABLE = "storage unavailable"


@dataclass(frozen=True)
class Identity:
    """Minimal authenticated identity kept in the session, decoupled from the User row."""

    id: int
    email: str
    version: int = IDENTITY_VERSION

    def to_payload(self) -> dict:
        return {"v": self.version, "id": self.id, "email": self.email}

    @classmethod
    def from_payload(cls, data: Optional[Mapping[str, Any]]) -> Optional["Identity"]:
        if not data or data.get("v") != IDENTITY_VERSION:
            return None
        try:
            uid = int(data["id"])
        except (KeyError, TypeError, ValueError):
            return None
        email = str(data.get("email") or "").strip()
        if not email:
            return None
        return cls(id=uid, email=email)


@dataclass(frozen=True)
class AuthSuccess:
    identity: Identity
    ok: bool = True


@dataclass(frozen=True)
class AuthFailure:
    reason: str
    error: Exception
    ok: bool = False


AuthOutcome = Union[AuthSuccess, AuthFailure]


class PasswordStrategy:
    """Email/password strategy: look the user up, then verify the digest.

    Read-only against the store, so retrying is always safe.
    """

    def __init__(self, session_factory: sessionmaker[Session], hasher: PasswordHasher) -> None:
        self._session_factory = session_factory
        self._hasher = hasher

    def authenticate(self, email: str, password: str) -> AuthOutcome:
        # Same normalisation as signup; an unparseable address cannot match a stored one.
        try:
            address = normalize_email(email)
        except ValidationError:
            address = ""
        try:
            with self._session_factory() as db:
                user = get_user_by_email(db, address) if address else None
        except StorageUnavailable as exc:
            return AuthFailure(reason=STORAGE_UNAVAILABLE, error=exc)

        if user is None:
            logger.info("Login rejected: %s", NO_SUCH_ACCOUNT)
            return AuthFailure(reason=NO_SUCH_ACCOUNT, error=AuthenticationFailure())
        if not verify_password(user.password_hash, password or "", self._hasher):
            logger.info("Login rejected for user %s: %s", user.id, WRONG_PASSWORD)
            return AuthFailure(reason=WRONG_PASSWORD, error=AuthenticationFailure())

        logger.info("Login accepted for user %s", user.id)
        return AuthSuccess(identity=Identity(id=user.id, email=user.email))
