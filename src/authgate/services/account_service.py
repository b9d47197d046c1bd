# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from argon2 import PasswordHasher
from sqlalchemy.orm import Session, sessionmaker

from authgate.auth.emails import normalize_email
from authgate.auth.passwords import hash_password
from authgate.auth.strategy import Identity
from authgate.errors import AuthGatewayError, ValidationError
from authgate.infra.user_repo import add_user

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SignupResult:
    identity: Optional[Identity] = None
    error: Optional[AuthGatewayError] = None

    @property
    def ok(self) -> bool:
        return self.identity is not None


class AccountService:
    def __init__(self, session_factory: sessionmaker[Session], hasher: PasswordHasher) -> None:
        self._session_factory = session_factory
        self._hasher = hasher

    def signup(self, email: str, password: str) -> SignupResult:
        """Create a user and hand back its identity.

        The password is hashed here, before the row exists; the plaintext is
        never passed to the store. Session establishment is left to the
        caller.
        """
        try:
            address = normalize_email(email)
            if not password:
                raise ValidationError("Password is required.")
            digest = hash_password(password, self._hasher)
            with self._session_factory() as db:
                user = add_user(db, email=address, password_hash=digest)
                identity = Identity(id=user.id, email=user.email)
        except AuthGatewayError as exc:
            logger.info("Signup rejected: %s", exc.__class__.__name__)
            return SignupResult(error=exc)

        logger.info("Account created for user %s", identity.id)
        return SignupResult(identity=identity)
