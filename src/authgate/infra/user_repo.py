# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Credential store access.

SQLAlchemy failures are translated here so callers only see the
`authgate.errors` kinds. The unique constraint on users.email is the only
arbiter between concurrent signups for the same address.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from authgate.errors import DuplicateAccountError, StorageUnavailable
from authgate.infra.models import User

logger = logging.getLogger(__name__)


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    try:
        return db.scalars(select(User).where(User.email == email)).first()
    except SQLAlchemyError as exc:
        logger.warning("User lookup failed: %s", exc.__class__.__name__)
        raise StorageUnavailable() from exc


def add_user(db: Session, *, email: str, password_hash: str) -> User:
    """Insert and commit a user row. Nothing is left behind on failure."""
    user = User(email=email, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateAccountError() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.warning("User insert failed: %s", exc.__class__.__name__)
        raise StorageUnavailable() from exc
    return user
