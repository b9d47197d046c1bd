# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
import secrets
from datetime import timedelta
from typing import Optional

from itsdangerous import BadSignature, BadTimeSignature, URLSafeTimedSerializer
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from authgate.auth.strategy import Identity
from authgate.errors import StorageUnavailable
from authgate.infra.models import SessionRecord, utcnow

logger = logging.getLogger(__name__)

DEFAULT_MAX_AGE_SECONDS = 28800  # 8 hours


class SessionManager:
    """Server-side sessions referenced by a signed, timed cookie token.

    The token only carries the session id. Resolving it reads the stored
    identity record, so no credential check happens on restoration, and
    deleting the row invalidates the token even before it expires.
    """

    def __init__(
        self,
        session_factory: sessionmaker[Session],
        secret_key: str,
        *,
        salt: str = "authgate.session.v1",
        max_age: int = DEFAULT_MAX_AGE_SECONDS,
    ) -> None:
        if not secret_key:
            raise RuntimeError("SessionManager needs a secret key")
        self._session_factory = session_factory
        self._serializer = URLSafeTimedSerializer(secret_key=secret_key, salt=salt)
        self.max_age = max_age

    def _session_id(self, token: str, *, check_age: bool = True) -> Optional[str]:
        if not token:
            return None
        try:
            data = self._serializer.loads(token, max_age=self.max_age if check_age else None)
        except (BadSignature, BadTimeSignature):
            return None
        sid = (data or {}).get("sid") if isinstance(data, dict) else None
        return str(sid) if sid else None

    def establish(self, identity: Identity) -> str:
        sid = secrets.token_urlsafe(32)
        record = SessionRecord(
            id=sid,
            user_id=identity.id,
            payload=identity.to_payload(),
        )
        try:
            with self._session_factory() as db:
                self._purge_expired(db)
                db.add(record)
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Session insert failed: %s", exc.__class__.__name__)
            raise StorageUnavailable() from exc
        logger.info("Session established for user %s", identity.id)
        return self._serializer.dumps({"sid": sid})

    def current_identity(self, token: str) -> Optional[Identity]:
        sid = self._session_id(token)
        if not sid:
            return None
        try:
            with self._session_factory() as db:
                record = db.get(SessionRecord, sid)
        except SQLAlchemyError as exc:
            logger.warning("Session lookup failed: %s", exc.__class__.__name__)
            raise StorageUnavailable() from exc
        if record is None:
            return None
        return Identity.from_payload(record.payload)

    def invalidate(self, token: str) -> None:
        # Expired tokens still name a row worth deleting.
        sid = self._session_id(token, check_age=False)
        if not sid:
            return
        try:
            with self._session_factory() as db:
                db.execute(delete(SessionRecord).where(SessionRecord.id == sid))
                db.commit()
        except SQLAlchemyError as exc:
            logger.warning("Session delete failed: %s", exc.__class__.__name__)
            raise StorageUnavailable() from exc
        logger.info("Session invalidated")

    def purge_expired(self) -> int:
        try:
            with self._session_factory() as db:
                n = self._purge_expired(db)
                db.commit()
        except SQLAlchemyError as exc:
            raise StorageUnavailable() from exc
        return n

    def _purge_expired(self, db: Session) -> int:
        cutoff = utcnow() - timedelta(seconds=self.max_age)
        result = db.execute(delete(SessionRecord).where(SessionRecord.created_at < cutoff))
        return result.rowcount or 0
