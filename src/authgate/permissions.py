# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from urllib.parse import quote

from fastapi import HTTPException, Request

from authgate.auth.session import SessionManager
from authgate.auth.strategy import Identity, PasswordStrategy
from authgate.config import Settings
from authgate.services.account_service import AccountService

_UNSET = object()


@dataclass(frozen=True)
class AuthServices:
    settings: Settings
    strategy: PasswordStrategy
    accounts: AccountService
    sessions: SessionManager


def get_services(request: Request) -> AuthServices:
    return request.app.state.auth


def load_user_from_request(request: Request) -> Optional[Identity]:
    services = get_services(request)
    token = request.cookies.get(services.settings.cookie_name, "")
    return services.sessions.current_identity(token)


def current_user_optional(request: Request) -> Optional[Identity]:
    u = getattr(request.state, "user", _UNSET)
    if u is not _UNSET:
        return u
    u = load_user_from_request(request)
    request.state.user = u
    return u


def require_user(request: Request) -> Identity:
    u = current_user_optional(request)
    if u:
        return u
    next_url = str(request.url.path)
    if request.url.query:
        next_url += "?" + request.url.query
    loc = f"/login?next={quote(next_url, safe='/')}"
    raise HTTPException(status_code=303, headers={"Location": loc})


def safe_next(next_url: str, default: str = "/members") -> str:
    """Only same-site absolute paths are accepted as redirect targets."""
    n = (next_url or "").strip()
    if not n.startswith("/") or n.startswith("//") or "\\" in n:
        return default
    return n


def cookie_settings(settings: Settings) -> dict:
    return {"httponly": True, "samesite": "lax", "secure": settings.cookie_secure}
