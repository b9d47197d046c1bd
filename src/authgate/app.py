# Copyright (C) 2026 Bernardo Gómez Bey
# SPDX-License-Identifier: AGPL-3.0-or-later

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from fastapi import Depends, FastAPI, Form, Request
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse, Response
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from authgate import __version__
from authgate.auth.passwords import make_hasher
from authgate.auth.session import SessionManager
from authgate.auth.strategy import STORAGE_UNAVAILABLE, AuthFailure, Identity, PasswordStrategy
from authgate.config import Settings
from authgate.errors import (
    AuthenticationFailure,
    AuthGatewayError,
    DuplicateAccountError,
    StorageUnavailable,
    ValidationError,
)
from authgate.infra.db import init_db, make_engine, make_session_factory
from authgate.permissions import (
    AuthServices,
    cookie_settings,
    current_user_optional,
    get_services,
    require_user,
    safe_next,
)
from authgate.schemas import Credentials, UserRead
from authgate.services.account_service import AccountService

logger = logging.getLogger(__name__)

BASE_DIR = Path(__file__).resolve().parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

GENERIC_LOGIN_ERROR = AuthenticationFailure.message


def _status_for(error: Optional[AuthGatewayError]) -> int:
    if isinstance(error, ValidationError):
        return 400
    if isinstance(error, DuplicateAccountError):
        return 409
    if isinstance(error, StorageUnavailable):
        return 503
    return 401


def _login_error(outcome: AuthFailure) -> tuple[int, str]:
    # Both "no such account" and "wrong password" surface as the same message.
    if outcome.reason == STORAGE_UNAVAILABLE:
        return 503, StorageUnavailable.message
    return 401, GENERIC_LOGIN_ERROR


def _start_session(resp: Response, request: Request, services: AuthServices, identity: Identity) -> Response:
    # A new login replaces whatever session the browser was carrying.
    services.sessions.invalidate(request.cookies.get(services.settings.cookie_name, ""))
    token = services.sessions.establish(identity)
    resp.set_cookie(
        services.settings.cookie_name,
        token,
        max_age=services.settings.session_max_age,
        **cookie_settings(services.settings),
    )
    return resp


def _render(request: Request, template_name: str, ctx: Optional[dict] = None, status_code: int = 200):
    base_ctx = {"current_user": getattr(request.state, "user", None)}
    return templates.TemplateResponse(request, template_name, {**base_ctx, **(ctx or {})}, status_code=status_code)


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the app with its store, strategy and session manager wired in."""
    settings = settings or Settings.from_env()

    engine = make_engine(settings.database_url)
    init_db(engine)
    session_factory = make_session_factory(engine)
    hasher = make_hasher(
        time_cost=settings.hash_time_cost,
        memory_cost=settings.hash_memory_cost,
        parallelism=settings.hash_parallelism,
    )

    app = FastAPI(title="authgate", version=__version__)
    app.state.auth = AuthServices(
        settings=settings,
        strategy=PasswordStrategy(session_factory, hasher),
        accounts=AccountService(session_factory, hasher),
        sessions=SessionManager(
            session_factory,
            settings.secret_key,
            salt=settings.session_salt,
            max_age=settings.session_max_age,
        ),
    )
    app.state.engine = engine

    app.mount("/static", StaticFiles(directory=str(BASE_DIR / "static")), name="static")

    @app.exception_handler(StorageUnavailable)
    async def _storage_unavailable(request: Request, exc: StorageUnavailable):
        return JSONResponse(status_code=503, content={"detail": exc.message})

    # ------------------ Pages ------------------

    @app.get("/", response_class=HTMLResponse)
    def signup_page(request: Request, user=Depends(current_user_optional)):
        if user:
            return RedirectResponse(url="/members", status_code=303)
        return _render(request, "signup.html", {"error": ""})

    @app.get("/login", response_class=HTMLResponse)
    def login_page(request: Request, next: str = "/members", user=Depends(current_user_optional)):
        if user:
            return RedirectResponse(url="/members", status_code=303)
        return _render(request, "login.html", {"next": safe_next(next), "error": ""})

    @app.get("/members", response_class=HTMLResponse)
    def members_page(request: Request, user=Depends(require_user)):
        return _render(request, "members.html", {"user": user})

    @app.post("/signup")
    def signup_form(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
        services: AuthServices = Depends(get_services),
    ):
        result = services.accounts.signup(email, password)
        if not result.ok:
            return _render(
                request,
                "signup.html",
                {"error": result.error.message, "email": email},
                status_code=_status_for(result.error),
            )
        return _start_session(RedirectResponse(url="/members", status_code=303), request, services, result.identity)

    @app.post("/login")
    def login_form(
        request: Request,
        email: str = Form(""),
        password: str = Form(""),
        next: str = Form("/members"),
        services: AuthServices = Depends(get_services),
    ):
        outcome = services.strategy.authenticate(email, password)
        if not outcome.ok:
            status_code, message = _login_error(outcome)
            return _render(
                request,
                "login.html",
                {"next": safe_next(next), "error": message, "email": email},
                status_code=status_code,
            )
        resp = RedirectResponse(url=safe_next(next), status_code=303)
        return _start_session(resp, request, services, outcome.identity)

    @app.api_route("/logout", methods=["GET", "POST"])
    def logout(request: Request, services: AuthServices = Depends(get_services)):
        token = request.cookies.get(services.settings.cookie_name, "")
        services.sessions.invalidate(token)
        resp = RedirectResponse(url="/", status_code=303)
        resp.delete_cookie(services.settings.cookie_name)
        return resp

    # ------------------ JSON API ------------------

    @app.post("/api/signup", response_model=UserRead)
    def api_signup(request: Request, body: Credentials, services: AuthServices = Depends(get_services)):
        result = services.accounts.signup(body.email, body.password)
        if not result.ok:
            return JSONResponse(status_code=_status_for(result.error), content={"detail": result.error.message})
        identity = result.identity
        resp = JSONResponse(content=UserRead(id=identity.id, email=identity.email).model_dump())
        return _start_session(resp, request, services, identity)

    @app.post("/api/login", response_model=UserRead)
    def api_login(request: Request, body: Credentials, services: AuthServices = Depends(get_services)):
        outcome = services.strategy.authenticate(body.email, body.password)
        if not outcome.ok:
            status_code, message = _login_error(outcome)
            return JSONResponse(status_code=status_code, content={"detail": message})
        identity = outcome.identity
        resp = JSONResponse(content=UserRead(id=identity.id, email=identity.email).model_dump())
        return _start_session(resp, request, services, identity)

    @app.get("/api/user_data")
    def user_data(user=Depends(current_user_optional)):
        if not user:
            return {}
        return {"email": user.email, "id": user.id}

    logger.info("authgate %s app created", __version__)
    return app
