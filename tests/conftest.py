import sys
from pathlib import Path as _Path
sys.path.insert(0, str(_Path(__file__).resolve().parents[1] / "src"))

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from authgate.app import create_app
from authgate.auth.passwords import make_hasher
from authgate.auth.session import SessionManager
from authgate.auth.strategy import PasswordStrategy
from authgate.config import Settings
from authgate.infra.db import init_db, make_engine, make_session_factory
from authgate.services.account_service import AccountService


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a throwaway SQLite file, with cheap argon2 parameters."""
    return Settings(
        secret_key="test-secret",
        database_url=f"sqlite:///{tmp_path / 'authgate.db'}",
        hash_time_cost=1,
        hash_memory_cost=1024,
        hash_parallelism=1,
    )


@pytest.fixture()
def hasher(settings):
    return make_hasher(settings.hash_time_cost, settings.hash_memory_cost, settings.hash_parallelism)


@pytest.fixture()
def session_factory(settings):
    engine = make_engine(settings.database_url)
    init_db(engine)
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def broken_session_factory(tmp_path: Path):
    # Tables never created: every query fails with an OperationalError.
    engine = make_engine(f"sqlite:///{tmp_path / 'empty.db'}")
    yield make_session_factory(engine)
    engine.dispose()


@pytest.fixture()
def accounts(session_factory, hasher) -> AccountService:
    return AccountService(session_factory, hasher)


@pytest.fixture()
def strategy(session_factory, hasher) -> PasswordStrategy:
    return PasswordStrategy(session_factory, hasher)


@pytest.fixture()
def sessions(session_factory, settings) -> SessionManager:
    return SessionManager(session_factory, settings.secret_key, salt=settings.session_salt)


@pytest.fixture()
def client(settings):
    app = create_app(settings)
    with TestClient(app) as c:
        yield c
    app.state.engine.dispose()
