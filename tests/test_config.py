import pytest

from authgate.config import Settings


def test_from_env_requires_secret(monkeypatch):
    monkeypatch.delenv("AUTHGATE_SECRET_KEY", raising=False)
    monkeypatch.delenv("SECRET_KEY", raising=False)
    with pytest.raises(RuntimeError):
        Settings.from_env()


def test_from_env_reads_prefixed_variables(monkeypatch):
    monkeypatch.setenv("AUTHGATE_SECRET_KEY", "s3cret")
    monkeypatch.setenv("AUTHGATE_DATABASE_URL", "sqlite:///tmp.db")
    monkeypatch.setenv("AUTHGATE_SESSION_MAX_AGE", "60")
    monkeypatch.setenv("AUTHGATE_COOKIE_SECURE", "yes")
    monkeypatch.setenv("AUTHGATE_PORT", "9000")
    s = Settings.from_env()
    assert s.secret_key == "s3cret"
    assert s.database_url == "sqlite:///tmp.db"
    assert s.session_max_age == 60
    assert s.cookie_secure is True
    assert s.port == 9000
    assert s.cookie_name == "authgate_session"


def test_plain_secret_key_is_accepted(monkeypatch):
    monkeypatch.delenv("AUTHGATE_SECRET_KEY", raising=False)
    monkeypatch.setenv("SECRET_KEY", "fallback")
    assert Settings.from_env().secret_key == "fallback"
