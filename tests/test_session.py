from authgate.auth.session import SessionManager
from authgate.auth.strategy import Identity
from authgate.infra.models import SessionRecord


def _identity(accounts) -> Identity:
    return accounts.signup("a@b.com", "secret1").identity


def test_establish_then_restore(accounts, sessions):
    ident = _identity(accounts)
    token = sessions.establish(ident)
    assert token
    restored = sessions.current_identity(token)
    assert restored == ident


def test_invalidate_makes_token_anonymous(accounts, sessions):
    token = sessions.establish(_identity(accounts))
    sessions.invalidate(token)
    assert sessions.current_identity(token) is None


def test_each_login_gets_its_own_session(accounts, sessions):
    ident = _identity(accounts)
    t1 = sessions.establish(ident)
    t2 = sessions.establish(ident)
    assert t1 != t2
    sessions.invalidate(t1)
    assert sessions.current_identity(t1) is None
    assert sessions.current_identity(t2) == ident


def test_missing_or_tampered_token_is_anonymous(accounts, sessions):
    token = sessions.establish(_identity(accounts))
    assert sessions.current_identity("") is None
    assert sessions.current_identity("garbage") is None
    assert sessions.current_identity(token[:-2] + "xx") is None


def test_token_signed_with_other_secret_is_rejected(accounts, sessions, session_factory):
    token = sessions.establish(_identity(accounts))
    other = SessionManager(session_factory, "another-secret")
    assert other.current_identity(token) is None


def test_expired_token_is_anonymous_and_purged(accounts, session_factory):
    short = SessionManager(session_factory, "test-secret", max_age=-1)
    token = short.establish(_identity(accounts))
    assert short.current_identity(token) is None
    assert short.purge_expired() == 1


def test_invalidate_unknown_token_is_a_no_op(sessions):
    sessions.invalidate("")
    sessions.invalidate("garbage")


def test_session_row_stores_identity_payload(accounts, sessions, session_factory):
    ident = _identity(accounts)
    sessions.establish(ident)
    with session_factory() as db:
        record = db.query(SessionRecord).one()
    assert record.user_id == ident.id
    assert record.payload == {"v": 1, "id": ident.id, "email": "a@b.com"}


def test_unknown_payload_version_is_anonymous(accounts, sessions, session_factory):
    token = sessions.establish(_identity(accounts))
    with session_factory() as db:
        record = db.query(SessionRecord).one()
        record.payload = {**record.payload, "v": 99}
        db.commit()
    assert sessions.current_identity(token) is None
