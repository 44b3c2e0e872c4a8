"""
Unit tests for the session token store.
"""

from services.session_store import SessionStore, generate_secure_token


def test_generate_secure_token():
    token = generate_secure_token()
    assert len(token) == 64
    assert token != generate_secure_token()


def test_set_and_clear_token(tmp_path):
    store = SessionStore(tmp_path / "data")
    assert store.is_authenticated() is False

    store.set_token("abc123", user_name="admin")

    assert store.is_authenticated() is True
    assert store.get_token() == "abc123"
    assert store.get_user_name() == "admin"
    assert SessionStore(tmp_path / "data").is_authenticated() is True

    store.clear()
    assert store.is_authenticated() is False
    store.clear()


def test_corrupt_session_file_is_not_authenticated(tmp_path):
    store = SessionStore(tmp_path)
    store.path.write_text("{not json", encoding="utf-8")

    assert store.is_authenticated() is False
    assert store.get_user_name() == ""
