"""Tests for SessionState sign in/out and change notification."""

import pytest

from showcase.core.errors import AuthenticationFailed, GatewayError, ValidationError
from showcase.core.session import SessionState

from conftest import PASSWORD


def test_sign_in_and_out_notify_listeners(session):
    seen = []
    session.on_change(seen.append)

    user = session.sign_in("ada@example.com", PASSWORD)
    session.sign_out()

    assert seen == [user, None]
    assert not session.is_authenticated


def test_unsubscribe_stops_notifications(session):
    seen = []
    unsubscribe = session.on_change(seen.append)
    unsubscribe()

    session.sign_in("ada@example.com", PASSWORD)
    assert seen == []


def test_bad_password_keeps_user_signed_out(session):
    with pytest.raises(AuthenticationFailed):
        session.sign_in("ada@example.com", "wrong")
    assert session.current_user is None


@pytest.mark.parametrize("email, password", [("not-an-email", PASSWORD), ("ada@example.com", "")])
def test_credentials_checked_locally(session, gateway, email, password):
    with pytest.raises(ValidationError):
        session.sign_in(email, password)
    assert gateway.calls_to("sign_in") == []


def test_sign_up_creates_user_row(session, store):
    user = session.sign_up("New@Example.com", "secret1")
    assert session.user_id == user.id
    assert store.users[user.id]["email"] == "new@example.com"


def test_sign_up_rejects_short_password(session, gateway):
    with pytest.raises(ValidationError):
        session.sign_up("new@example.com", "123")
    assert gateway.calls_to("sign_up") == []


def test_user_row_failure_does_not_block_sign_in(session, gateway):
    gateway.fail_next("ensure_user", GatewayError("trigger owns this"))
    user = session.sign_in("ada@example.com", PASSWORD)
    assert session.current_user == user


def test_sign_out_clears_user_even_if_gateway_fails(session, gateway):
    session.sign_in("ada@example.com", PASSWORD)
    gateway.fail_next("sign_out")
    with pytest.raises(GatewayError):
        session.sign_out()
    assert session.current_user is None


def test_restore_picks_up_gateway_session(gateway):
    user = gateway.sign_in("grace@example.com", PASSWORD)
    session = SessionState(gateway)
    assert session.restore() == user
