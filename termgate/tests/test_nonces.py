from __future__ import annotations

import pytest

from termgate.core.auth.nonces import (
    ADMIN_ACTION,
    LOGIN_REDIRECT_ACTION,
    LOGIN_SUBMIT_ACTION,
    LOGOUT_ACTION,
    create_nonce,
    verify_nonce,
)

pytestmark = pytest.mark.unit


@pytest.mark.parametrize("action", [LOGIN_REDIRECT_ACTION, LOGIN_SUBMIT_ACTION, LOGOUT_ACTION, ADMIN_ACTION])
def test_nonce_verifies_for_its_own_action(app, action):
    assert verify_nonce(create_nonce(action), action) is True


def test_nonce_rejected_for_other_action(app):
    token = create_nonce(LOGIN_REDIRECT_ACTION)

    assert verify_nonce(token, LOGIN_SUBMIT_ACTION) is False
    assert verify_nonce(token, LOGOUT_ACTION) is False


def test_nonces_are_not_repeated(app):
    assert create_nonce(LOGOUT_ACTION) != create_nonce(LOGOUT_ACTION)


@pytest.mark.parametrize("token", [None, "", "garbage", "a.b.c"])
def test_missing_or_malformed_nonce_rejected(app, token):
    assert verify_nonce(token, LOGOUT_ACTION) is False


def test_tampered_nonce_rejected(app):
    token = create_nonce(LOGOUT_ACTION)
    # the payload segment is base64 JSON and always starts with "eyJ"
    tampered = "fyJ" + token[3:]

    assert verify_nonce(tampered, LOGOUT_ACTION) is False


def test_nonce_signed_with_other_secret_rejected(app):
    token = create_nonce(LOGOUT_ACTION)
    app.config["SECRET_KEY"] = "rotated-secret"

    assert verify_nonce(token, LOGOUT_ACTION) is False


def test_expired_nonce_rejected(app):
    token = create_nonce(LOGIN_SUBMIT_ACTION)
    app.config["NONCE_MAX_AGE"] = -1

    assert verify_nonce(token, LOGIN_SUBMIT_ACTION) is False
