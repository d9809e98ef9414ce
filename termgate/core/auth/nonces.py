"""Action-scoped anti-forgery tokens.

Each token is signed with the app secret and salted with its action name, so a
token minted for one action never validates for another.
"""

from __future__ import annotations

import secrets

from flask import current_app
from itsdangerous import BadData, URLSafeTimedSerializer

LOGIN_REDIRECT_ACTION = "login-redirect"
LOGIN_SUBMIT_ACTION = "login-submit"
LOGOUT_ACTION = "logout"
ADMIN_ACTION = "admin"

NONCE_PARAM = "_nonce"

_SALT_PREFIX = "termgate-nonce:"


def _serializer(action: str) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(current_app.config["SECRET_KEY"], salt=_SALT_PREFIX + action)


def create_nonce(action: str) -> str:
    """Mint a token for the given action."""
    return _serializer(action).dumps({"a": action, "r": secrets.token_hex(8)})


def verify_nonce(token: str | None, action: str) -> bool:
    """Return True when the token was minted for this action and has not expired."""
    if not token:
        return False
    try:
        payload = _serializer(action).loads(token, max_age=current_app.config["NONCE_MAX_AGE"])
    except BadData:
        return False
    return isinstance(payload, dict) and payload.get("a") == action
