"""Access cookie codec and cookie helpers.

The cookie carries ``{"term_id": <int>, "password": "<hash>"}`` where the
password is the term's stored hash at the time of login. It is re-checked
against the live hash on every request, so changing a term's password is the
way to revoke its sessions.
"""

from __future__ import annotations

import hashlib
import json
from typing import Optional
from urllib.parse import quote, unquote

from flask import Request, Response, current_app
from pydantic import ValidationError

from termgate.core.auth.schemas import SessionClaim

COOKIE_NAME_PREFIX = "termgate_access_"
# Browsers cap a cookie at about 4 KB; anything longer was not issued here.
MAX_COOKIE_LENGTH = 4096


def encode(term_id: int, password_hash: str) -> str:
    """Serialize a claim to a URL-safe cookie value."""
    payload = json.dumps({"term_id": term_id, "password": password_hash}, separators=(",", ":"))
    return quote(payload, safe="")


def decode(value: Optional[str]) -> Optional[SessionClaim]:
    """Parse a cookie value; any malformed input yields None."""
    if not value or len(value) > MAX_COOKIE_LENGTH:
        return None
    try:
        raw = unquote(value, errors="strict")
        data = json.loads(raw)
        if not isinstance(data, dict):
            return None
        return SessionClaim.model_validate(data)
    except (ValueError, TypeError, RecursionError, ValidationError):
        return None


def cookie_name() -> str:
    configured = current_app.config.get("ACCESS_COOKIE_NAME")
    if configured:
        return configured
    site = current_app.config.get("SITE_URL") or current_app.name
    return COOKIE_NAME_PREFIX + hashlib.sha256(site.encode("utf-8")).hexdigest()[:32]


def read_session_cookie(request: Request) -> Optional[str]:
    return request.cookies.get(cookie_name())


def set_session_cookie(response: Response, token: str, secure: bool) -> Response:
    response.set_cookie(
        cookie_name(),
        token,
        max_age=current_app.config["ACCESS_COOKIE_MAX_AGE"],
        path="/",
        secure=secure,
        httponly=True,
        samesite=current_app.config.get("ACCESS_COOKIE_SAMESITE", "Lax"),
    )
    return response


def clear_session_cookie(response: Response, secure: bool) -> Response:
    response.set_cookie(
        cookie_name(),
        "",
        max_age=0,
        expires=0,
        path="/",
        secure=secure,
        httponly=True,
        samesite=current_app.config.get("ACCESS_COOKIE_SAMESITE", "Lax"),
    )
    return response
