"""Reusable decorators for admin controllers."""

from __future__ import annotations

from functools import wraps
from typing import Callable, Iterable, TypeVar

from flask import jsonify, request
from flask_jwt_extended import get_jwt, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from termgate.core.auth.nonces import ADMIN_ACTION, verify_nonce

F = TypeVar("F", bound=Callable)

SUPERUSER_ROLE = "administrator"


def require_roles(required_roles: Iterable[str]):
    """Enforce that the current JWT carries every given role (administrators pass)."""

    def decorator(fn: F) -> F:
        @wraps(fn)
        def wrapper(*args, **kwargs):  # type: ignore[misc]
            try:
                verify_jwt_in_request()
            except (JWTExtendedException, PyJWTError):
                return jsonify({"ok": False, "error": "unauthorized"}), 401
            claims = get_jwt() or {}
            roles = set(claims.get("roles") or [])
            if SUPERUSER_ROLE in roles:
                return fn(*args, **kwargs)
            if not set(required_roles).issubset(roles):
                return jsonify({"ok": False, "error": "forbidden"}), 403
            return fn(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def csrf_protected(fn: F) -> F:
    """Validate the admin nonce from header X-CSRF-Token."""

    @wraps(fn)
    def wrapper(*args, **kwargs):  # type: ignore[misc]
        token = request.headers.get("X-CSRF-Token")
        if not verify_nonce(token, ADMIN_ACTION):
            return jsonify({"ok": False, "error": "csrf_failed"}), 403
        return fn(*args, **kwargs)

    return wrapper  # type: ignore[return-value]
