"""Visitor-facing messages for the login flow."""

from __future__ import annotations

MESSAGE_SESSION_EXPIRED = "session_expired"
MESSAGE_INVALID_RETURN_URL = "invalid_return_url"
MESSAGE_INVALID_REQUEST = "invalid_request"
MESSAGE_INCORRECT_PASSWORD = "incorrect_password"

MESSAGES = {
    MESSAGE_SESSION_EXPIRED: "Your session has expired. Please go back and try again.",
    MESSAGE_INVALID_RETURN_URL: "The return URL is not valid.",
    MESSAGE_INVALID_REQUEST: "The request could not be processed.",
    MESSAGE_INCORRECT_PASSWORD: "Incorrect password. Please try again.",
}

LOGIN_PROMPT = "This content is restricted. Please enter your password to view it."


def message_text(code: str | None) -> str:
    if not code:
        return ""
    return MESSAGES.get(code, MESSAGES[MESSAGE_INVALID_REQUEST])
