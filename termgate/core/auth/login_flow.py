"""Two-phase login: render the password form, then verify the submission.

Nothing is stored server-side between the two phases. The return URL and
object id travel in the login URL's query string and then in hidden form
fields; each phase carries its own nonce.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Mapping, Optional

from pydantic import ValidationError

from termgate.core.auth import session_token
from termgate.core.auth.messages import (
    MESSAGE_INCORRECT_PASSWORD,
    MESSAGE_INVALID_REQUEST,
    MESSAGE_INVALID_RETURN_URL,
    MESSAGE_SESSION_EXPIRED,
)
from termgate.core.auth.nonces import (
    LOGIN_REDIRECT_ACTION,
    LOGIN_SUBMIT_ACTION,
    NONCE_PARAM,
    create_nonce,
    verify_nonce,
)
from termgate.core.auth.password import verify_password
from termgate.core.auth.schemas import LOGIN_FORM_MARKER, LoginRedirectQuery, LoginSubmission
from termgate.core.content.services import resolve_access_term
from termgate.core.gate.policy import AuthorizationPolicy
from termgate.core.utils.urls import is_same_origin

logger = logging.getLogger(__name__)


class LoginState(str, Enum):
    AWAITING_CREDENTIAL = "awaiting_credential"
    VERIFYING = "verifying"
    GRANTED = "granted"
    REJECTED = "rejected"


@dataclass(frozen=True)
class LoginForm:
    """Hidden fields rendered into the password form."""

    return_url: str
    original_post_id: Optional[int]
    nonce: str
    marker: str = LOGIN_FORM_MARKER


@dataclass(frozen=True)
class LoginOutcome:
    state: LoginState
    status: int = 200
    form: Optional[LoginForm] = None
    error: Optional[str] = None
    notice: Optional[str] = None
    redirect_to: Optional[str] = None
    session_token: Optional[str] = None


class LoginFlow:
    """Handles one login request; create a new instance per request."""

    def __init__(self, policy: AuthorizationPolicy, request_host: str):
        self.policy = policy
        self.site_host = policy.site_host(request_host)
        self.state = LoginState.AWAITING_CREDENTIAL

    def start(self, query: Mapping[str, str]) -> LoginOutcome:
        """GET: validate the redirect intent and render the form."""
        if not verify_nonce(query.get(NONCE_PARAM), LOGIN_REDIRECT_ACTION):
            return self._reject_notice(MESSAGE_SESSION_EXPIRED)
        try:
            intent = LoginRedirectQuery.model_validate(dict(query))
        except ValidationError:
            return self._reject_notice(MESSAGE_INVALID_REQUEST)

        if not is_same_origin(intent.return_url, self.site_host):
            logger.info("Login page refused cross-origin return URL")
            return self._reject_notice(MESSAGE_INVALID_RETURN_URL)

        error = MESSAGE_INCORRECT_PASSWORD if intent.error == MESSAGE_INCORRECT_PASSWORD else None
        return LoginOutcome(
            state=self.state,
            form=self._form(intent.return_url, intent.original_post_id),
            error=error,
        )

    def submit(self, form: Mapping[str, str]) -> LoginOutcome:
        """POST: check the nonce and return URL, then verify the password."""
        if form.get("termgate_form") != LOGIN_FORM_MARKER:
            return self._reject_notice(MESSAGE_INVALID_REQUEST)
        # Nothing is parsed, looked up or compared until the submit nonce checks out.
        if not verify_nonce(form.get(NONCE_PARAM), LOGIN_SUBMIT_ACTION):
            return self._reject_notice(MESSAGE_SESSION_EXPIRED)
        try:
            submission = LoginSubmission.model_validate(dict(form))
        except ValidationError:
            return self._reject_notice(MESSAGE_INVALID_REQUEST)

        if not is_same_origin(submission.return_url, self.site_host):
            logger.info("Login submission refused cross-origin return URL")
            return self._reject_notice(MESSAGE_INVALID_RETURN_URL)

        self.state = LoginState.VERIFYING
        term = None
        if submission.original_post_id is not None:
            term = resolve_access_term(submission.original_post_id)
        if term is None:
            logger.warning("Login attempted for object %s with no access term", submission.original_post_id)

        stored_hash = term.password_hash if term else None
        if term is None or not verify_password(submission.post_password, stored_hash):
            self.state = LoginState.REJECTED
            return LoginOutcome(
                state=self.state,
                form=self._form(submission.return_url, submission.original_post_id),
                error=MESSAGE_INCORRECT_PASSWORD,
            )

        self.state = LoginState.GRANTED
        logger.info("Access granted for term %s", term.id)
        return LoginOutcome(
            state=self.state,
            status=302,
            redirect_to=submission.return_url,
            session_token=session_token.encode(term.id, stored_hash),
        )

    def _form(self, return_url: str, original_post_id: Optional[int]) -> LoginForm:
        return LoginForm(
            return_url=return_url,
            original_post_id=original_post_id,
            nonce=create_nonce(LOGIN_SUBMIT_ACTION),
        )

    def _reject_notice(self, code: str) -> LoginOutcome:
        self.state = LoginState.REJECTED
        return LoginOutcome(state=self.state, status=400, notice=code)
