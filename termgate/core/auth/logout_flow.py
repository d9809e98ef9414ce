"""Logout trigger: clears the access cookie and sends the visitor home."""

from __future__ import annotations

import logging

from termgate.core.auth.nonces import LOGOUT_ACTION, NONCE_PARAM, create_nonce, verify_nonce
from termgate.core.gate.context import RequestContext
from termgate.core.gate.decision import CONTINUE, Decision, Redirect
from termgate.core.gate.policy import AuthorizationPolicy
from termgate.core.utils.urls import add_query_args

logger = logging.getLogger(__name__)

LOGOUT_QUERY_PARAM = "termgate_logout"


def handle_logout(ctx: RequestContext, policy: AuthorizationPolicy) -> Decision:
    if LOGOUT_QUERY_PARAM not in ctx.query:
        return CONTINUE
    if not verify_nonce(ctx.query.get(NONCE_PARAM), LOGOUT_ACTION):
        # Stale or forged link: send home but keep the cookie.
        logger.info("Ignoring logout request with invalid nonce")
        return Redirect(location=policy.home_url, reason="logout_nonce_invalid")
    return Redirect(location=policy.home_url, reason="logout", clear_session=True)


def logout_url(base_url: str = "/") -> str:
    return add_query_args(base_url, **{LOGOUT_QUERY_PARAM: "1", NONCE_PARAM: create_nonce(LOGOUT_ACTION)})
