"""Ordered gate chain run once per request from ``before_request``."""

from __future__ import annotations

import logging
from typing import Callable, Iterable, List, Optional

from flask import Flask, current_app, g, redirect, request

from termgate.core.auth.logout_flow import handle_logout
from termgate.core.auth.session_token import clear_session_cookie
from termgate.core.gate.bypass import is_bypassable
from termgate.core.gate.context import RequestContext, build_request_context
from termgate.core.gate.decision import CONTINUE, Allow, Continue, Decision, Redirect
from termgate.core.gate.gate import Gate
from termgate.core.gate.policy import AuthorizationPolicy

logger = logging.getLogger(__name__)

Stage = Callable[[RequestContext], Decision]

GATE_EXTENSION_KEY = "termgate.gate"
SKIPPED_ENDPOINTS = frozenset({"static"})
PROTECTED_ALLOW_REASONS = frozenset({"session", "exempt_role"})


class GateChain:
    """Runs stages in order; the first decision other than Continue wins."""

    def __init__(self, stages: Iterable[Stage]):
        self.stages: List[Stage] = list(stages)

    def run(self, ctx: RequestContext) -> Decision:
        for stage in self.stages:
            decision = stage(ctx)
            if not isinstance(decision, Continue):
                return decision
        return Allow(reason="no_stage_matched")


def bypass_stage(policy: AuthorizationPolicy) -> Stage:
    def _stage(ctx: RequestContext) -> Decision:
        return Allow(reason="bypass") if is_bypassable(ctx, policy) else CONTINUE

    return _stage


def build_default_chain(policy: AuthorizationPolicy, gate: Optional[Gate] = None) -> GateChain:
    gate = gate or Gate(policy)
    return GateChain(
        [
            lambda ctx: handle_logout(ctx, policy),
            bypass_stage(policy),
            gate.evaluate,
        ]
    )


def current_policy() -> AuthorizationPolicy:
    return current_app.extensions[GATE_EXTENSION_KEY]["policy"]


def _decision_response(decision: Redirect, ctx: RequestContext):
    response = redirect(decision.location, code=302)
    response.headers["Cache-Control"] = "private, no-store"
    if decision.clear_session:
        clear_session_cookie(response, secure=ctx.is_secure)
    return response


def enforce_gate():
    """before_request hook; returning a response ends the request there."""
    g.gate_decision = None
    if request.endpoint in SKIPPED_ENDPOINTS:
        return None
    state = current_app.extensions[GATE_EXTENSION_KEY]
    ctx = build_request_context(request, state["policy"])
    decision = state["chain"].run(ctx)
    g.gate_context = ctx
    g.gate_decision = decision
    if isinstance(decision, Redirect):
        logger.info("Gate redirect for %s: %s", ctx.path, decision.reason)
        return _decision_response(decision, ctx)
    return None


def mark_protected_response(response):
    """after_request hook; gated content must not be stored by shared caches."""
    decision = g.get("gate_decision")
    if isinstance(decision, Allow) and decision.reason in PROTECTED_ALLOW_REASONS:
        response.headers["Cache-Control"] = "private, no-store"
    return response


def init_gate(app: Flask) -> None:
    policy = AuthorizationPolicy.from_config(app.config)
    app.extensions[GATE_EXTENSION_KEY] = {"policy": policy, "chain": build_default_chain(policy)}
    if not policy.login_url:
        app.logger.warning(
            "LOGIN_URL is not set; protected content will redirect home until a login page is configured."
        )
    app.before_request(enforce_gate)
    app.after_request(mark_protected_response)
