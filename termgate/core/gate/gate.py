"""Per-request access decision for protected content."""

from __future__ import annotations

import logging
import secrets
from typing import Optional

from termgate.core.auth import session_token
from termgate.core.auth.credentials import CredentialStore
from termgate.core.auth.nonces import LOGIN_REDIRECT_ACTION, NONCE_PARAM, create_nonce
from termgate.core.auth.schemas import SessionClaim
from termgate.core.gate.bypass import is_bypassable
from termgate.core.gate.context import RequestContext
from termgate.core.gate.decision import Allow, Deny
from termgate.core.gate.policy import ARCHIVE_REDIRECT_HUB, AuthorizationPolicy
from termgate.core.utils.urls import add_query_args

logger = logging.getLogger(__name__)


class Gate:
    """Decides Allow or Deny for one request.

    Singular objects need a session for their own term whose hash still
    matches the term's current hash. Archives of protected types need a valid
    session for any term.
    """

    def __init__(self, policy: AuthorizationPolicy, credentials: Optional[CredentialStore] = None):
        self.policy = policy
        self.credentials = credentials or CredentialStore()

    def is_protected(self, ctx: RequestContext) -> bool:
        if ctx.is_singular:
            return self.policy.is_protected_type(ctx.object_type) or self.policy.is_hub_child(
                ctx.object_type, ctx.parent_id
            )
        if ctx.is_archive:
            return self.policy.is_protected_type(ctx.object_type)
        return False

    def evaluate(self, ctx: RequestContext) -> Allow | Deny:
        if is_bypassable(ctx, self.policy):
            return Allow(reason="bypass")
        if not self.is_protected(ctx):
            return Allow(reason="unprotected")
        if ctx.is_singular:
            return self._evaluate_singular(ctx)
        return self._evaluate_archive(ctx)

    def _evaluate_singular(self, ctx: RequestContext) -> Allow | Deny:
        if ctx.access_term_id is None:
            logger.warning("Protected object %s has no access term; redirecting home", ctx.object_id)
            return Deny(location=self.policy.home_url, reason="no_access_term")

        if ctx.roles & self.policy.exempt_roles:
            return Allow(reason="exempt_role")

        claim = session_token.decode(ctx.session_cookie)
        if claim is None:
            return self._login_redirect(ctx, "no_session")
        if claim.term_id != ctx.access_term_id:
            return self._login_redirect(ctx, "term_mismatch")
        if not self._hash_matches(claim):
            return self._login_redirect(ctx, "stale_session")
        return Allow(reason="session", term_id=claim.term_id)

    def _evaluate_archive(self, ctx: RequestContext) -> Allow | Deny:
        claim = session_token.decode(ctx.session_cookie)
        if claim is not None and self._hash_matches(claim):
            return Allow(reason="session", term_id=claim.term_id)
        return Deny(location=self._archive_fallback(), reason="archive_no_session")

    def _hash_matches(self, claim: SessionClaim) -> bool:
        stored = self.credentials.get_hash(claim.term_id)
        if not stored:
            return False
        return secrets.compare_digest(stored.encode("utf-8"), claim.password.encode("utf-8"))

    def _archive_fallback(self) -> str:
        if self.policy.archive_redirect == ARCHIVE_REDIRECT_HUB and self.policy.hub_object_id:
            return self.policy.hub_url
        return self.policy.home_url

    def _login_redirect(self, ctx: RequestContext, reason: str) -> Deny:
        if not self.policy.login_url:
            logger.warning("No login URL configured; redirecting object %s home", ctx.object_id)
            return Deny(location=self.policy.home_url, reason="login_not_configured")
        location = add_query_args(
            self.policy.login_url,
            return_url=ctx.url,
            original_post_id=ctx.object_id,
            **{NONCE_PARAM: create_nonce(LOGIN_REDIRECT_ACTION)},
        )
        return Deny(location=location, reason=reason)
