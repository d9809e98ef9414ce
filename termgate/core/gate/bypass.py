"""Conditions under which the gate is skipped entirely."""

from __future__ import annotations

from termgate.core.gate.context import RequestContext
from termgate.core.gate.policy import AuthorizationPolicy

XHR_HEADER_VALUE = "xmlhttprequest"


def is_admin_surface(ctx: RequestContext, policy: AuthorizationPolicy) -> bool:
    for prefix in policy.admin_path_prefixes:
        prefix = prefix.rstrip("/")
        if prefix and (ctx.path == prefix or ctx.path.startswith(prefix + "/")):
            return True
    return False


def is_editor_preview(ctx: RequestContext) -> bool:
    """Visual-editor preview requests; only honoured for a signed-in operator."""
    return ctx.is_preview and ctx.operator_id is not None


def is_allowed_automation(ctx: RequestContext, policy: AuthorizationPolicy) -> bool:
    if not policy.allow_automation_bypass:
        return False
    if (ctx.requested_with or "").lower() != XHR_HEADER_VALUE:
        return False
    if ctx.operator_id is None:
        return False
    return ctx.origin_host is not None and ctx.origin_host == policy.site_host(ctx.host)


def is_bypassable(ctx: RequestContext, policy: AuthorizationPolicy) -> bool:
    return (
        is_admin_surface(ctx, policy)
        or is_editor_preview(ctx)
        or is_allowed_automation(ctx, policy)
    )
