from __future__ import annotations

from dataclasses import replace

import pytest

from termgate.core.gate.bypass import (
    is_admin_surface,
    is_allowed_automation,
    is_bypassable,
    is_editor_preview,
)
from termgate.core.gate.context import TARGET_SINGULAR, RequestContext
from termgate.core.gate.policy import AuthorizationPolicy

pytestmark = pytest.mark.unit


@pytest.fixture
def policy(app):
    return AuthorizationPolicy.from_config(app.config)


def _ctx(path="/42", **overrides) -> RequestContext:
    values = dict(
        path=path,
        url=f"http://localhost{path}",
        host="localhost",
        target_kind=TARGET_SINGULAR,
        object_id=42,
        object_type="grower-news",
        access_term_id=1,
    )
    values.update(overrides)
    return RequestContext(**values)


@pytest.mark.parametrize("path", ["/admin", "/admin/", "/admin/terms/1/password"])
def test_admin_paths_bypass(policy, path):
    assert is_admin_surface(_ctx(path), policy) is True
    assert is_bypassable(_ctx(path), policy) is True


@pytest.mark.parametrize("path", ["/administrator", "/42", "/login", "/type/admin/"])
def test_non_admin_paths_do_not_bypass(policy, path):
    assert is_admin_surface(_ctx(path), policy) is False


def test_preview_needs_signed_in_operator(policy):
    assert is_editor_preview(_ctx(is_preview=True)) is False
    assert is_editor_preview(_ctx(is_preview=True, operator_id="7")) is True
    assert is_editor_preview(_ctx(operator_id="7")) is False


def test_automation_bypass_off_by_default(policy):
    ctx = _ctx(requested_with="XMLHttpRequest", operator_id="7", origin_host="localhost")

    assert policy.allow_automation_bypass is False
    assert is_allowed_automation(ctx, policy) is False
    assert is_bypassable(ctx, policy) is False


def test_automation_bypass_requires_same_origin_operator_xhr(policy):
    enabled = replace(policy, allow_automation_bypass=True)
    good = _ctx(requested_with="XMLHttpRequest", operator_id="7", origin_host="localhost")

    assert is_allowed_automation(good, enabled) is True
    assert is_allowed_automation(replace(good, requested_with=None), enabled) is False
    assert is_allowed_automation(replace(good, operator_id=None), enabled) is False
    assert is_allowed_automation(replace(good, origin_host="evil.example"), enabled) is False
    assert is_allowed_automation(replace(good, origin_host=None), enabled) is False


def test_ordinary_visitor_is_not_bypassed(policy):
    assert is_bypassable(_ctx(), policy) is False
