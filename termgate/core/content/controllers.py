"""Content pages. Access is enforced by the gate before these views run."""

from __future__ import annotations

from flask import Blueprint, g, jsonify

from termgate.core.auth.logout_flow import logout_url
from termgate.core.content.services import get_object, list_archive, list_feed, list_hub_children
from termgate.core.gate.decision import Allow
from termgate.core.gate.middleware import current_policy

content_pages_bp = Blueprint("content_pages", __name__)


def _session_term_id():
    decision = g.get("gate_decision")
    if isinstance(decision, Allow):
        return decision.term_id
    return None


@content_pages_bp.get("/")
def home():
    return jsonify({"ok": True, "logout_url": logout_url(current_policy().home_url)})


@content_pages_bp.get("/<int:object_id>")
def object_detail(object_id: int):
    obj = get_object(object_id)
    if not obj:
        return jsonify({"ok": False, "error": "not_found"}), 404
    body = {"ok": True, "object": obj.to_dict()}
    policy = current_policy()
    if policy.hub_object_id and obj.id == policy.hub_object_id:
        children = list_hub_children(policy.hub_object_type, policy.hub_object_id)
        body["children"] = [child.to_dict() for child in children]
    return jsonify(body)


@content_pages_bp.get("/type/<object_type>/")
def archive(object_type: str):
    policy = current_policy()
    term_id = _session_term_id() if policy.is_protected_type(object_type) else None
    objects = list_archive(object_type, term_id)
    return jsonify({"ok": True, "objects": [obj.to_dict() for obj in objects]})


@content_pages_bp.get("/type/<object_type>/feed", defaults={"feed": True})
def feed(object_type: str, feed: bool):
    objects = list_feed(object_type)
    return jsonify({"ok": True, "objects": [obj.to_dict() for obj in objects]})
