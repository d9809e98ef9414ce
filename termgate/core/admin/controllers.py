"""Admin API: term passwords and term assignment.

Everything under /admin is skipped by the gate; access is checked here with
operator JWT roles instead.
"""

from __future__ import annotations

from flask import Blueprint, jsonify, request
from pydantic import ValidationError

from termgate.core.auth.credentials import CredentialStore
from termgate.core.auth.nonces import ADMIN_ACTION, create_nonce
from termgate.core.auth.schemas import TermAssignment, TermPasswordUpdate
from termgate.core.content.services import assign_access_term, get_object
from termgate.core.utils.decorators import csrf_protected, require_roles

admin_api_bp = Blueprint("admin_api", __name__)

EDITOR_ROLE = "editor"


@admin_api_bp.get("/csrf")
@require_roles([EDITOR_ROLE])
def issue_csrf_token():
    return jsonify({"ok": True, "csrf_token": create_nonce(ADMIN_ACTION)})


@admin_api_bp.get("/objects/<int:object_id>")
@require_roles([EDITOR_ROLE])
def inspect_object(object_id: int):
    obj = get_object(object_id)
    if not obj:
        return jsonify({"ok": False, "error": "not_found"}), 404
    term = obj.access_term
    return jsonify(
        {
            "ok": True,
            "object": obj.to_dict(),
            "access_term": (
                {"id": term.id, "name": term.name, "has_password": bool(term.password_hash)}
                if term
                else None
            ),
        }
    )


@admin_api_bp.put("/terms/<int:term_id>/password")
@require_roles([EDITOR_ROLE])
@csrf_protected
def update_term_password(term_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = TermPasswordUpdate.model_validate(payload)
    except ValidationError as exc:
        details = exc.errors(include_url=False, include_context=False)
        return jsonify({"ok": False, "error": "validation_error", "details": details}), 400

    store = CredentialStore()
    try:
        if data.password is None:
            store.clear_hash(term_id)
            changed = True
        else:
            changed = store.set_hash(term_id, data.password)
    except ValueError as exc:
        if str(exc) == "not_found":
            return jsonify({"ok": False, "error": "not_found"}), 404
        raise
    return jsonify({"ok": True, "changed": changed})


@admin_api_bp.put("/objects/<int:object_id>/term")
@require_roles([EDITOR_ROLE])
@csrf_protected
def update_object_term(object_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        data = TermAssignment.model_validate(payload)
    except ValidationError as exc:
        details = exc.errors(include_url=False, include_context=False)
        return jsonify({"ok": False, "error": "validation_error", "details": details}), 400

    try:
        obj = assign_access_term(object_id, data.term_id)
    except ValueError as exc:
        code = str(exc)
        if code in ("not_found", "term_not_found"):
            return jsonify({"ok": False, "error": code}), 404
        raise
    return jsonify({"ok": True, "object": obj.to_dict()})
