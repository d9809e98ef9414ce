"""Per-request facts the gate decides on."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from flask import Request
from flask_jwt_extended import get_jwt, get_jwt_identity, verify_jwt_in_request
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from termgate.core.auth.session_token import read_session_cookie
from termgate.core.content.services import get_object
from termgate.core.gate.policy import AuthorizationPolicy
from termgate.core.utils.urls import host_of

logger = logging.getLogger(__name__)

TARGET_SINGULAR = "singular"
TARGET_ARCHIVE = "archive"
TARGET_FEED = "feed"


def _empty_mapping() -> Mapping[str, str]:
    return MappingProxyType({})


@dataclass(frozen=True)
class RequestContext:
    path: str
    url: str
    host: str
    is_secure: bool = False
    method: str = "GET"
    query: Mapping[str, str] = field(default_factory=_empty_mapping)
    form: Mapping[str, str] = field(default_factory=_empty_mapping)
    session_cookie: Optional[str] = None
    target_kind: Optional[str] = None
    object_id: Optional[int] = None
    object_type: Optional[str] = None
    parent_id: Optional[int] = None
    access_term_id: Optional[int] = None
    operator_id: Optional[str] = None
    roles: FrozenSet[str] = frozenset()
    is_preview: bool = False
    requested_with: Optional[str] = None
    origin_host: Optional[str] = None

    @property
    def is_singular(self) -> bool:
        return self.target_kind == TARGET_SINGULAR

    @property
    def is_archive(self) -> bool:
        return self.target_kind == TARGET_ARCHIVE


def _operator_identity() -> tuple[Optional[str], FrozenSet[str]]:
    """Identity and roles from an optional operator JWT; anonymous on any token problem."""
    try:
        verify_jwt_in_request(optional=True)
        claims = get_jwt() or {}
        identity = get_jwt_identity()
    except (JWTExtendedException, PyJWTError) as exc:
        logger.debug("Ignoring unusable operator token: %s", exc)
        return None, frozenset()
    if identity is None:
        return None, frozenset()
    roles = claims.get("roles") or ()
    if isinstance(roles, str):
        roles = (roles,)
    return str(identity), frozenset(roles)


def build_request_context(request: Request, policy: AuthorizationPolicy) -> RequestContext:
    """Build the context once per request from the Flask request."""
    view_args = request.view_args or {}
    target_kind = None
    object_id = object_type = parent_id = access_term_id = None

    if "object_id" in view_args:
        obj = get_object(view_args["object_id"])
        if obj is not None:
            target_kind = TARGET_SINGULAR
            object_id = obj.id
            object_type = obj.object_type
            parent_id = obj.parent_id
            access_term_id = obj.access_term_id
    elif "object_type" in view_args:
        target_kind = TARGET_FEED if view_args.get("feed") else TARGET_ARCHIVE
        object_type = view_args["object_type"]

    operator_id, roles = _operator_identity()
    origin = request.headers.get("Origin") or request.headers.get("Referer")

    return RequestContext(
        path=request.path,
        url=request.url,
        host=request.host,
        is_secure=request.is_secure,
        method=request.method,
        query=MappingProxyType(request.args.to_dict()),
        form=MappingProxyType(request.form.to_dict()) if request.method == "POST" else _empty_mapping(),
        session_cookie=read_session_cookie(request),
        target_kind=target_kind,
        object_id=object_id,
        object_type=object_type,
        parent_id=parent_id,
        access_term_id=access_term_id,
        operator_id=operator_id,
        roles=roles,
        is_preview=bool(policy.preview_query_param) and policy.preview_query_param in request.args,
        requested_with=request.headers.get("X-Requested-With"),
        origin_host=host_of(origin),
    )
