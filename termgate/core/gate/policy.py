"""Authorization policy consumed by the bypass check and the gate."""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Mapping, Tuple

from termgate.core.utils.urls import host_of

ARCHIVE_REDIRECT_HUB = "hub"
ARCHIVE_REDIRECT_HOME = "home"


@dataclass(frozen=True)
class AuthorizationPolicy:
    """Gate settings resolved once from app config."""

    protected_types: FrozenSet[str]
    hub_object_type: str
    hub_object_id: int
    exempt_roles: FrozenSet[str]
    login_url: str
    site_url: str
    archive_redirect: str
    allow_automation_bypass: bool
    admin_path_prefixes: Tuple[str, ...]
    preview_query_param: str

    @classmethod
    def from_config(cls, config: Mapping) -> "AuthorizationPolicy":
        return cls(
            protected_types=frozenset(config.get("PROTECTED_OBJECT_TYPES") or ()),
            hub_object_type=config.get("HUB_OBJECT_TYPE") or "page",
            hub_object_id=int(config.get("HUB_OBJECT_ID") or 0),
            exempt_roles=frozenset(config.get("EXEMPT_ROLES") or ()),
            login_url=(config.get("LOGIN_URL") or "").strip(),
            site_url=(config.get("SITE_URL") or "").strip(),
            archive_redirect=config.get("ARCHIVE_REDIRECT") or ARCHIVE_REDIRECT_HUB,
            allow_automation_bypass=bool(config.get("ALLOW_AUTOMATION_BYPASS", False)),
            admin_path_prefixes=tuple(config.get("ADMIN_PATH_PREFIXES") or ()),
            preview_query_param=config.get("PREVIEW_QUERY_PARAM") or "",
        )

    @property
    def home_url(self) -> str:
        if self.site_url:
            return self.site_url.rstrip("/") + "/"
        return "/"

    @property
    def hub_url(self) -> str:
        return f"{self.home_url}{self.hub_object_id}"

    def site_host(self, request_host: str) -> str:
        """Host accepted for redirects: SITE_URL's host, else the request host."""
        configured = host_of(self.site_url)
        if configured:
            return configured
        return (request_host or "").split(":", 1)[0].lower()

    def is_protected_type(self, object_type: str | None) -> bool:
        return bool(object_type) and object_type in self.protected_types

    def is_hub_child(self, object_type: str | None, parent_id: int | None) -> bool:
        if not self.hub_object_id:
            return False
        return object_type == self.hub_object_type and parent_id == self.hub_object_id
