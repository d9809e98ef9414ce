"""URL helpers for redirects."""

from __future__ import annotations

from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit


def add_query_args(url: str, **params) -> str:
    """Append params to a URL's query string, replacing keys already present."""
    parts = urlsplit(url)
    query = [(k, v) for k, v in parse_qsl(parts.query, keep_blank_values=True) if k not in params]
    query.extend((k, str(v)) for k, v in params.items() if v is not None)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, urlencode(query), parts.fragment))


def host_of(url: Optional[str]) -> Optional[str]:
    if not url:
        return None
    try:
        return urlsplit(url).hostname
    except ValueError:
        return None


def is_same_origin(url: Optional[str], site_host: str) -> bool:
    """Accept absolute http(s) URLs on site_host and root-relative paths only."""
    if not url or not site_host:
        return False
    if "\\" in url or any(ord(ch) < 32 or ord(ch) == 127 for ch in url):
        return False
    try:
        parts = urlsplit(url)
        hostname = parts.hostname
    except ValueError:
        return False
    if parts.scheme and parts.scheme.lower() not in ("http", "https"):
        return False
    if not parts.netloc:
        # "/path" only; "http:/x" and "path" are refused.
        return not parts.scheme and url.startswith("/")
    return hostname is not None and hostname == site_host.lower()
