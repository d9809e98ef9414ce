from __future__ import annotations

from urllib.parse import parse_qs, urlsplit

import pytest

from termgate.core.utils.urls import add_query_args, host_of, is_same_origin

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "url",
    [
        "/42",
        "/type/grower-news/?page=2",
        "http://localhost/42",
        "https://LOCALHOST/42",
        "http://localhost:8080/42",
    ],
)
def test_same_origin_accepted(url):
    assert is_same_origin(url, "localhost") is True


@pytest.mark.parametrize(
    "url",
    [
        None,
        "",
        "https://evil.example/",
        "//evil.example/42",
        "/\\evil.example",
        "\\\\evil.example",
        "javascript:alert(1)",
        "ftp://localhost/file",
        "http:/42",
        "42",
        "http://localhost.evil.example/",
        "http://evil.example@",
        "/42\r\nLocation: https://evil.example",
        "http://[broken",
    ],
)
def test_cross_origin_or_malformed_refused(url):
    assert is_same_origin(url, "localhost") is False


def test_empty_site_host_refuses_everything():
    assert is_same_origin("/42", "") is False


def test_add_query_args_replaces_existing_keys():
    url = add_query_args("/login?return_url=old&keep=1", return_url="http://localhost/42", original_post_id=42)

    parts = urlsplit(url)
    query = parse_qs(parts.query)
    assert parts.path == "/login"
    assert query == {"keep": ["1"], "return_url": ["http://localhost/42"], "original_post_id": ["42"]}


def test_add_query_args_skips_none():
    assert add_query_args("/login", original_post_id=None) == "/login"


def test_host_of():
    assert host_of("https://Example.org:8443/path") == "example.org"
    assert host_of("/relative") is None
    assert host_of(None) is None
    assert host_of("http://[broken") is None
