from __future__ import annotations

import json
from unittest.mock import patch
from urllib.parse import quote

import pytest

from termgate.core.auth import session_token

pytestmark = pytest.mark.unit


def test_encode_decode_roundtrip(app):
    value = session_token.encode(5, "$2b$04$abcdefghijklmnopqrstuv")

    claim = session_token.decode(value)

    assert claim is not None
    assert claim.term_id == 5
    assert claim.password == "$2b$04$abcdefghijklmnopqrstuv"


def test_encoded_value_is_cookie_safe(app):
    value = session_token.encode(5, "$2b$04$a/b+c=d")

    assert all(ch not in value for ch in ' ;,"{}')


@pytest.mark.parametrize(
    "value",
    [
        None,
        "",
        "not json",
        quote("[1, 2]", safe=""),
        quote('"just a string"', safe=""),
        quote(json.dumps({"term_id": "5", "password": "x"}), safe=""),
        quote(json.dumps({"term_id": 5}), safe=""),
        quote(json.dumps({"password": "x"}), safe=""),
        quote(json.dumps({"term_id": 0, "password": "x"}), safe=""),
        quote(json.dumps({"term_id": -3, "password": "x"}), safe=""),
        quote(json.dumps({"term_id": 5, "password": ""}), safe=""),
        quote(json.dumps({"term_id": 5, "password": 123}), safe=""),
        quote(json.dumps({"term_id": True, "password": "x"}), safe=""),
        "%7B%22term_id%22%3A5%2C",
        "%ZZ",
        "[" * 5000,
        "[" * 4000,
        "%7B%22a%22%3A" * 300,
        quote(json.dumps({"term_id": 2**63, "password": "x"}), safe=""),
        quote(json.dumps({"term_id": 2**31, "password": "x"}), safe=""),
        "a" * (session_token.MAX_COOKIE_LENGTH + 1),
    ],
)
def test_malformed_values_decode_to_none(app, value):
    assert session_token.decode(value) is None


def test_decoder_recursion_failure_counts_as_malformed(app):
    value = session_token.encode(5, "$2b$04$abcdefghijklmnopqrstuv")

    with patch("termgate.core.auth.session_token.json.loads", side_effect=RecursionError):
        assert session_token.decode(value) is None


def test_cookie_name_uses_configured_name(app):
    assert session_token.cookie_name() == "termgate_access_test"


def test_cookie_name_derived_from_site_url(app):
    app.config["ACCESS_COOKIE_NAME"] = ""

    name = session_token.cookie_name()

    assert name.startswith(session_token.COOKIE_NAME_PREFIX)
    assert len(name) == len(session_token.COOKIE_NAME_PREFIX) + 32

    app.config["SITE_URL"] = "https://other.example"
    assert session_token.cookie_name() != name


def test_set_and_clear_cookie_attributes(app):
    with app.test_request_context("/"):
        response = app.response_class()
        session_token.set_session_cookie(response, "abc", secure=True)
        header = response.headers.getlist("Set-Cookie")[0]

    assert header.startswith("termgate_access_test=abc")
    assert "HttpOnly" in header
    assert "Secure" in header
    assert "Path=/" in header
    assert "SameSite=Lax" in header
    assert f"Max-Age={app.config['ACCESS_COOKIE_MAX_AGE']}" in header

    with app.test_request_context("/"):
        response = app.response_class()
        session_token.clear_session_cookie(response, secure=False)
        header = response.headers.getlist("Set-Cookie")[0]

    assert header.startswith("termgate_access_test=;")
    assert "Max-Age=0" in header
    assert "Secure" not in header
