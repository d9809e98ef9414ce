from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import pytest
from flask_jwt_extended import create_access_token

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from termgate import create_app
from termgate.core.auth import session_token
from termgate.core.auth.models import AccessTerm
from termgate.core.auth.password import hash_password
from termgate.core.content.models import ContentObject
from termgate.extensions import db

COOKIE_NAME = "termgate_access_test"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no database or HTTP)")
    config.addinivalue_line("markers", "integration: Integration tests (database, HTTP client)")


@pytest.fixture()
def app():
    """Per-test app backed by an in-memory SQLite database."""
    app = create_app("testing")
    ctx = app.app_context()
    ctx.push()
    db.create_all()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def seeded(app):
    """Two terms, protected objects under each, and a hub with children.

    Object 42 is tagged "growers" (password harvest25), 43 is tagged "packers"
    (password crates99), 44 is protected but untagged, 100 is the hub page,
    101/102 are hub children, 200 is an ordinary unprotected post.
    """
    growers = AccessTerm(name="Growers", slug="growers", password_hash=hash_password("harvest25"))
    packers = AccessTerm(name="Packers", slug="packers", password_hash=hash_password("crates99"))
    db.session.add_all([growers, packers])
    db.session.flush()

    db.session.add_all(
        [
            ContentObject(id=42, object_type="grower-news", title="Harvest dates", access_term_id=growers.id),
            ContentObject(id=43, object_type="grower-news", title="Crate sizes", access_term_id=packers.id),
            ContentObject(id=44, object_type="grower-news", title="Untagged note"),
            ContentObject(id=100, object_type="page", title="Grower hub"),
            ContentObject(id=101, object_type="page", parent_id=100, title="Seed orders", access_term_id=growers.id),
            ContentObject(id=102, object_type="page", parent_id=100, title="Agronomy", access_term_id=packers.id),
            ContentObject(id=200, object_type="post", title="Public news"),
        ]
    )
    db.session.commit()
    return SimpleNamespace(growers=growers, packers=packers)


def give_session(client, term: AccessTerm, password_hash: str | None = None) -> None:
    """Put an access cookie for the term in the test client's jar."""
    value = session_token.encode(term.id, password_hash or term.password_hash)
    client.set_cookie(COOKIE_NAME, value)


def operator_headers(*roles: str, identity: str = "7") -> dict:
    token = create_access_token(identity=identity, additional_claims={"roles": list(roles)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def login_as_term(client):
    """Return a helper that seeds an access cookie for a term."""

    def _give(term: AccessTerm, password_hash: str | None = None) -> None:
        give_session(client, term, password_hash)

    return _give


@pytest.fixture()
def operator(app):
    """Return a helper building Authorization headers for an operator with roles."""
    return operator_headers
