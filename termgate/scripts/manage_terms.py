"""CLI commands for access terms and gate configuration.

Usage:
    flask create-term --name="Growers" --slug=growers
    flask set-term-password --term-id=1            # prompts for the password
    flask clear-term-password --term-id=1
    flask assign-term --object-id=42 --term-id=1
    flask assign-term --object-id=42 --clear
    flask check-term-password --term-id=1 --password="secret"
    flask check-gate-config
"""

from __future__ import annotations

import re

import click
from flask import current_app
from flask.cli import with_appcontext

from termgate.core.auth.credentials import CredentialStore
from termgate.core.auth.models import AccessTerm
from termgate.core.content.services import assign_access_term, find_untagged_protected
from termgate.core.gate.policy import AuthorizationPolicy
from termgate.core.utils.validation import is_row_id
from termgate.extensions import db


def _slugify(value: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", value.strip().lower()).strip("-")


@click.command("create-term")
@click.option("--name", required=True, help="Human readable term name")
@click.option("--slug", help="Unique slug (derived from the name when omitted)")
@click.option("--password", help="Initial password (optional)")
@with_appcontext
def create_term_command(name: str, slug: str | None, password: str | None):
    """Create an access term, optionally with its password."""
    slug_clean = _slugify(slug or name)
    if not slug_clean:
        click.echo("Could not derive a slug from the name", err=True)
        raise click.Abort()
    if AccessTerm.query.filter_by(slug=slug_clean).first():
        click.echo(f"Term with slug {slug_clean} already exists", err=True)
        raise click.Abort()

    term = AccessTerm(name=name.strip(), slug=slug_clean)
    db.session.add(term)
    db.session.commit()
    if password:
        CredentialStore().set_hash(term.id, password)
    click.echo(f"term_id={term.id} slug={term.slug} has_password={bool(password)}")


@click.command("set-term-password")
@click.option("--term-id", type=int, required=True)
@click.password_option("--password", help="New password for the term")
@with_appcontext
def set_term_password_command(term_id: int, password: str):
    """Set a term's password; existing sessions end unless it is unchanged."""
    try:
        changed = CredentialStore().set_hash(term_id, password)
    except ValueError as exc:
        click.echo(f"Could not set password: {exc}", err=True)
        raise click.Abort()
    click.echo(f"term_id={term_id} changed={changed}")


@click.command("clear-term-password")
@click.option("--term-id", type=int, required=True)
@with_appcontext
def clear_term_password_command(term_id: int):
    """Remove a term's password, blocking access to its objects."""
    try:
        CredentialStore().clear_hash(term_id)
    except ValueError as exc:
        click.echo(f"Could not clear password: {exc}", err=True)
        raise click.Abort()
    click.echo(f"term_id={term_id} cleared=True")


@click.command("assign-term")
@click.option("--object-id", type=int, required=True)
@click.option("--term-id", type=int, help="Term to tag the object with")
@click.option("--clear", is_flag=True, help="Remove the object's term")
@with_appcontext
def assign_term_command(object_id: int, term_id: int | None, clear: bool):
    """Tag a content object with a single access term."""
    if clear == (term_id is not None):
        click.echo("Provide exactly one of --term-id or --clear", err=True)
        raise click.Abort()
    try:
        obj = assign_access_term(object_id, None if clear else term_id)
    except ValueError as exc:
        click.echo(f"Could not assign term: {exc}", err=True)
        raise click.Abort()
    click.echo(f"object_id={obj.id} term_id={obj.access_term_id}")


@click.command("check-term-password")
@click.option("--term-id", type=int, required=True)
@click.option("--password", required=True, help="Plaintext password to verify")
@with_appcontext
def check_term_password_command(term_id: int, password: str):
    """Verify a term's stored hash against a plaintext password."""
    term = db.session.get(AccessTerm, term_id) if is_row_id(term_id) else None
    if not term:
        click.echo(f"Term not found: {term_id}", err=True)
        raise click.Abort()
    click.echo(f"term_id={term.id} slug={term.slug}")
    click.echo(f"password_valid={CredentialStore().verify(term_id, password)}")


@click.command("check-gate-config")
@with_appcontext
def check_gate_config_command():
    """Report configuration that leaves protected content unreachable."""
    policy = AuthorizationPolicy.from_config(current_app.config)
    problems = 0
    if not policy.login_url:
        click.echo("WARNING: LOGIN_URL is not set; protected content redirects home.")
        problems += 1
    if not policy.protected_types and not policy.hub_object_id:
        click.echo("WARNING: no protected object types or hub object configured.")
        problems += 1
    for obj in find_untagged_protected(policy.protected_types, policy.hub_object_type, policy.hub_object_id):
        click.echo(f"WARNING: object {obj.id} ({obj.object_type}) is protected but has no access term.")
        problems += 1
    for term in AccessTerm.query.filter(AccessTerm.password_hash.is_(None)).all():
        click.echo(f"WARNING: term {term.id} ({term.slug}) has no password.")
        problems += 1
    click.echo(f"problems={problems}")


def register_commands(app):
    """Register CLI commands with the app."""
    app.cli.add_command(create_term_command)
    app.cli.add_command(set_term_password_command)
    app.cli.add_command(clear_term_password_command)
    app.cli.add_command(assign_term_command)
    app.cli.add_command(check_term_password_command)
    app.cli.add_command(check_gate_config_command)
