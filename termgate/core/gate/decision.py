"""Outcomes returned by gate middleware stages."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


class Decision:
    """Base class for stage outcomes."""


@dataclass(frozen=True)
class Continue(Decision):
    """The stage has no opinion; the next stage runs."""


@dataclass(frozen=True)
class Allow(Decision):
    reason: str = "allowed"
    # Set when access was granted by a valid session for this term.
    term_id: Optional[int] = None


@dataclass(frozen=True)
class Redirect(Decision):
    location: str
    reason: str
    clear_session: bool = False


@dataclass(frozen=True)
class Deny(Redirect):
    """Access refused; the request ends with a redirect."""


CONTINUE = Continue()
