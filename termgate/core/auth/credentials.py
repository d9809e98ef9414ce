"""Credential store: one bcrypt hash per access term."""

from __future__ import annotations

import logging
from typing import Optional

from termgate.core.auth.models import AccessTerm
from termgate.core.auth.password import hash_password, verify_password
from termgate.core.utils.validation import is_row_id
from termgate.extensions import db

logger = logging.getLogger(__name__)


class CredentialStore:
    """Reads and writes term password hashes in the database.

    Plaintext passwords are hashed before they reach the session and are
    never logged.
    """

    def get_hash(self, term_id: int) -> Optional[str]:
        term = self._term(term_id)
        if not term:
            return None
        return term.password_hash or None

    def set_hash(self, term_id: int, plaintext: str) -> bool:
        """Store a new hash for the term.

        Returns False without writing when the plaintext already matches the
        stored hash, so re-saving the same password keeps existing sessions.
        """
        if not plaintext:
            raise ValueError("password_required")
        term = self._term(term_id)
        if not term:
            raise ValueError("not_found")
        if verify_password(plaintext, term.password_hash):
            logger.debug("Password for access term %s unchanged; skipping rehash", term_id)
            return False

        term.password_hash = hash_password(plaintext)
        db.session.commit()
        logger.info("Password updated for access term %s", term_id)
        return True

    def clear_hash(self, term_id: int) -> None:
        term = self._term(term_id)
        if not term:
            raise ValueError("not_found")
        term.password_hash = None
        db.session.commit()
        logger.info("Password cleared for access term %s", term_id)

    def verify(self, term_id: int, plaintext: str) -> bool:
        return verify_password(plaintext, self.get_hash(term_id))

    def _term(self, term_id: int) -> Optional[AccessTerm]:
        if not is_row_id(term_id):
            return None
        return db.session.get(AccessTerm, term_id)
