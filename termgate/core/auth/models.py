"""Access term model."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column

from termgate.extensions import db


class TimestampMixin:
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, onupdate=datetime.utcnow)


class AccessTerm(db.Model, TimestampMixin):
    """Taxonomy term carrying the shared password for everything tagged with it."""

    __tablename__ = "access_term"

    id: Mapped[int] = mapped_column(primary_key=True)
    name: Mapped[str] = mapped_column(db.String(255), nullable=False)
    slug: Mapped[str] = mapped_column(db.String(255), unique=True, nullable=False, index=True)
    # bcrypt hash; NULL blocks access to every object tagged with the term.
    password_hash: Mapped[str | None] = mapped_column(db.String(255), nullable=True)
