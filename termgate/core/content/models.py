"""Content object model (host-side stand-in for posts and pages)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy.orm import Mapped, mapped_column, relationship

from termgate.core.auth.models import AccessTerm
from termgate.extensions import db


class ContentObject(db.Model):
    __tablename__ = "content_object"
    __table_args__ = (
        db.Index("ix_content_object_type_term", "object_type", "access_term_id"),
        db.Index("ix_content_object_parent", "parent_id"),
    )

    id: Mapped[int] = mapped_column(primary_key=True)
    object_type: Mapped[str] = mapped_column(db.String(64), nullable=False)
    parent_id: Mapped[int | None] = mapped_column(nullable=True)
    title: Mapped[str] = mapped_column(db.String(255), nullable=False, default="")
    # A single column keeps each object on at most one access term.
    access_term_id: Mapped[int | None] = mapped_column(
        db.ForeignKey("access_term.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow)

    access_term: Mapped[AccessTerm | None] = relationship("AccessTerm", lazy="joined")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "object_type": self.object_type,
            "parent_id": self.parent_id,
            "title": self.title,
            "access_term_id": self.access_term_id,
        }
