"""Content lookups used by the gate, plus archive/feed/hub listings."""

from __future__ import annotations

from typing import Iterable, List, Optional

from sqlalchemy import and_, or_

from termgate.core.auth.models import AccessTerm
from termgate.core.content.models import ContentObject
from termgate.core.utils.validation import is_row_id
from termgate.extensions import db


def get_object(object_id: int) -> Optional[ContentObject]:
    if not is_row_id(object_id):
        return None
    return db.session.get(ContentObject, object_id)


def resolve_access_term(object_id: int) -> Optional[AccessTerm]:
    """Return the access term tagged on an object, if any."""
    obj = get_object(object_id)
    if not obj or obj.access_term_id is None:
        return None
    return db.session.get(AccessTerm, obj.access_term_id)


def assign_access_term(object_id: int, term_id: Optional[int]) -> ContentObject:
    """Tag an object with a single term, or clear its term when term_id is None."""
    obj = get_object(object_id)
    if not obj:
        raise ValueError("not_found")
    if term_id is not None and (not is_row_id(term_id) or not db.session.get(AccessTerm, term_id)):
        raise ValueError("term_not_found")
    obj.access_term_id = term_id
    db.session.commit()
    return obj


def list_hub_children(hub_type: str, hub_id: int) -> List[ContentObject]:
    """Direct children of the hub object, ordered by title."""
    if not hub_id:
        return []
    return (
        ContentObject.query.filter_by(object_type=hub_type, parent_id=hub_id)
        .order_by(ContentObject.title.asc())
        .all()
    )


def list_archive(object_type: str, term_id: Optional[int]) -> List[ContentObject]:
    """Archive listing; restricted to one term when the visitor holds a session."""
    query = ContentObject.query.filter_by(object_type=object_type)
    if term_id is not None:
        query = query.filter(ContentObject.access_term_id == term_id)
    return query.order_by(ContentObject.id.asc()).all()


def list_feed(object_type: str) -> List[ContentObject]:
    """Feed listing; anything carrying an access term is left out."""
    return (
        ContentObject.query.filter_by(object_type=object_type)
        .filter(ContentObject.access_term_id.is_(None))
        .order_by(ContentObject.id.asc())
        .all()
    )


def find_untagged_protected(protected_types: Iterable[str], hub_type: str, hub_id: int) -> List[ContentObject]:
    """Protected objects with no access term (these always redirect home)."""
    types = list(protected_types)
    query = ContentObject.query.filter(ContentObject.access_term_id.is_(None))
    conditions = []
    if types:
        conditions.append(ContentObject.object_type.in_(types))
    if hub_id:
        conditions.append(
            and_(ContentObject.object_type == hub_type, ContentObject.parent_id == hub_id)
        )
    if not conditions:
        return []
    return query.filter(or_(*conditions)).order_by(ContentObject.id.asc()).all()
