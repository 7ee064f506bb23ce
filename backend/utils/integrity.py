# backend/utils/integrity.py
"""
Referential checks the schema constraints cannot report usefully.

Every helper runs against the session of the caller's open transaction, so the
checks and the write that follows them observe the same state. Lookups of rows
that a write will depend on are taken ``FOR UPDATE``: on PostgreSQL a
concurrent delete of the same parent waits for this transaction to finish.
SQLite serializes writers on its own and ignores the clause.
"""
import re
from typing import Iterable, List, Optional, Sequence, Tuple

from sqlalchemy import distinct, func
from sqlalchemy.orm import Session

from utils.errors import DependentsExist, Duplicate, InvalidReference, NotFound

OBJECT_ID_RE = re.compile(r"^[0-9a-fA-F]{24}$")


def is_object_id(value) -> bool:
    return isinstance(value, str) and bool(OBJECT_ID_RE.match(value))


def require_entity(db: Session, model, entity_id: str, resource: str, lock: bool = False):
    """Load the target of a read, update or delete, or raise 404.

    Ids that are not 24 hex characters cannot name a row and are reported the same way.
    """
    if not is_object_id(entity_id):
        raise NotFound(resource)
    query = db.query(model).filter(model.id == entity_id.lower())
    if lock:
        query = query.with_for_update()
    entity = query.first()
    if entity is None:
        raise NotFound(resource)
    return entity


def require_reference(db: Session, model, entity_id: str, field: str):
    """Existence check for a foreign key in the payload; 400 when it does not resolve."""
    if not is_object_id(entity_id):
        raise InvalidReference(field, entity_id)
    entity = db.query(model).filter(model.id == entity_id.lower()).with_for_update().first()
    if entity is None:
        raise InvalidReference(field, entity_id)
    return entity


def require_references(db: Session, model, entity_ids: Iterable[str], field: str) -> List:
    # Checked one by one in input order; the first unresolved id aborts
    return [require_reference(db, model, entity_id, field) for entity_id in entity_ids]


def ensure_unique(db: Session, column, value, message: str, exclude_id: Optional[str] = None) -> None:
    model = column.class_
    query = db.query(model).filter(column == value)
    if exclude_id is not None:
        query = query.filter(model.id != exclude_id)
    if query.first() is not None:
        raise Duplicate(message)


def count_dependents(db: Session, entity_id: str, checks: Sequence[Tuple]) -> dict:
    """Count rows referencing ``entity_id``.

    Each check is ``(name, fk_column)`` or ``(name, fk_column, counted_column)``; the
    counted column defaults to the primary key of the referencing table, order lines
    count their distinct orders.
    """
    counts = {}
    for name, fk_column, *counted in checks:
        counted_column = counted[0] if counted else fk_column.class_.id
        counts[name] = (
            db.query(func.count(distinct(counted_column))).filter(fk_column == entity_id).scalar() or 0
        )
    return counts


def ensure_no_dependents(db: Session, resource: str, entity_id: str, checks: Sequence[Tuple]) -> dict:
    counts = count_dependents(db, entity_id, checks)
    if any(counts.values()):
        raise DependentsExist(resource, counts)
    return counts
