# backend/utils/transaction.py
import enum
import logging
from typing import Optional

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from utils.errors import Duplicate, StaleReference, StoreError

# SQLSTATE classes reported by PostgreSQL drivers
UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


class TxState(str, enum.Enum):
    OPEN = "open"
    CHECKING = "checking"
    WRITING = "writing"
    COMMITTED = "committed"
    ABORTED = "aborted"


def integrity_kind(exc: IntegrityError) -> Optional[str]:
    """Return "unique", "foreign_key" or None for the violated constraint."""
    orig = exc.orig
    code = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if code == UNIQUE_VIOLATION:
        return "unique"
    if code == FOREIGN_KEY_VIOLATION:
        return "foreign_key"
    text = str(orig).lower()
    if "unique" in text or "duplicate key" in text:
        return "unique"
    if "foreign key" in text:
        return "foreign_key"
    return None


class Transaction:
    """
    One unit of work: integrity checks and the writes depending on them.

    Usage::

        with Transaction(db, log, "CATEGORY_DELETE") as tx:
            category = require_entity(db, Category, category_id, "category", lock=True)
            ensure_no_dependents(db, "category", category.id, [...])
            tx.writing()
            db.delete(category)

    Leaving the block normally flushes and commits. Any exception rolls the
    transaction back; HTTP errors raised by the checks propagate unchanged.
    A unique or foreign key violation reported by the database (a concurrent
    request got past the same check) becomes ``Duplicate`` carrying
    ``duplicate`` as detail, or ``StaleReference``. Other database errors
    surface as ``StoreError``. The session is closed on every exit path.
    """

    def __init__(self, db: Session, log: logging.Logger, action: str, duplicate: str = "Duplicate value."):
        self.db = db
        self.log = log
        self.action = action
        self.duplicate = duplicate
        self.state = TxState.OPEN

    def __enter__(self) -> "Transaction":
        # Reads done earlier in the request (token lookup) already opened the transaction
        if not self.db.in_transaction():
            self.db.begin()
        self.state = TxState.CHECKING
        self.log.debug("%s: transaction opened", self.action)
        return self

    def writing(self) -> None:
        self.state = TxState.WRITING

    def __exit__(self, exc_type, exc, tb):
        try:
            if exc_type is None:
                self._commit()
                return False

            self._abort()
            if isinstance(exc, HTTPException):
                self.log.info("%s: aborted (%s %s)", self.action, exc.status_code, exc.detail)
                return False
            if isinstance(exc, SQLAlchemyError):
                raise self._store_error(exc) from exc
            return False
        finally:
            self.db.close()

    def _commit(self) -> None:
        try:
            self.db.flush()
            self.db.commit()
        except SQLAlchemyError as e:
            self._abort()
            raise self._store_error(e) from e
        self.state = TxState.COMMITTED
        self.log.debug("%s: committed", self.action)

    def _abort(self) -> None:
        self.db.rollback()
        self.state = TxState.ABORTED

    def _store_error(self, exc: SQLAlchemyError) -> HTTPException:
        kind = integrity_kind(exc) if isinstance(exc, IntegrityError) else None
        if kind == "unique":
            self.log.info("%s: aborted by a unique constraint: %s", self.action, exc.orig)
            return Duplicate(self.duplicate)
        if kind == "foreign_key":
            self.log.info("%s: aborted by a foreign key: %s", self.action, exc.orig)
            return StaleReference()
        self.log.error("%s: aborted by the database: %s", self.action, exc)
        return StoreError()
