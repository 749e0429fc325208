# 🔹 FILE: jobportal/gateway.py
# ==============================================================
# Job Portal – Data Gateway (SQLModel)
# - Thin pass-through over the record tables
# - Every call returns Result(data, error); nothing raises
# - Each write commits on its own: no transaction spans two calls
# ==============================================================

import logging
from typing import Any, Iterable, Optional, Sequence, Type, TypeVar

from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlmodel import Session, SQLModel, select

from . import results
from .results import Result, fail, ok

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=SQLModel)


def _classify(exc: SQLAlchemyError) -> Result:
    """Map a database exception onto a result error code."""
    text = str(getattr(exc, "orig", exc)).lower()
    if isinstance(exc, IntegrityError):
        if "unique" in text or "duplicate" in text:
            return fail(results.UNIQUE_VIOLATION, "Record already exists")
        if "foreign key" in text:
            return fail(results.FOREIGN_KEY_VIOLATION, "Related record does not exist")
        if "check" in text:
            return fail(results.CHECK_VIOLATION, "Value not allowed")
        return fail(results.DATABASE_ERROR, results.GENERIC_MESSAGE)
    if isinstance(exc, OperationalError):
        return fail(results.UNAVAILABLE, "Service temporarily unavailable. Please try again.")
    return fail(results.DATABASE_ERROR, results.GENERIC_MESSAGE)


def _not_found(model: Type[SQLModel]) -> Result:
    return fail(results.NOT_FOUND, f"{model.__name__} not found")


class Gateway:
    """Typed reads/writes against the record tables of one session."""

    def __init__(self, session: Session):
        self.session = session

    # ---------- internals ----------
    def _failed(self, op: str, exc: SQLAlchemyError) -> Result:
        self.session.rollback()
        res = _classify(exc)
        logger.warning("[DB] %s failed (%s): %s", op, res.error.code, exc)
        return res

    def _commit(self, op: str, *rows: SQLModel) -> Optional[Result]:
        try:
            self.session.commit()
        except SQLAlchemyError as exc:
            return self._failed(op, exc)
        for row in rows:
            self.session.refresh(row)
        return None

    # ---------- reads ----------
    def get(self, model: Type[T], row_id: Any) -> Result:
        try:
            row = self.session.get(model, row_id)
        except SQLAlchemyError as exc:
            return self._failed(f"get {model.__name__}", exc)
        if row is None:
            return _not_found(model)
        return ok(row)

    def select(self, model: Type[T], *conditions, order_by: Sequence = ()) -> Result:
        stmt = select(model)
        if conditions:
            stmt = stmt.where(*conditions)
        if order_by:
            stmt = stmt.order_by(*order_by)
        try:
            return ok(list(self.session.exec(stmt).all()))
        except SQLAlchemyError as exc:
            return self._failed(f"select {model.__name__}", exc)

    def select_one(self, model: Type[T], *conditions) -> Result:
        res = self.select(model, *conditions)
        if res.error:
            return res
        if not res.data:
            return _not_found(model)
        return ok(res.data[0])

    def rows(self, stmt) -> Result:
        """Run a joined select; rows come back as tuples of models."""
        try:
            return ok(list(self.session.exec(stmt).all()))
        except SQLAlchemyError as exc:
            return self._failed("joined select", exc)

    # ---------- writes ----------
    def insert(self, row: T) -> Result:
        op = f"insert {type(row).__name__}"
        self.session.add(row)
        failed = self._commit(op, row)
        if failed:
            return failed
        return ok(row)

    def update(self, model: Type[T], row_id: Any, **values) -> Result:
        found = self.get(model, row_id)
        if found.error:
            return found
        row = found.data
        for key, val in values.items():
            setattr(row, key, val)
        self.session.add(row)
        failed = self._commit(f"update {model.__name__}", row)
        if failed:
            return failed
        return ok(row)

    def update_in(self, model: Type[T], ids: Iterable[Any], **values) -> Result:
        """Bulk update of the rows whose id is in ``ids``; data = affected count."""
        ids = list(ids)
        if not ids:
            return ok(0)
        found = self.select(model, model.id.in_(ids))
        if found.error:
            return found
        for row in found.data:
            for key, val in values.items():
                setattr(row, key, val)
            self.session.add(row)
        failed = self._commit(f"bulk update {model.__name__}")
        if failed:
            return failed
        return ok(len(found.data))

    def delete(self, model: Type[T], row_id: Any) -> Result:
        found = self.get(model, row_id)
        if found.error:
            return found
        self.session.delete(found.data)
        failed = self._commit(f"delete {model.__name__}")
        if failed:
            return failed
        return ok(None)

    def upsert(self, row: T, ignore_duplicates: bool = False) -> Result:
        """
        Insert or update keyed by primary key.
        ignore_duplicates=True keeps an existing row untouched and returns it.
        """
        model = type(row)
        try:
            existing = self.session.get(model, row.id)
        except SQLAlchemyError as exc:
            return self._failed(f"upsert {model.__name__}", exc)
        if existing is None:
            return self.insert(row)
        if ignore_duplicates:
            return ok(existing)
        values = row.model_dump(exclude={"id"})
        return self.update(model, row.id, **values)
