# tenantcms/repositories/base.py
# Generic tenant-scoped query helpers (filters, search, sorting, pagination, ordering)
from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Generic, Iterable, Iterator, Mapping, Sequence, TypeVar

from sqlalchemy import Select, func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from tenantcms.core.errors import Conflict, InvalidArgument, NotFound
from tenantcms.core.settings import settings
from tenantcms.tenancy.context import Scope

log = logging.getLogger(__name__)

ModelT = TypeVar("ModelT")
R = TypeVar("R")

_BOOL_STRINGS = {"true": True, "1": True, "yes": True, "false": False, "0": False, "no": False}


# -------- Unit of work --------
@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Commit everything done inside the block, or nothing.
    Database-level failures surface as a single Conflict.
    """
    try:
        yield db
        db.commit()
    except IntegrityError as e:
        db.rollback()
        log.warning("transaction rolled back (integrity): %s", e.orig)
        raise Conflict("Conflicting change; nothing was saved") from e
    except SQLAlchemyError as e:
        db.rollback()
        log.error("transaction rolled back (database): %s", e)
        raise Conflict("Database error; nothing was saved") from e
    except Exception:
        db.rollback()
        raise


def run_in_transaction(db: Session, fn: Callable[[Session], R]) -> R:
    with transaction(db):
        return fn(db)


@dataclass
class PageResult(Generic[ModelT]):
    items: list[ModelT]
    total: int
    page: int
    per_page: int

    @property
    def pages(self) -> int:
        return max(1, math.ceil(self.total / self.per_page)) if self.per_page else 1


class Repository(Generic[ModelT]):
    """
    Per-entity query object. Entity modules compose one of these with their own
    searchable columns and default sort instead of subclassing.

    ``sort`` strings are column names, ``-`` prefix for descending,
    comma separated for several keys (``"order,name"``).
    """

    def __init__(
        self,
        model: type[ModelT],
        *,
        searchable: Sequence[str] = (),
        default_sort: str = "order",
        tenant_column: str = "tenant_id",
        order_column: str | None = "order",
    ) -> None:
        self.model = model
        self.searchable = tuple(searchable)
        self.default_sort = default_sort
        self.tenant_column = tenant_column
        self.order_column = order_column
        self._columns = {c.key for c in model.__table__.columns}
        for name in (*self.searchable, tenant_column):
            self._column(name)

    # -------- helpers --------
    def _column(self, name: str):
        if name not in self._columns:
            raise InvalidArgument(f"Unknown column '{name}' for {self.model.__name__}", errors={name: ["unknown column"]})
        return getattr(self.model, name)

    @staticmethod
    def _coerce(name: str, col, value: Any) -> Any:
        """Cast a filter value (often a raw query string) to the column's Python type."""
        try:
            py_type = col.type.python_type
        except NotImplementedError:
            return value
        if isinstance(value, py_type) and not (py_type is int and isinstance(value, bool)):
            return value
        try:
            if py_type is bool and isinstance(value, str):
                low = value.strip().lower()
                if low not in _BOOL_STRINGS:
                    raise ValueError(value)
                return _BOOL_STRINGS[low]
            if py_type in (datetime, date) and isinstance(value, str):
                return py_type.fromisoformat(value)
            return py_type(value)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(
                f"Invalid value for '{name}'", errors={name: [f"expected {py_type.__name__}"]}
            ) from e

    def select(self, scope: Scope) -> Select:
        return select(self.model).where(scope.clause(self._column(self.tenant_column)))

    def apply_filters(self, stmt: Select, filters: Mapping[str, Any] | None) -> Select:
        for name, value in (filters or {}).items():
            if value is None:
                continue
            col = self._column(name)
            if isinstance(value, (list, tuple, set, frozenset)):
                stmt = stmt.where(col.in_([self._coerce(name, col, v) for v in value]))
            else:
                stmt = stmt.where(col == self._coerce(name, col, value))
        return stmt

    def apply_search(self, stmt: Select, search: str | None) -> Select:
        term = (search or "").strip()
        if not term or not self.searchable:
            return stmt
        # % and _ in the term are literal characters
        return stmt.where(or_(*[getattr(self.model, c).icontains(term, autoescape=True) for c in self.searchable]))

    def apply_sorting(self, stmt: Select, sort: str | None) -> Select:
        spec = sort or self.default_sort
        keys = []
        for raw in spec.split(","):
            raw = raw.strip()
            if not raw:
                continue
            desc = raw.startswith("-")
            col = self._column(raw.lstrip("-"))
            keys.append(col.desc() if desc else col.asc())
        keys.append(self.model.id.asc())   # stable tiebreak
        return stmt.order_by(*keys)

    # -------- reads --------
    def find(self, db: Session, scope: Scope, id: int) -> ModelT | None:
        return db.scalar(self.select(scope).where(self.model.id == id))

    def get(self, db: Session, scope: Scope, id: int) -> ModelT:
        # rows outside scope look exactly like missing rows
        obj = self.find(db, scope, id)
        if obj is None:
            raise NotFound(f"{self.model.__name__} not found")
        return obj

    def list_all(
        self,
        db: Session,
        scope: Scope,
        *,
        filters: Mapping[str, Any] | None = None,
        sort: str | None = None,
    ) -> list[ModelT]:
        stmt = self.apply_sorting(self.apply_filters(self.select(scope), filters), sort)
        return list(db.scalars(stmt).all())

    def count(self, db: Session, scope: Scope, *, filters: Mapping[str, Any] | None = None) -> int:
        stmt = self.apply_filters(self.select(scope), filters)
        return int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)

    def exists(self, db: Session, scope: Scope, *, filters: Mapping[str, Any] | None = None) -> bool:
        return self.count(db, scope, filters=filters) > 0

    def paginate(
        self,
        db: Session,
        scope: Scope,
        *,
        page: int = 1,
        per_page: int | None = None,
        filters: Mapping[str, Any] | None = None,
        search: str | None = None,
        sort: str | None = None,
    ) -> PageResult[ModelT]:
        if page < 1:
            raise InvalidArgument("page must be >= 1", errors={"page": ["must be >= 1"]})
        per_page = per_page or settings.DEFAULT_PER_PAGE
        if per_page < 1:
            raise InvalidArgument("per_page must be >= 1", errors={"per_page": ["must be >= 1"]})
        per_page = min(per_page, settings.MAX_PER_PAGE)

        stmt = self.apply_search(self.apply_filters(self.select(scope), filters), search)
        total = int(db.scalar(select(func.count()).select_from(stmt.subquery())) or 0)
        stmt = self.apply_sorting(stmt, sort).limit(per_page).offset((page - 1) * per_page)
        items = list(db.scalars(stmt).all())
        return PageResult(items=items, total=total, page=page, per_page=per_page)

    def max_order(self, db: Session, scope: Scope, *, filters: Mapping[str, Any] | None = None) -> int:
        """Highest order in scope, -1 when empty (so ``max_order + 1`` appends)."""
        col = self._column(self.order_column)
        stmt = self.apply_filters(select(func.max(col)).where(scope.clause(self._column(self.tenant_column))), filters)
        value = db.scalar(stmt)
        return -1 if value is None else int(value)

    # -------- writes (flush only; the caller owns the transaction) --------
    def add(self, db: Session, obj: ModelT) -> ModelT:
        db.add(obj)
        db.flush()
        return obj

    def delete(self, db: Session, obj: ModelT) -> None:
        db.delete(obj)
        db.flush()

    def update_order(self, db: Session, scope: Scope, ordered_ids: Iterable[int]) -> list[ModelT]:
        """
        Assigns each id its index as order. Every id must resolve in scope;
        nothing is touched unless all of them do.
        """
        if self.order_column is None:
            raise InvalidArgument(f"{self.model.__name__} is not orderable")
        ids = [int(i) for i in ordered_ids]
        if len(set(ids)) != len(ids):
            raise InvalidArgument("Duplicate ids in ordering", errors={"ids": ["duplicates"]})
        if not ids:
            return []
        rows = db.scalars(self.select(scope).where(self.model.id.in_(ids))).all()
        by_id = {row.id: row for row in rows}
        missing = [i for i in ids if i not in by_id]
        if missing:
            raise NotFound(f"{self.model.__name__} not found: {missing}")
        for index, id_ in enumerate(ids):
            setattr(by_id[id_], self.order_column, index)
        db.flush()
        return [by_id[i] for i in ids]

    def transaction(self, db: Session, fn: Callable[[Session], R]) -> R:
        return run_in_transaction(db, fn)
