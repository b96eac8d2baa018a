"""
In-memory store simulation.
Mirrors the SQL store semantics (column defaults, unique keys,
all-or-nothing transactions) without a database.
"""
import copy
from collections import OrderedDict
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Type
from src.core.exceptions import DuplicateKey
from src.storage.base_store import BaseStore
from src.utils.logging import get_logger

logger = get_logger(__name__)

class MemoryStore(BaseStore):
    """
    Simulated store for tests and local runs.

    Features:
    - Python-side column defaults applied on insert
    - Unique column enforcement
    - Snapshot rollback when a transaction block raises
    """

    def __init__(self):
        self.tables: Dict[Type, "OrderedDict[str, Any]"] = {}
        self._depth = 0
        self._snapshot = None

    def get(self, model: Type, record_id: str) -> Optional[Any]:
        return self._table(model).get(record_id)

    def get_by(self, model: Type, field: str, value: Any) -> Optional[Any]:
        for record in self._table(model).values():
            if getattr(record, field) == value:
                return record
        return None

    def insert(self, record: Any) -> Any:
        model = type(record)
        self._apply_defaults(record)

        for column in record.__table__.columns:
            if not (column.unique or column.primary_key):
                continue
            value = getattr(record, column.key)
            if value is not None and self.get_by(model, column.key, value) is not None:
                raise DuplicateKey(model.__name__, column.key, value)

        self._table(model)[record.id] = record
        return record

    def insert_if_absent(self, record: Any, key: str) -> bool:
        value = getattr(record, key)
        if value is not None and self.get_by(type(record), key, value) is not None:
            return False
        self.insert(record)
        return True

    def update(self, record: Any, **fields) -> Any:
        for name, value in fields.items():
            setattr(record, name, value)

        for column in record.__table__.columns:
            if column.onupdate is not None and column.key not in fields:
                setattr(record, column.key, self._default_value(column.onupdate))
        return record

    def list(
        self,
        model: Type,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
        **filters
    ) -> List[Any]:
        records = [
            r for r in self._table(model).values()
            if all(getattr(r, name) == value for name, value in filters.items())
        ]

        if order_by:
            present = [r for r in records if getattr(r, order_by) is not None]
            missing = [r for r in records if getattr(r, order_by) is None]
            present.sort(key=lambda r: getattr(r, order_by), reverse=descending)
            records = present + missing

        if limit:
            records = records[:limit]
        return records

    @contextmanager
    def transaction(self) -> Iterator["MemoryStore"]:
        if self._depth == 0:
            self._snapshot = self._take_snapshot()
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self._restore_snapshot(self._snapshot)
                self._snapshot = None
                logger.info("Memory store transaction rolled back")
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                self._snapshot = None

    def _table(self, model: Type) -> "OrderedDict[str, Any]":
        return self.tables.setdefault(model, OrderedDict())

    def _apply_defaults(self, record: Any):
        for column in record.__table__.columns:
            if getattr(record, column.key) is None and column.default is not None:
                setattr(record, column.key, self._default_value(column.default))

    @staticmethod
    def _default_value(default) -> Any:
        # SQLAlchemy wraps zero-argument callables to accept an execution context
        if default.is_callable:
            return default.arg(None)
        return default.arg

    def _take_snapshot(self) -> Dict[Type, list]:
        snapshot = {}
        for model, table in self.tables.items():
            snapshot[model] = [
                (record, {c.key: copy.deepcopy(getattr(record, c.key)) for c in record.__table__.columns})
                for record in table.values()
            ]
        return snapshot

    def _restore_snapshot(self, snapshot: Dict[Type, list]):
        self.tables = {}
        for model, rows in snapshot.items():
            table = self._table(model)
            for record, values in rows:
                for name, value in values.items():
                    setattr(record, name, value)
                table[record.id] = record
