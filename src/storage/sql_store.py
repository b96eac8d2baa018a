"""
SQLAlchemy-backed store.
Unique constraints on signals.beacon_event_id and social_signals.post_id
are what make overlapping collection cycles safe.
"""
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Type
from sqlalchemy import desc
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from src.core.exceptions import DuplicateKey
from src.storage.base_store import BaseStore
from src.utils.logging import get_logger
# Import all models so foreign keys resolve at flush time
from src.models.signals import Signal  # noqa: F401
from src.models.assessments import Assessment  # noqa: F401
from src.models.escalations import Escalation  # noqa: F401
from src.models.social_signals import SocialSignal  # noqa: F401
from src.models.reference import MonitoredAccount, ListenerKeyword  # noqa: F401
from src.models.audit_log import AuditLog  # noqa: F401

logger = get_logger(__name__)

class SqlAlchemyStore(BaseStore):
    """
    Store over a single SQLAlchemy session.

    Writes outside transaction() commit immediately; writes inside it are
    committed together when the outermost block exits cleanly.
    """

    def __init__(self, db: Session):
        self.db = db
        self._depth = 0

    def get(self, model: Type, record_id: str) -> Optional[Any]:
        return self.db.get(model, record_id)

    def get_by(self, model: Type, field: str, value: Any) -> Optional[Any]:
        return self.db.query(model).filter(getattr(model, field) == value).first()

    def insert(self, record: Any) -> Any:
        self.db.add(record)
        try:
            self.db.flush()
        except IntegrityError as e:
            self._discard()
            raise DuplicateKey(type(record).__name__, 'unique', str(e.orig)) from e
        except (SQLAlchemyError, OverflowError):
            self._discard()
            raise
        self._commit()
        return record

    def insert_if_absent(self, record: Any, key: str) -> bool:
        model = type(record)
        value = getattr(record, key)
        if value is not None and self.get_by(model, key, value) is not None:
            return False

        try:
            self.insert(record)
        except DuplicateKey as e:
            if self._depth:
                raise
            # Any other constraint violation leaves the key absent
            if value is None or self.get_by(model, key, value) is None:
                raise e.__cause__
            logger.info(f"Concurrent insert of {model.__name__}.{key}={value!r} resolved by unique constraint")
            return False
        return True

    def update(self, record: Any, **fields) -> Any:
        for name, value in fields.items():
            setattr(record, name, value)
        try:
            self.db.flush()
        except (SQLAlchemyError, OverflowError):
            self._discard()
            raise
        self._commit()
        return record

    def list(
        self,
        model: Type,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
        **filters
    ) -> List[Any]:
        query = self.db.query(model)

        for name, value in filters.items():
            query = query.filter(getattr(model, name) == value)

        if order_by:
            column = getattr(model, order_by)
            query = query.order_by(desc(column) if descending else column)

        if limit:
            query = query.limit(limit)

        return query.all()

    @contextmanager
    def transaction(self) -> Iterator["SqlAlchemyStore"]:
        self._depth += 1
        try:
            yield self
        except Exception:
            self._depth -= 1
            if self._depth == 0:
                self.db.rollback()
            raise
        else:
            self._depth -= 1
            if self._depth == 0:
                self.db.commit()

    def _commit(self):
        if self._depth == 0:
            self.db.commit()

    def _discard(self):
        """Clear a failed flush so the session stays usable outside transaction()."""
        if self._depth == 0:
            self.db.rollback()
