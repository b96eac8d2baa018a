"""
Abstract storage interface.
Collectors and workflows depend on this capability set only; the SQL
store and the in-memory store are interchangeable implementations.
"""
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Iterator, List, Optional, Type

class BaseStore(ABC):
    """
    Storage capability set: point lookups, inserts, updates, ordered
    listing, and all-or-nothing multi-write transactions.
    """

    @abstractmethod
    def get(self, model: Type, record_id: str) -> Optional[Any]:
        """Point lookup by primary id."""
        pass

    @abstractmethod
    def get_by(self, model: Type, field: str, value: Any) -> Optional[Any]:
        """Point lookup by a unique column (external id)."""
        pass

    @abstractmethod
    def insert(self, record: Any) -> Any:
        """Insert a record; raises DuplicateKey on a unique collision."""
        pass

    @abstractmethod
    def insert_if_absent(self, record: Any, key: str) -> bool:
        """
        Insert unless a record with the same key value exists.

        Returns:
            True if inserted, False if the key was already present
        """
        pass

    @abstractmethod
    def update(self, record: Any, **fields) -> Any:
        """Set fields on a stored record and persist them."""
        pass

    @abstractmethod
    def list(
        self,
        model: Type,
        order_by: Optional[str] = None,
        descending: bool = True,
        limit: Optional[int] = None,
        **filters
    ) -> List[Any]:
        """Ordered listing with equality filters."""
        pass

    @abstractmethod
    @contextmanager
    def transaction(self) -> Iterator["BaseStore"]:
        """Group writes so that either all of them land or none do."""
        pass
