"""Generic repository interface (Dependency Inversion Principle).

Services depend on ``IRepository[T]`` and its per-module extensions: fetch
by id, filtered listing, save and delete.  The Django ORM implementations
live next to each module.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, TypeVar

T = TypeVar("T")


class IRepository(ABC, Generic[T]):
    """Base generic repository contract.

    Type parameter ``T`` represents the aggregate managed by the repository
    (e.g. ``Lot``, ``SingleOrder``).
    """

    @abstractmethod
    def get_by_id(self, id: str) -> Optional[T]:
        """Retrieve an aggregate by its identifier."""

    @abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[T]:
        """List aggregates, optionally filtered by field values."""

    @abstractmethod
    def save(self, entity: T) -> T:
        """Persist (create or update) an aggregate."""

    @abstractmethod
    def delete(self, id: str) -> bool:
        """Remove an aggregate by identifier; ``False`` when it did not exist."""
