"""SingleOrder repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Iterable, List, Optional, Set

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.single_orders.models import SingleOrder


class ISingleOrderRepository(IRepository["SingleOrder"]):
    """Repository contract for the SingleOrder aggregate."""

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[SingleOrder]:
        """Retrieve a single order with a row-level lock."""

    @abstractmethod
    def list_by_user(self, uid: str) -> List[SingleOrder]:
        """Single orders created by the user, newest first."""

    @abstractmethod
    def find_existing_order_codes(self, order_codes: Iterable[str]) -> Set[str]:
        """The subset of ``order_codes`` already used by single orders."""
