"""Lot repository interface.

Extends ``IRepository[Lot]`` with what the Lot aggregate needs: atomic
creation together with its orders, look-ups by lot code (optionally with a
row lock), order-level access for sealing, and the cross-lot order-code
check used at import time.

``LotService`` depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.lots.models import Lot, LotOrder


class ILotRepository(IRepository["Lot"]):
    """Repository contract for the Lot aggregate root (Lot + LotOrders)."""

    @abstractmethod
    def create(self, data: Dict[str, Any], orders: List[Dict[str, Any]]) -> Lot:
        """Insert the lot and all of its orders atomically.

        Raises ``IntegrityError`` when the lot code or an order code is
        already taken; nothing is written in that case.
        """

    @abstractmethod
    def get_by_code(self, lot_code: str) -> Optional[Lot]:
        """Retrieve a lot by its 8-digit code."""

    @abstractmethod
    def get_for_update(self, lot_code: str) -> Optional[Lot]:
        """Retrieve a lot with a row-level lock (caller owns the transaction)."""

    @abstractmethod
    def purge(self, lot: Lot) -> int:
        """Delete the lot and its orders, then publish the lot's events.

        Returns the number of orders removed.
        """

    @abstractmethod
    def list_orders(self, lot_code: str) -> List[LotOrder]:
        """Orders of the lot, ordered by order code."""

    @abstractmethod
    def get_order_for_update(self, lot_code: str, order_code: str) -> Optional[LotOrder]:
        """Retrieve one order of the lot with a row-level lock."""

    @abstractmethod
    def save_order(self, order: LotOrder) -> LotOrder:
        """Persist a lot order (seal fields)."""

    @abstractmethod
    def count_pending_orders(self, lot_code: str) -> int:
        """Number of orders of the lot still waiting for a seal."""

    @abstractmethod
    def find_existing_order_codes(self, order_codes: Iterable[str]) -> Dict[str, str]:
        """Map each already-used order code to the lot code that owns it."""

    @abstractmethod
    def list_ready_for_scan(self) -> List[Lot]:
        """Lots waiting for a scanner, oldest hand-off first."""

    @abstractmethod
    def list_by_scanner(self, uid: str) -> List[Lot]:
        """Lots claimed by the given scanner."""

    @abstractmethod
    def list_by_user(self, uid: str) -> List[Lot]:
        """Lots the user created, separated, scanned or was assigned to."""
