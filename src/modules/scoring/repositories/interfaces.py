"""PickingRules repository interface."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from modules.scoring.models import PickingRules


class IPickingRulesRepository(ABC):
    """Singleton store: there is at most one rules row."""

    @abstractmethod
    def get(self) -> Optional[PickingRules]:
        """Return the stored rules, or ``None`` when defaults apply."""

    @abstractmethod
    def upsert(self, values: dict, updated_by_uid: str = "") -> PickingRules:
        """Create or overwrite the singleton row."""
