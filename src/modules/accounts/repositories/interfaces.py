"""AppUser repository interface."""

from __future__ import annotations

from abc import abstractmethod
from datetime import date
from typing import TYPE_CHECKING, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.accounts.models import AppUser


class IAppUserRepository(IRepository["AppUser"]):
    """Repository contract for the AppUser aggregate."""

    @abstractmethod
    def get_by_uid(self, uid: str) -> Optional[AppUser]:
        """Retrieve a user by identity-provider uid."""

    @abstractmethod
    def add_xp(self, uid: str, delta: int) -> Optional[int]:
        """Add ``delta`` to ``xp_total`` and return the new total.

        Returns ``None`` when the user does not exist.
        """

    @abstractmethod
    def set_streak(self, uid: str, streak: int, last_activity_date: date) -> None:
        """Persist the streak counter and the day it was last touched."""
