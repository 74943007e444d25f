"""Activities repository interfaces."""

from __future__ import annotations

from abc import abstractmethod
from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.activities.models import TaskLog, TaskType


class ITaskTypeRepository(IRepository["TaskType"]):
    @abstractmethod
    def list_active(self) -> List[TaskType]:
        """Active task types, by name."""

    @abstractmethod
    def has_logs(self, id: str) -> bool:
        """Whether any task log references the type."""


class ITaskLogRepository(IRepository["TaskLog"]):
    @abstractmethod
    def list_by_user(self, uid: str, limit: Optional[int] = None) -> List[TaskLog]:
        """The user's logs, most recent first."""

    @abstractmethod
    def list_by_period(
        self, start: datetime, end: datetime, uid: Optional[str] = None
    ) -> List[TaskLog]:
        """Logs with ``start <= occurred_at < end``, optionally for one user."""
