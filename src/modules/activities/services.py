"""Task type catalogue and task logging.

Task XP is ``task_type.xp * quantity`` (``compute_task_xp``) and goes
through the same ``UserProgressService.award`` path as lot XP.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, List, Optional

import structlog
from django.db import transaction
from django.utils import timezone

from modules.activities.exceptions import (
    InactiveTaskType,
    TaskTypeInUse,
    TaskTypeNotFound,
)
from modules.activities.models import TaskLog, TaskType
from modules.scoring.engine import compute_task_xp
from shared.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from modules.accounts.dtos import WorkerIdentityDTO
    from modules.accounts.services import UserProgressService
    from modules.activities.dtos import LogTaskDTO, TaskTypeDTO, UpdateTaskTypeDTO
    from modules.activities.repositories.interfaces import (
        ITaskLogRepository,
        ITaskTypeRepository,
    )

logger = structlog.get_logger(__name__)


def _require_admin(actor: WorkerIdentityDTO, action: str) -> None:
    if not actor.is_admin:
        logger.warning("task_type.permission_denied", uid=actor.uid, action=action)
        raise PermissionDenied(f"Only admins can {action} task types.")


class TaskTypeService:
    """Admin-maintained catalogue of XP-earning tasks."""

    def __init__(self, task_type_repository: ITaskTypeRepository) -> None:
        self._repo = task_type_repository

    def create_task_type(self, dto: TaskTypeDTO, actor: WorkerIdentityDTO) -> TaskType:
        _require_admin(actor, "create")
        task_type = self._repo.save(TaskType(name=dto.name, xp=dto.xp, active=dto.active))
        logger.info("task_type.created", task_type_id=str(task_type.id), name=task_type.name)
        return task_type

    def update_task_type(
        self, task_type_id: str, dto: UpdateTaskTypeDTO, actor: WorkerIdentityDTO
    ) -> TaskType:
        _require_admin(actor, "update")
        task_type = self.get_task_type(task_type_id)
        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(task_type, field, value)
        self._repo.save(task_type)
        logger.info("task_type.updated", task_type_id=str(task_type.id))
        return task_type

    def delete_task_type(self, task_type_id: str, actor: WorkerIdentityDTO) -> None:
        """Raises ``TaskTypeInUse`` when logs reference the type."""
        _require_admin(actor, "delete")
        task_type = self.get_task_type(task_type_id)
        if self._repo.has_logs(str(task_type.id)):
            raise TaskTypeInUse(
                f"Task type {task_type.name} has logs; deactivate it instead."
            )
        self._repo.delete(str(task_type.id))
        logger.info("task_type.deleted", task_type_id=str(task_type.id))

    def get_task_type(self, task_type_id: str) -> TaskType:
        task_type = self._repo.get_by_id(task_type_id)
        if task_type is None:
            raise TaskTypeNotFound(f"Task type {task_type_id} not found.")
        return task_type

    def list_task_types(self) -> List[TaskType]:
        return self._repo.list()

    def list_active_task_types(self) -> List[TaskType]:
        return self._repo.list_active()


class TaskLogService:
    def __init__(
        self,
        task_type_repository: ITaskTypeRepository,
        task_log_repository: ITaskLogRepository,
        progress_service: UserProgressService,
    ) -> None:
        self._types = task_type_repository
        self._logs = task_log_repository
        self._progress = progress_service

    def log_task(self, dto: LogTaskDTO) -> TaskLog:
        """Record a task and award its XP to the worker.

        Raises:
            TaskTypeNotFound: unknown task type.
            InactiveTaskType: the type has been deactivated.
        """
        task_type = self._types.get_by_id(str(dto.task_type_id))
        if task_type is None:
            raise TaskTypeNotFound(f"Task type {dto.task_type_id} not found.")
        if not task_type.active:
            raise InactiveTaskType(f"Task type {task_type.name} is inactive.")

        with transaction.atomic():
            entry = self._logs.save(
                TaskLog(
                    uid=dto.worker.uid,
                    user_name=dto.worker.name,
                    task_type=task_type,
                    task_type_name=task_type.name,
                    quantity=dto.quantity,
                    xp=compute_task_xp(task_type.xp, dto.quantity),
                    note=dto.note,
                    occurred_at=dto.occurred_at or timezone.now(),
                )
            )

        logger.info(
            "task.logged",
            uid=entry.uid,
            task_type=entry.task_type_name,
            quantity=entry.quantity,
            xp=entry.xp,
        )
        self._progress.award(entry.uid, entry.xp)
        return entry

    def list_task_logs_by_user(self, uid: str, limit: Optional[int] = None) -> List[TaskLog]:
        return self._logs.list_by_user(uid, limit=limit)

    def list_task_logs_by_period(
        self, start: datetime, end: datetime, uid: Optional[str] = None
    ) -> List[TaskLog]:
        if end <= start:
            raise ValueError("Period end must be after its start.")
        return self._logs.list_by_period(start, end, uid=uid)
