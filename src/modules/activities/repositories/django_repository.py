"""Django ORM implementations of the activities repositories."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from django.core.exceptions import ValidationError

from modules.activities.models import TaskLog, TaskType
from modules.activities.repositories.interfaces import (
    ITaskLogRepository,
    ITaskTypeRepository,
)


class TaskTypeDjangoRepository(ITaskTypeRepository):
    def get_by_id(self, id: str) -> Optional[TaskType]:
        try:
            return TaskType.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[TaskType]:
        queryset = TaskType.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_active(self) -> List[TaskType]:
        return list(TaskType.objects.filter(active=True))

    def save(self, entity: TaskType) -> TaskType:
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = TaskType.objects.filter(id=id).delete()
        return deleted > 0

    def has_logs(self, id: str) -> bool:
        return TaskLog.objects.filter(task_type_id=id).exists()


class TaskLogDjangoRepository(ITaskLogRepository):
    def get_by_id(self, id: str) -> Optional[TaskLog]:
        try:
            return TaskLog.objects.select_related("task_type").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[TaskLog]:
        queryset = TaskLog.objects.select_related("task_type")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_user(self, uid: str, limit: Optional[int] = None) -> List[TaskLog]:
        queryset = TaskLog.objects.filter(uid=uid).order_by("-occurred_at")
        if limit is not None:
            queryset = queryset[:limit]
        return list(queryset)

    def list_by_period(
        self, start: datetime, end: datetime, uid: Optional[str] = None
    ) -> List[TaskLog]:
        queryset = TaskLog.objects.filter(occurred_at__gte=start, occurred_at__lt=end)
        if uid is not None:
            queryset = queryset.filter(uid=uid)
        return list(queryset.order_by("-occurred_at"))

    def save(self, entity: TaskLog) -> TaskLog:
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = TaskLog.objects.filter(id=id).delete()
        return deleted > 0
