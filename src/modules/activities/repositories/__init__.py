"""Activities repositories package."""

from modules.activities.repositories.django_repository import (
    TaskLogDjangoRepository,
    TaskTypeDjangoRepository,
)
from modules.activities.repositories.interfaces import (
    ITaskLogRepository,
    ITaskTypeRepository,
)

__all__ = [
    "ITaskLogRepository",
    "ITaskTypeRepository",
    "TaskLogDjangoRepository",
    "TaskTypeDjangoRepository",
]
