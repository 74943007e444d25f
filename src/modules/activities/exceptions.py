"""Activities domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, InvalidStateError, NotFoundError


class TaskTypeNotFound(NotFoundError):
    pass


class InactiveTaskType(InvalidStateError):
    """Tasks cannot be logged against a deactivated type."""


class TaskTypeInUse(ConflictError):
    """The task type has logs and cannot be deleted; deactivate it instead."""
