"""Activities DTOs."""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from modules.accounts.dtos import WorkerIdentityDTO


class TaskTypeDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1, max_length=120)
    xp: int = Field(ge=1)
    active: bool = True

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Task type name must not be blank.")
        return v.strip()


class UpdateTaskTypeDTO(BaseModel):
    """Partial update; ``None`` keeps the current value."""

    model_config = ConfigDict(frozen=True)

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    xp: Optional[int] = Field(default=None, ge=1)
    active: Optional[bool] = None


class LogTaskDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    worker: WorkerIdentityDTO
    task_type_id: UUID
    quantity: int = Field(default=1, ge=1)
    note: str = ""
    occurred_at: Optional[datetime] = None
