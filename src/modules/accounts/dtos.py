"""Account DTOs.

``WorkerIdentityDTO`` is what the identity provider hands to the core for
the acting user; the core trusts it as given.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator

from modules.accounts.constants import UserRole


class WorkerIdentityDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    role: UserRole = UserRole.ESTOQUISTA
    email: str = ""

    @field_validator("uid", "name")
    @classmethod
    def must_not_be_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("Must not be blank.")
        return v.strip()

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


class UserProgressDTO(BaseModel):
    """Read model of a user's gamification counters."""

    model_config = ConfigDict(frozen=True)

    uid: str
    name: str
    xp_total: int
    level: int
    streak: int
    last_activity_date: Optional[date]
