"""Domain events for the Lots bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class LotCreated(DomainEvent):
    order_count: int = 0
    item_count: int = 0


@dataclass(frozen=True)
class LotStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class LotOrderSealed(DomainEvent):
    order_code: str = ""
    sealed_code: str = ""


@dataclass(frozen=True)
class LotCompleted(DomainEvent):
    xp_earned: int = 0
    separator_uid: Optional[str] = None
    scanner_uid: Optional[str] = None


@dataclass(frozen=True)
class LotDeleted(DomainEvent):
    released_seals: int = 0
