"""Domain events for the Single Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass

from shared.domain.events import DomainEvent


@dataclass(frozen=True)
class SingleOrderCreated(DomainEvent):
    order_code: str = ""
    items: int = 0


@dataclass(frozen=True)
class SingleOrderStatusChanged(DomainEvent):
    old_status: str = ""
    new_status: str = ""


@dataclass(frozen=True)
class SingleOrderSealed(DomainEvent):
    order_code: str = ""
    sealed_code: str = ""
    xp_earned: int = 0
