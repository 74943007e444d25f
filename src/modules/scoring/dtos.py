"""Scoring DTOs.

- ``PickingRulesDTO``: the rules handed to the engine (and accepted from
  admins on update).  Non-negative by construction.
- ``LotTotalsDTO``: order and item counts frozen on a lot at creation.
- ``LotXpResult``: full breakdown returned by ``compute_lot_xp``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, NonNegativeInt

from modules.scoring.constants import DEFAULT_PICKING_RULES


class PickingRulesDTO(BaseModel):
    model_config = ConfigDict(frozen=True, from_attributes=True)

    xp_base_per_lot: NonNegativeInt = DEFAULT_PICKING_RULES["xp_base_per_lot"]
    xp_per_order: NonNegativeInt = DEFAULT_PICKING_RULES["xp_per_order"]
    xp_per_item: NonNegativeInt = DEFAULT_PICKING_RULES["xp_per_item"]
    speed_target_items_per_min: NonNegativeFloat = DEFAULT_PICKING_RULES[
        "speed_target_items_per_min"
    ]
    bonus10_threshold: NonNegativeFloat = DEFAULT_PICKING_RULES["bonus10_threshold"]
    bonus20_threshold: NonNegativeFloat = DEFAULT_PICKING_RULES["bonus20_threshold"]


class LotTotalsDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    orders: NonNegativeInt
    items: NonNegativeInt


class LotXpResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    base: int
    order_xp: int
    item_xp: int
    bonus: int
    bonus_percent: int = Field(ge=0, le=100)
    total: int
    speed: float
    speed_met: bool

    @property
    def subtotal(self) -> int:
        return self.base + self.order_xp + self.item_xp
