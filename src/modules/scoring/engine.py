"""XP scoring engine.

Pure functions; the caller fetches the current ``PickingRulesDTO`` and
passes it in, so a rules change between two lots is visible at the call
site instead of hidden behind a global.

Lot XP::

    subtotal = base + per_order * orders + per_item * items
    speed    = items / minutes          (0 when the duration is 0)
    bonus    = 20% if speed >= target * bonus20_threshold
               10% if speed >= target * bonus10_threshold
                0% otherwise (or when the target is 0)
    total    = subtotal + round(subtotal * bonus%)

Tiers are exclusive (20% wins over 10%) and compared against the unrounded
speed; ``speed`` in the result is rounded to 2 decimals for display only.
Rounding is half-up everywhere, never Python's banker's ``round``.
"""

from __future__ import annotations

import math
from typing import Tuple

from modules.scoring.constants import (
    BONUS_TIER_HIGH_PERCENT,
    BONUS_TIER_LOW_PERCENT,
    MS_PER_MINUTE,
    SCANNER_XP_SHARE,
    SEPARATOR_XP_SHARE,
)
from modules.scoring.dtos import LotTotalsDTO, LotXpResult, PickingRulesDTO


def round_half_up(value: float, ndigits: int = 0) -> float:
    factor = 10**ndigits
    return math.floor(value * factor + 0.5) / factor


def _round_int(value: float) -> int:
    return int(round_half_up(value))


def items_per_minute(items: int, duration_ms: int) -> float:
    minutes = duration_ms / MS_PER_MINUTE
    return items / minutes if minutes > 0 else 0.0


def bonus_percent_for(speed: float, rules: PickingRulesDTO) -> int:
    target = rules.speed_target_items_per_min
    if target <= 0:
        return 0
    if speed >= target * rules.bonus20_threshold:
        return BONUS_TIER_HIGH_PERCENT
    if speed >= target * rules.bonus10_threshold:
        return BONUS_TIER_LOW_PERCENT
    return 0


def compute_lot_xp(
    totals: LotTotalsDTO,
    duration_ms: int,
    rules: PickingRulesDTO,
) -> LotXpResult:
    """XP breakdown for a completed lot."""
    base = rules.xp_base_per_lot
    order_xp = rules.xp_per_order * totals.orders
    item_xp = rules.xp_per_item * totals.items
    subtotal = base + order_xp + item_xp

    speed = items_per_minute(totals.items, max(duration_ms, 0))
    bonus_percent = bonus_percent_for(speed, rules)
    bonus = _round_int(subtotal * bonus_percent / 100)

    return LotXpResult(
        base=base,
        order_xp=order_xp,
        item_xp=item_xp,
        bonus=bonus,
        bonus_percent=bonus_percent,
        total=subtotal + bonus,
        speed=round_half_up(speed, 2),
        speed_met=bonus_percent > 0,
    )


def compute_single_order_xp(
    items: int, duration_ms: int, rules: PickingRulesDTO
) -> LotXpResult:
    """A single order scores as a one-order lot."""
    return compute_lot_xp(LotTotalsDTO(orders=1, items=items), duration_ms, rules)


def compute_task_xp(task_xp: int, quantity: int) -> int:
    return task_xp * quantity


def split_lot_xp(total: int) -> Tuple[int, int]:
    """Separator and scanner shares of a split-mode lot.

    Each share is rounded on its own, so the pair is not forced to add up
    to ``total``.
    """
    return _round_int(total * SEPARATOR_XP_SHARE), _round_int(total * SCANNER_XP_SHARE)
