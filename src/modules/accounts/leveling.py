"""Level curve derived from a user's running XP total.

Levels are never stored.  Reaching level ``L`` requires ``(L - 1)^2 * 100``
XP, so level 2 starts at 100 XP, level 3 at 400, level 4 at 900.
"""

from __future__ import annotations

import math

from pydantic import BaseModel, ConfigDict

from modules.accounts.constants import XP_PER_LEVEL_STEP


class LevelProgress(BaseModel):
    model_config = ConfigDict(frozen=True)

    level: int
    current: int
    needed: int
    percent: float


def calculate_level(xp: int) -> int:
    return math.floor(math.sqrt(max(xp, 0) / XP_PER_LEVEL_STEP)) + 1


def xp_for_level(level: int) -> int:
    return (level - 1) * (level - 1) * XP_PER_LEVEL_STEP


def xp_progress(xp: int) -> LevelProgress:
    """Progress inside the current level, capped at 100%."""
    level = calculate_level(xp)
    floor_xp = xp_for_level(level)
    needed = xp_for_level(level + 1) - floor_xp
    current = xp - floor_xp
    return LevelProgress(
        level=level,
        current=current,
        needed=needed,
        percent=min(current / needed * 100, 100.0),
    )
