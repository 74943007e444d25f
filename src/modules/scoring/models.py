"""PickingRules singleton.

Exactly one row, keyed by ``RULES_SINGLETON_KEY``.  Admins edit it at any
time; lot and single-order completion read whatever is current at that
moment (no snapshot per lot).
"""

from __future__ import annotations

from django.core.validators import MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.scoring.constants import DEFAULT_PICKING_RULES, RULES_SINGLETON_KEY


class PickingRules(BaseModel):
    key = models.CharField(max_length=32, unique=True, default=RULES_SINGLETON_KEY)
    xp_base_per_lot = models.PositiveIntegerField(
        default=DEFAULT_PICKING_RULES["xp_base_per_lot"]
    )
    xp_per_order = models.PositiveIntegerField(
        default=DEFAULT_PICKING_RULES["xp_per_order"]
    )
    xp_per_item = models.PositiveIntegerField(default=DEFAULT_PICKING_RULES["xp_per_item"])
    speed_target_items_per_min = models.FloatField(
        default=DEFAULT_PICKING_RULES["speed_target_items_per_min"],
        validators=[MinValueValidator(0.0)],
    )
    bonus10_threshold = models.FloatField(
        default=DEFAULT_PICKING_RULES["bonus10_threshold"],
        validators=[MinValueValidator(0.0)],
    )
    bonus20_threshold = models.FloatField(
        default=DEFAULT_PICKING_RULES["bonus20_threshold"],
        validators=[MinValueValidator(0.0)],
    )
    updated_by_uid = models.CharField(max_length=128, blank=True, default="")

    class Meta:
        db_table = "picking_rules"

    def __str__(self) -> str:
        return (
            f"PickingRules(base={self.xp_base_per_lot}, order={self.xp_per_order}, "
            f"item={self.xp_per_item}, target={self.speed_target_items_per_min})"
        )
