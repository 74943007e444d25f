"""SingleOrder model.

A one-off order with its own two-phase timing and no parent lot:

- ``order_code`` shares the namespace of lot orders (checked by the
  service) and is unique among single orders (checked by the database).
- ``total_duration_ms`` is the sum of the separation and scan phases, not
  wall-clock time from the first start.
- XP is written exactly once, when the order is sealed.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.core.validators import order_code_validator, seal_code_validator
from modules.single_orders.constants import VALID_TRANSITIONS, SingleOrderStatus
from shared.domain.events import DomainEventMixin


class SingleOrder(DomainEventMixin, BaseModel):
    order_code = models.CharField(
        max_length=9, unique=True, validators=[order_code_validator]
    )
    items = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=SingleOrderStatus.choices,
        default=SingleOrderStatus.DRAFT,
    )
    created_by_uid = models.CharField(max_length=128)
    created_by_name = models.CharField(max_length=255, blank=True, default="")

    separation_start_at = models.DateTimeField(null=True, blank=True, default=None)
    separation_end_at = models.DateTimeField(null=True, blank=True, default=None)
    scan_start_at = models.DateTimeField(null=True, blank=True, default=None)
    scan_end_at = models.DateTimeField(null=True, blank=True, default=None)

    separation_duration_ms = models.BigIntegerField(null=True, blank=True, default=None)
    scan_duration_ms = models.BigIntegerField(null=True, blank=True, default=None)
    total_duration_ms = models.BigIntegerField(null=True, blank=True, default=None)

    sealed_code = models.CharField(
        max_length=10,
        null=True,
        blank=True,
        default=None,
        validators=[seal_code_validator],
    )
    sealed_at = models.DateTimeField(null=True, blank=True, default=None)
    xp_earned = models.PositiveIntegerField(default=0)

    class Meta:
        db_table = "single_orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["created_by_uid"], name="single_orders_creator_idx"),
            models.Index(fields=["status"], name="single_orders_status_idx"),
        ]

    @property
    def is_terminal(self) -> bool:
        return self.status == SingleOrderStatus.DONE

    def can_transition_to(self, new_status: str) -> bool:
        return new_status in VALID_TRANSITIONS.get(self.status, set())

    def __str__(self) -> str:
        return f"Single order {self.order_code} ({self.status})"
