"""Global seal registry.

One row per physical seal ever applied.  ``sealed_code`` is unique across
the whole system: lot orders and single orders share the namespace.  The
owner is either a lot (``lot_code``) or a single order
(``single_order_id``), never both.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel
from modules.core.validators import order_code_validator, seal_code_validator


class SealedCode(BaseModel):
    sealed_code = models.CharField(
        max_length=10, unique=True, validators=[seal_code_validator]
    )
    order_code = models.CharField(max_length=9, validators=[order_code_validator])
    lot_code = models.CharField(max_length=8, null=True, blank=True, default=None)
    single_order_id = models.UUIDField(null=True, blank=True, default=None)

    class Meta:
        db_table = "sealed_codes"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["lot_code"], name="sealed_codes_lot_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(lot_code__isnull=False, single_order_id__isnull=True)
                    | models.Q(lot_code__isnull=True, single_order_id__isnull=False)
                ),
                name="sealed_codes_single_owner",
            ),
        ]

    def __str__(self) -> str:
        owner = self.lot_code or self.single_order_id
        return f"{self.sealed_code} -> {self.order_code} ({owner})"
