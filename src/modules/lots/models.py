"""Lot and LotOrder models.

Business rules implemented:
- ``lot_code`` has exactly 8 digits and is unique (create-if-absent).
- ``order_code`` has exactly 9 digits and is unique among lot orders; the
  service also checks it against single orders before creating a lot.
- ``total_orders`` / ``total_items`` are computed once at creation and
  never recalculated.
- A PENDING order has no seal; a SEALED order keeps its ``sealed_code`` and
  ``sealed_at`` forever (``LotOrder.mark_sealed`` refuses a second seal).
- Status transitions follow ``VALID_TRANSITIONS`` (enforced at service
  layer through ``Lot.can_transition_to``).
"""

from __future__ import annotations

from datetime import datetime

import structlog
from django.db import models

from modules.core.models import BaseModel
from modules.core.validators import (
    lot_code_validator,
    order_code_validator,
    seal_code_validator,
)
from modules.lots.constants import (
    SPLIT_WORK_MODES,
    TERMINAL_STATES,
    VALID_TRANSITIONS,
    AssignmentType,
    LotOrderStatus,
    LotStatus,
    WorkMode,
)
from modules.scoring.dtos import LotTotalsDTO
from shared.domain.events import DomainEventMixin

logger = structlog.get_logger(__name__)


class Lot(DomainEventMixin, BaseModel):
    """Lot aggregate root: a batch of orders picked together.

    Phase timestamps drive the durations computed at completion:
    ``start_at`` -> ``end_at`` is the separation phase, ``scan_start_at``
    -> ``scan_end_at`` the scan-and-seal phase.
    """

    lot_code = models.CharField(max_length=8, unique=True, validators=[lot_code_validator])
    status = models.CharField(
        max_length=20,
        choices=LotStatus.choices,
        default=LotStatus.DRAFT,
    )
    cycle = models.CharField(max_length=64, blank=True, default="")
    work_mode = models.CharField(
        max_length=20,
        choices=WorkMode.choices,
        default=WorkMode.GERAL,
    )
    total_orders = models.PositiveIntegerField(default=0, editable=False)
    total_items = models.PositiveIntegerField(default=0, editable=False)

    created_by_uid = models.CharField(max_length=128)
    created_by_name = models.CharField(max_length=255, blank=True, default="")
    separator_uid = models.CharField(max_length=128, blank=True, default="")
    separator_name = models.CharField(max_length=255, blank=True, default="")
    scanner_uid = models.CharField(max_length=128, blank=True, default="")
    scanner_name = models.CharField(max_length=255, blank=True, default="")

    is_admin_created = models.BooleanField(default=False)
    assignment_type = models.CharField(
        max_length=20,
        choices=AssignmentType.choices,
        default=AssignmentType.OPEN,
    )
    assigned_general_uid = models.CharField(max_length=128, blank=True, default="")
    assigned_general_name = models.CharField(max_length=255, blank=True, default="")
    assigned_separator_uid = models.CharField(max_length=128, blank=True, default="")
    assigned_separator_name = models.CharField(max_length=255, blank=True, default="")
    assigned_scanner_uid = models.CharField(max_length=128, blank=True, default="")
    assigned_scanner_name = models.CharField(max_length=255, blank=True, default="")

    start_at = models.DateTimeField(null=True, blank=True, default=None)
    end_at = models.DateTimeField(null=True, blank=True, default=None)
    scan_start_at = models.DateTimeField(null=True, blank=True, default=None)
    scan_end_at = models.DateTimeField(null=True, blank=True, default=None)

    duration_ms = models.BigIntegerField(null=True, blank=True, default=None)
    scan_duration_ms = models.BigIntegerField(null=True, blank=True, default=None)
    total_duration_ms = models.BigIntegerField(null=True, blank=True, default=None)

    xp_earned = models.PositiveIntegerField(default=0)
    separator_xp_earned = models.PositiveIntegerField(null=True, blank=True, default=None)
    scanner_xp_earned = models.PositiveIntegerField(null=True, blank=True, default=None)

    class Meta:
        db_table = "lots"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status"], name="lots_status_idx"),
            models.Index(fields=["created_by_uid"], name="lots_creator_idx"),
            models.Index(fields=["scanner_uid"], name="lots_scanner_idx"),
        ]

    # ------------------------------------------------------------------
    # State Machine helpers
    # ------------------------------------------------------------------

    @property
    def is_terminal(self) -> bool:
        return self.status in TERMINAL_STATES

    def can_transition_to(self, new_status: str) -> bool:
        allowed = VALID_TRANSITIONS.get(self.status, set())
        return new_status in allowed

    @property
    def is_split_mode(self) -> bool:
        return self.work_mode in SPLIT_WORK_MODES

    @property
    def splits_xp(self) -> bool:
        """Separator and scanner are different people in a SEPARADOR lot."""
        return (
            self.work_mode == WorkMode.SEPARADOR
            and bool(self.scanner_uid)
            and self.separator_uid != self.scanner_uid
        )

    @property
    def xp_owner_uid(self) -> str:
        """Who receives the full XP of a lot that does not split.

        Worker imports pay the creator.  Admin lots pay the worker doing
        the job: the assigned general worker, else whoever separated it.
        """
        if self.assignment_type == AssignmentType.ASSIGNED_GENERAL and self.assigned_general_uid:
            return self.assigned_general_uid
        if self.is_admin_created and self.separator_uid:
            return self.separator_uid
        return self.created_by_uid

    # ------------------------------------------------------------------
    # Derived values
    # ------------------------------------------------------------------

    @property
    def totals(self) -> LotTotalsDTO:
        return LotTotalsDTO(orders=self.total_orders, items=self.total_items)

    @staticmethod
    def elapsed_ms(start: datetime | None, end: datetime | None) -> int:
        """Milliseconds between two instants; 0 when either is missing."""
        if start is None or end is None:
            return 0
        return int((end - start).total_seconds() * 1000)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        return f"Lot {self.lot_code} ({self.status})"


class LotOrder(BaseModel):
    """One customer order inside a lot.

    Created in bulk with its lot and never edited afterwards except for the
    single PENDING -> SEALED transition.
    """

    lot = models.ForeignKey(
        "lots.Lot",
        on_delete=models.CASCADE,
        related_name="orders",
    )
    order_code = models.CharField(
        max_length=9, unique=True, validators=[order_code_validator]
    )
    cycle = models.CharField(max_length=64, blank=True, default="")
    approved_at = models.DateTimeField(null=True, blank=True, default=None)
    items = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20,
        choices=LotOrderStatus.choices,
        default=LotOrderStatus.PENDING,
    )
    sealed_code = models.CharField(
        max_length=10,
        null=True,
        blank=True,
        default=None,
        validators=[seal_code_validator],
    )
    sealed_at = models.DateTimeField(null=True, blank=True, default=None)

    class Meta:
        db_table = "lot_orders"
        ordering = ["order_code"]
        indexes = [
            models.Index(fields=["lot", "status"], name="lot_orders_lot_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=(
                    models.Q(
                        status=LotOrderStatus.PENDING,
                        sealed_code__isnull=True,
                        sealed_at__isnull=True,
                    )
                    | models.Q(
                        status=LotOrderStatus.SEALED,
                        sealed_code__isnull=False,
                        sealed_at__isnull=False,
                    )
                ),
                name="lot_orders_seal_consistency",
            ),
        ]

    @property
    def is_sealed(self) -> bool:
        return self.status == LotOrderStatus.SEALED

    def mark_sealed(self, sealed_code: str, sealed_at: datetime) -> None:
        """PENDING -> SEALED, exactly once."""
        if self.is_sealed:
            raise ValueError(f"Order {self.order_code} is already sealed.")
        self.status = LotOrderStatus.SEALED
        self.sealed_code = sealed_code
        self.sealed_at = sealed_at

    def __str__(self) -> str:
        return f"{self.order_code} ({self.status})"
