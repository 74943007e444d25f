"""Seal registry: reserve a seal code exactly once, system-wide.

``try_reserve`` must run inside the caller's ``transaction.atomic()`` block,
the same one that flips the order to sealed.  The existence check alone
cannot stop two concurrent reservations of a fresh code (there is no row to
lock yet), so the insert runs in a savepoint and the unique constraint on
``sealed_code`` decides the race; the loser gets the winner's order code
back instead of an exception.
"""

from __future__ import annotations

from typing import Optional
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction
from pydantic import BaseModel, ConfigDict

from modules.core.validators import ensure_seal_code
from modules.seals.models import SealedCode

logger = structlog.get_logger(__name__)


class SealReservation(BaseModel):
    model_config = ConfigDict(frozen=True)

    ok: bool
    conflicting_order_code: Optional[str] = None


class SealRegistry:
    """Guards the global uniqueness of seal codes."""

    def find(self, sealed_code: str) -> Optional[SealedCode]:
        return SealedCode.objects.filter(sealed_code=sealed_code).first()

    def try_reserve(
        self,
        sealed_code: str,
        order_code: str,
        lot_code: Optional[str] = None,
        single_order_id: Optional[UUID] = None,
    ) -> SealReservation:
        ensure_seal_code(sealed_code)
        if (lot_code is None) == (single_order_id is None):
            raise ValueError("A seal belongs to exactly one lot or one single order.")

        existing = self.find(sealed_code)
        if existing is not None:
            return SealReservation(ok=False, conflicting_order_code=existing.order_code)

        try:
            with transaction.atomic():
                SealedCode.objects.create(
                    sealed_code=sealed_code,
                    order_code=order_code,
                    lot_code=lot_code,
                    single_order_id=single_order_id,
                )
        except IntegrityError:
            winner = self.find(sealed_code)
            logger.warning(
                "seal.reservation_race_lost",
                sealed_code=sealed_code,
                order_code=order_code,
            )
            return SealReservation(
                ok=False,
                conflicting_order_code=winner.order_code if winner else None,
            )

        logger.info(
            "seal.reserved",
            sealed_code=sealed_code,
            order_code=order_code,
            lot_code=lot_code,
            single_order_id=str(single_order_id) if single_order_id else None,
        )
        return SealReservation(ok=True)

    def release_for_lot(self, lot_code: str) -> int:
        """Delete every seal held by the lot's orders; the codes become reusable."""
        released, _ = SealedCode.objects.filter(lot_code=lot_code).delete()
        logger.info("seal.released_for_lot", lot_code=lot_code, released=released)
        return released
