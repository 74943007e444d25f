"""Django ORM implementation of the Lot repository.

Satisfies ``ILotRepository`` using Django's QuerySet API.  Lot and orders
are inserted in one ``transaction.atomic()`` block with ``bulk_create`` so a
collision on any unique column leaves no partial lot behind.

Row locks (``select_for_update()``) only take effect inside the caller's
transaction; ``LotService`` opens it.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Q

from modules.lots.constants import LotOrderStatus, LotStatus
from modules.lots.models import Lot, LotOrder
from modules.lots.repositories.interfaces import ILotRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class LotDjangoRepository(ILotRepository):
    """Concrete Lot repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any], orders: List[Dict[str, Any]]) -> Lot:
        lot = Lot(**data)
        lot.save(force_insert=True)

        LotOrder.objects.bulk_create(
            [LotOrder(lot=lot, **order_data) for order_data in orders]
        )

        logger.info("lot.persisted", lot_code=lot.lot_code, order_count=len(orders))
        return lot

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Lot]:
        try:
            return Lot.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_code(self, lot_code: str) -> Optional[Lot]:
        return Lot.objects.filter(lot_code=lot_code).first()

    def get_for_update(self, lot_code: str) -> Optional[Lot]:
        return Lot.objects.select_for_update().filter(lot_code=lot_code).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Lot]:
        """List lots, newest first.

        Supported filter keys are any ``Lot`` field lookups, e.g.
        ``status``, ``work_mode``, ``created_by_uid``, ``created_at__range``.
        """
        queryset = Lot.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_ready_for_scan(self) -> List[Lot]:
        return list(
            Lot.objects.filter(status=LotStatus.READY_FOR_SCAN).order_by("end_at")
        )

    def list_by_scanner(self, uid: str) -> List[Lot]:
        return list(Lot.objects.filter(scanner_uid=uid))

    def list_by_user(self, uid: str) -> List[Lot]:
        return list(
            Lot.objects.filter(
                Q(created_by_uid=uid)
                | Q(separator_uid=uid)
                | Q(scanner_uid=uid)
                | Q(assigned_general_uid=uid)
                | Q(assigned_separator_uid=uid)
                | Q(assigned_scanner_uid=uid)
            )
        )

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    def save(self, entity: Lot) -> Lot:
        """Persist the lot, then publish the events it collected."""
        entity.save()
        events = entity.pop_domain_events()
        event_bus.publish_all(events)
        logger.debug("lot.saved", lot_code=entity.lot_code, event_count=len(events))
        return entity

    def delete(self, id: str) -> bool:
        lot = self.get_by_id(id)
        if lot is None:
            return False
        self.purge(lot)
        return True

    @transaction.atomic
    def purge(self, lot: Lot) -> int:
        orders_deleted, _ = LotOrder.objects.filter(lot_id=lot.id).delete()
        Lot.objects.filter(id=lot.id).delete()
        event_bus.publish_all(lot.pop_domain_events())
        logger.info("lot.purged", lot_code=lot.lot_code, orders_deleted=orders_deleted)
        return orders_deleted

    # ------------------------------------------------------------------
    # Orders
    # ------------------------------------------------------------------

    def list_orders(self, lot_code: str) -> List[LotOrder]:
        return list(LotOrder.objects.filter(lot__lot_code=lot_code).order_by("order_code"))

    def get_order_for_update(self, lot_code: str, order_code: str) -> Optional[LotOrder]:
        return (
            LotOrder.objects.select_for_update()
            .filter(lot__lot_code=lot_code, order_code=order_code)
            .first()
        )

    def save_order(self, order: LotOrder) -> LotOrder:
        order.save()
        return order

    def count_pending_orders(self, lot_code: str) -> int:
        return LotOrder.objects.filter(
            lot__lot_code=lot_code, status=LotOrderStatus.PENDING
        ).count()

    def find_existing_order_codes(self, order_codes: Iterable[str]) -> Dict[str, str]:
        rows = LotOrder.objects.filter(order_code__in=list(order_codes)).values_list(
            "order_code", "lot__lot_code"
        )
        return {order_code: lot_code for order_code, lot_code in rows}
