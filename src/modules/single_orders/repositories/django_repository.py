"""Django ORM implementation of the SingleOrder repository."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Set

import structlog
from django.core.exceptions import ValidationError

from modules.single_orders.models import SingleOrder
from modules.single_orders.repositories.interfaces import ISingleOrderRepository
from shared.infrastructure.bus import event_bus

logger = structlog.get_logger(__name__)


class SingleOrderDjangoRepository(ISingleOrderRepository):
    """Concrete SingleOrder repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[SingleOrder]:
        """Returns ``None`` for non-existent or malformed ids."""
        try:
            return SingleOrder.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[SingleOrder]:
        try:
            return SingleOrder.objects.select_for_update().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[SingleOrder]:
        queryset = SingleOrder.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def list_by_user(self, uid: str) -> List[SingleOrder]:
        return list(SingleOrder.objects.filter(created_by_uid=uid).order_by("-created_at"))

    def save(self, entity: SingleOrder) -> SingleOrder:
        """Persist the order, then publish the events it collected."""
        entity.save()
        events = entity.pop_domain_events()
        event_bus.publish_all(events)
        logger.debug(
            "single_order.saved",
            single_order_id=str(entity.id),
            event_count=len(events),
        )
        return entity

    def delete(self, id: str) -> bool:
        try:
            deleted, _ = SingleOrder.objects.filter(id=id).delete()
        except (ValueError, ValidationError):
            return False
        return deleted > 0

    def find_existing_order_codes(self, order_codes: Iterable[str]) -> Set[str]:
        return set(
            SingleOrder.objects.filter(order_code__in=list(order_codes)).values_list(
                "order_code", flat=True
            )
        )
