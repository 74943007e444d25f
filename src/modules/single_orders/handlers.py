"""Event handlers for Single Orders domain events."""

from __future__ import annotations

import structlog

from modules.single_orders.events import (
    SingleOrderCreated,
    SingleOrderSealed,
    SingleOrderStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class SingleOrderCreatedHandler(IEventHandler[SingleOrderCreated]):
    def handle(self, event: SingleOrderCreated) -> None:
        logger.info(
            "single_order.event.created",
            single_order_id=event.aggregate_id,
            order_code=event.order_code,
        )


class SingleOrderStatusChangedHandler(IEventHandler[SingleOrderStatusChanged]):
    def handle(self, event: SingleOrderStatusChanged) -> None:
        logger.info(
            "single_order.event.status_changed",
            single_order_id=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )


class SingleOrderSealedHandler(IEventHandler[SingleOrderSealed]):
    def handle(self, event: SingleOrderSealed) -> None:
        logger.info(
            "single_order.event.sealed",
            single_order_id=event.aggregate_id,
            order_code=event.order_code,
            xp_earned=event.xp_earned,
        )


single_order_created_handler = SingleOrderCreatedHandler()
single_order_status_changed_handler = SingleOrderStatusChangedHandler()
single_order_sealed_handler = SingleOrderSealedHandler()
