"""Event handlers for Lots domain events."""

from __future__ import annotations

import structlog

from modules.lots.events import (
    LotCompleted,
    LotCreated,
    LotDeleted,
    LotOrderSealed,
    LotStatusChanged,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class LotCreatedHandler(IEventHandler[LotCreated]):
    def handle(self, event: LotCreated) -> None:
        logger.info(
            "lot.event.created",
            lot_code=event.aggregate_id,
            order_count=event.order_count,
            item_count=event.item_count,
        )


class LotStatusChangedHandler(IEventHandler[LotStatusChanged]):
    def handle(self, event: LotStatusChanged) -> None:
        logger.info(
            "lot.event.status_changed",
            lot_code=event.aggregate_id,
            old_status=event.old_status,
            new_status=event.new_status,
        )


class LotOrderSealedHandler(IEventHandler[LotOrderSealed]):
    def handle(self, event: LotOrderSealed) -> None:
        logger.info(
            "lot.event.order_sealed",
            lot_code=event.aggregate_id,
            order_code=event.order_code,
            sealed_code=event.sealed_code,
        )


class LotCompletedHandler(IEventHandler[LotCompleted]):
    def handle(self, event: LotCompleted) -> None:
        logger.info(
            "lot.event.completed",
            lot_code=event.aggregate_id,
            xp_earned=event.xp_earned,
            separator_uid=event.separator_uid,
            scanner_uid=event.scanner_uid,
        )


class LotDeletedHandler(IEventHandler[LotDeleted]):
    def handle(self, event: LotDeleted) -> None:
        logger.info(
            "lot.event.deleted",
            lot_code=event.aggregate_id,
            released_seals=event.released_seals,
        )


lot_created_handler = LotCreatedHandler()
lot_status_changed_handler = LotStatusChangedHandler()
lot_order_sealed_handler = LotOrderSealedHandler()
lot_completed_handler = LotCompletedHandler()
lot_deleted_handler = LotDeletedHandler()
