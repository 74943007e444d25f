from django.apps import AppConfig


class LotsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.lots"
    label = "lots"

    def ready(self) -> None:
        from modules.lots.events import (
            LotCompleted,
            LotCreated,
            LotDeleted,
            LotOrderSealed,
            LotStatusChanged,
        )
        from modules.lots.handlers import (
            lot_completed_handler,
            lot_created_handler,
            lot_deleted_handler,
            lot_order_sealed_handler,
            lot_status_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(LotCreated, lot_created_handler)
        event_bus.subscribe(LotStatusChanged, lot_status_changed_handler)
        event_bus.subscribe(LotOrderSealed, lot_order_sealed_handler)
        event_bus.subscribe(LotCompleted, lot_completed_handler)
        event_bus.subscribe(LotDeleted, lot_deleted_handler)
