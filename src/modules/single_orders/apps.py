from django.apps import AppConfig


class SingleOrdersConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.single_orders"
    label = "single_orders"

    def ready(self) -> None:
        from modules.single_orders.events import (
            SingleOrderCreated,
            SingleOrderSealed,
            SingleOrderStatusChanged,
        )
        from modules.single_orders.handlers import (
            single_order_created_handler,
            single_order_sealed_handler,
            single_order_status_changed_handler,
        )
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(SingleOrderCreated, single_order_created_handler)
        event_bus.subscribe(SingleOrderStatusChanged, single_order_status_changed_handler)
        event_bus.subscribe(SingleOrderSealed, single_order_sealed_handler)
