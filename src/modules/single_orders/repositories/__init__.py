"""SingleOrder repositories package."""

from modules.single_orders.repositories.django_repository import (
    SingleOrderDjangoRepository,
)
from modules.single_orders.repositories.interfaces import ISingleOrderRepository

__all__ = ["ISingleOrderRepository", "SingleOrderDjangoRepository"]
