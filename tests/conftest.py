from __future__ import annotations

from typing import Iterable, Optional

import pytest

from modules.accounts.constants import UserRole
from modules.accounts.dtos import WorkerIdentityDTO
from modules.accounts.repositories import AppUserDjangoRepository
from modules.accounts.services import UserProgressService
from modules.lots.constants import WorkMode
from modules.lots.dtos import CreateLotDTO, ImportedOrderDTO
from modules.lots.repositories import LotDjangoRepository
from modules.lots.services import LotService
from modules.scoring.repositories import PickingRulesDjangoRepository
from modules.scoring.services import PickingRulesService
from modules.seals.registry import SealRegistry
from modules.single_orders.repositories import SingleOrderDjangoRepository
from modules.single_orders.services import SingleOrderService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


# ---------------------------------------------------------------------------
# Identities (as handed over by the identity provider)
# ---------------------------------------------------------------------------


@pytest.fixture()
def worker() -> WorkerIdentityDTO:
    return WorkerIdentityDTO(uid="worker-001", name="Bruno Lima")


@pytest.fixture()
def scanner() -> WorkerIdentityDTO:
    return WorkerIdentityDTO(uid="worker-002", name="Carla Mendes")


@pytest.fixture()
def admin() -> WorkerIdentityDTO:
    return WorkerIdentityDTO(
        uid="admin-001", name="Ana Souza", role=UserRole.ADMIN, email="ana@example.com"
    )


@pytest.fixture()
def users(progress_service, worker, scanner, admin):
    """Mirror the three identities as AppUser rows."""
    return {
        identity.uid: progress_service.sync_identity(identity)
        for identity in (worker, scanner, admin)
    }


# ---------------------------------------------------------------------------
# Services wired with the Django repositories
# ---------------------------------------------------------------------------


@pytest.fixture()
def progress_service() -> UserProgressService:
    return UserProgressService(user_repository=AppUserDjangoRepository())


@pytest.fixture()
def rules_service() -> PickingRulesService:
    return PickingRulesService(rules_repository=PickingRulesDjangoRepository())


@pytest.fixture()
def seal_registry() -> SealRegistry:
    return SealRegistry()


@pytest.fixture()
def lot_service(seal_registry, rules_service, progress_service) -> LotService:
    return LotService(
        lot_repository=LotDjangoRepository(),
        single_order_repository=SingleOrderDjangoRepository(),
        seal_registry=seal_registry,
        rules_service=rules_service,
        progress_service=progress_service,
    )


@pytest.fixture()
def single_order_service(seal_registry, rules_service, progress_service) -> SingleOrderService:
    return SingleOrderService(
        single_order_repository=SingleOrderDjangoRepository(),
        lot_repository=LotDjangoRepository(),
        seal_registry=seal_registry,
        rules_service=rules_service,
        progress_service=progress_service,
    )


# ---------------------------------------------------------------------------
# Builders
# ---------------------------------------------------------------------------


def make_orders(first_code: int, items: Iterable[int], cycle: str = "C1"):
    """Consecutive 9-digit order codes starting at ``first_code``."""
    return [
        ImportedOrderDTO(order_code=f"{first_code + i:09d}", cycle=cycle, items=count)
        for i, count in enumerate(items)
    ]


@pytest.fixture()
def imported_orders():
    return make_orders


@pytest.fixture()
def lot_dto(worker):
    def _build(
        lot_code: str = "10000001",
        items: Iterable[int] = (10, 10, 10, 10, 10),
        first_order_code: int = 100000001,
        work_mode: WorkMode = WorkMode.GERAL,
        creator: Optional[WorkerIdentityDTO] = None,
    ) -> CreateLotDTO:
        return CreateLotDTO(
            lot_code=lot_code,
            orders=make_orders(first_order_code, items),
            creator=creator or worker,
            work_mode=work_mode,
        )

    return _build
