"""Single-order service layer.

Same building blocks as ``LotService`` with a shorter, strictly linear
state machine and a single worker who receives all of the XP.  Sealing
shares the ``SealRegistry`` namespace with lot orders.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, List

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.core.validators import is_valid_seal_code
from modules.lots.exceptions import DuplicateOrderCode
from modules.scoring.engine import compute_single_order_xp
from modules.seals.dtos import SealErrorCode, SealResult
from modules.single_orders.constants import SingleOrderStatus
from modules.single_orders.events import (
    SingleOrderCreated,
    SingleOrderSealed,
    SingleOrderStatusChanged,
)
from modules.single_orders.exceptions import (
    InvalidSingleOrderStatus,
    SingleOrderNotFound,
)
from modules.single_orders.models import SingleOrder

if TYPE_CHECKING:
    from modules.accounts.services import UserProgressService
    from modules.lots.repositories.interfaces import ILotRepository
    from modules.scoring.services import PickingRulesService
    from modules.seals.registry import SealRegistry
    from modules.single_orders.dtos import CreateSingleOrderDTO
    from modules.single_orders.repositories.interfaces import ISingleOrderRepository

logger = structlog.get_logger(__name__)


def _elapsed_ms(start, end) -> int:
    if start is None or end is None:
        return 0
    return int((end - start).total_seconds() * 1000)


class SingleOrderService:
    def __init__(
        self,
        single_order_repository: ISingleOrderRepository,
        lot_repository: ILotRepository,
        seal_registry: SealRegistry,
        rules_service: PickingRulesService,
        progress_service: UserProgressService,
    ) -> None:
        self._repo = single_order_repository
        self._lot_repo = lot_repository
        self._seals = seal_registry
        self._rules = rules_service
        self._progress = progress_service

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_single_order(self, dto: CreateSingleOrderDTO) -> SingleOrder:
        """Create a DRAFT single order.

        Raises:
            DuplicateOrderCode: the order code is used by a lot order or
                another single order.
        """
        code = dto.order_code
        owner_lot = self._lot_repo.find_existing_order_codes([code]).get(code)
        if owner_lot is not None:
            raise DuplicateOrderCode(f"Order {code} already exists in lot {owner_lot}.")
        if self._repo.find_existing_order_codes([code]):
            raise DuplicateOrderCode(f"Order {code} already exists as a single order.")

        order = SingleOrder(
            order_code=code,
            items=dto.items,
            created_by_uid=dto.creator.uid,
            created_by_name=dto.creator.name,
        )
        try:
            with transaction.atomic():
                order.save(force_insert=True)
        except IntegrityError:
            raise DuplicateOrderCode(f"Order {code} already exists as a single order.")

        order.add_domain_event(
            SingleOrderCreated(aggregate_id=str(order.id), order_code=code, items=order.items)
        )
        self._repo.save(order)
        logger.info(
            "single_order.created",
            single_order_id=str(order.id),
            order_code=code,
            uid=dto.creator.uid,
        )
        return order

    @transaction.atomic
    def start_separation(self, single_order_id: str) -> SingleOrder:
        order = self._lock(single_order_id)
        self._transition(order, SingleOrderStatus.SEPARATING)
        order.separation_start_at = timezone.now()
        return self._repo.save(order)

    @transaction.atomic
    def end_separation(self, single_order_id: str) -> SingleOrder:
        order = self._lock(single_order_id)
        self._transition(order, SingleOrderStatus.READY_TO_SCAN)
        order.separation_end_at = timezone.now()
        order.separation_duration_ms = _elapsed_ms(
            order.separation_start_at, order.separation_end_at
        )
        return self._repo.save(order)

    @transaction.atomic
    def start_scanning(self, single_order_id: str) -> SingleOrder:
        order = self._lock(single_order_id)
        self._transition(order, SingleOrderStatus.SCANNING)
        order.scan_start_at = timezone.now()
        return self._repo.save(order)

    def seal_single_order(self, single_order_id: str, sealed_code: str) -> SealResult:
        """Seal a SCANNING order, finishing it and awarding its XP.

        Total duration is separation plus scan time.  Failures come back in
        the ``SealResult``; nothing is raised for business errors.
        """
        log = logger.bind(single_order_id=str(single_order_id), sealed_code=sealed_code)

        if not is_valid_seal_code(sealed_code):
            log.info("single_order.seal_rejected", reason=SealErrorCode.INVALID_FORMAT.value)
            return SealResult.fail(
                SealErrorCode.INVALID_FORMAT, "Seal code must have exactly 10 digits."
            )

        with transaction.atomic():
            result, order = self._seal_locked(single_order_id, sealed_code)

        if not result.success:
            log.info("single_order.seal_rejected", reason=result.error_code.value)
            return result

        log.info(
            "single_order.sealed",
            order_code=order.order_code,
            xp_earned=order.xp_earned,
            total_duration_ms=order.total_duration_ms,
        )
        self._progress.award(order.created_by_uid, order.xp_earned)
        return result

    def _seal_locked(self, single_order_id: str, sealed_code: str):
        order = self._repo.get_for_update(single_order_id)
        if order is None:
            return (
                SealResult.fail(
                    SealErrorCode.ORDER_NOT_FOUND,
                    f"Single order {single_order_id} not found.",
                ),
                None,
            )
        existing = self._seals.find(sealed_code)
        if existing is not None:
            return self._seal_conflict(sealed_code, existing.order_code), order
        if order.sealed_code:
            return (
                SealResult.fail(
                    SealErrorCode.ALREADY_SEALED,
                    f"Order {order.order_code} is already sealed with {order.sealed_code}.",
                ),
                order,
            )
        if order.status != SingleOrderStatus.SCANNING:
            return (
                SealResult.fail(
                    SealErrorCode.INVALID_STATE,
                    f"Order {order.order_code} is {order.status}; it must be SCANNING.",
                ),
                order,
            )

        reservation = self._seals.try_reserve(
            sealed_code, order.order_code, single_order_id=order.id
        )
        if not reservation.ok:
            return self._seal_conflict(sealed_code, reservation.conflicting_order_code), order

        now = timezone.now()
        order.scan_end_at = now
        order.scan_duration_ms = _elapsed_ms(order.scan_start_at, now)
        order.total_duration_ms = (order.separation_duration_ms or 0) + order.scan_duration_ms
        order.sealed_code = sealed_code
        order.sealed_at = now

        rules = self._rules.get_rules()
        xp = compute_single_order_xp(order.items, order.total_duration_ms, rules)
        order.xp_earned = xp.total

        self._transition(order, SingleOrderStatus.DONE)
        order.add_domain_event(
            SingleOrderSealed(
                aggregate_id=str(order.id),
                order_code=order.order_code,
                sealed_code=sealed_code,
                xp_earned=xp.total,
            )
        )
        self._repo.save(order)
        return SealResult.ok(), order

    @staticmethod
    def _seal_conflict(sealed_code: str, owner_order_code) -> SealResult:
        return SealResult.fail(
            SealErrorCode.SEAL_CONFLICT,
            f"Seal {sealed_code} is already used by order {owner_order_code}.",
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_single_order(self, single_order_id: str) -> SingleOrder:
        order = self._repo.get_by_id(single_order_id)
        if order is None:
            raise SingleOrderNotFound(f"Single order {single_order_id} not found.")
        return order

    def list_single_orders_by_user(self, uid: str) -> List[SingleOrder]:
        """Newest first."""
        return self._repo.list_by_user(uid)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, single_order_id: str) -> SingleOrder:
        order = self._repo.get_for_update(single_order_id)
        if order is None:
            raise SingleOrderNotFound(f"Single order {single_order_id} not found.")
        return order

    def _transition(self, order: SingleOrder, new_status: str) -> None:
        if not order.can_transition_to(new_status):
            logger.warning(
                "single_order.invalid_transition",
                single_order_id=str(order.id),
                current_status=order.status,
                new_status=new_status,
            )
            raise InvalidSingleOrderStatus(
                f"Cannot transition order {order.order_code} from {order.status} "
                f"to {new_status}."
            )
        old_status = order.status
        order.status = new_status
        order.add_domain_event(
            SingleOrderStatusChanged(
                aggregate_id=str(order.id),
                old_status=str(old_status),
                new_status=str(new_status),
            )
        )
