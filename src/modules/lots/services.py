"""Lot service layer (Use Cases).

Drives a lot through its lifecycle and hands out XP at completion.  Every
transition is validated against ``VALID_TRANSITIONS`` on a row-locked lot;
a call in the wrong state raises ``InvalidLotStatus`` instead of being
ignored.

Business rules enforced:
- Lot codes are unique; order codes are unique across lots and single
  orders, checked before any write (no partial lot).
- Unified mode (GERAL) closes straight into CLOSING; split modes
  (SEPARADOR/BIPADOR) hand off through READY_FOR_SCAN, stopping the
  separator's clock at hand-off.
- A seal code is used at most once system-wide (``SealRegistry``).
- A lot completes only when every order is sealed.
- SEPARADOR lots with distinct separator and scanner split XP 60/40, each
  share rounded on its own; everything else pays 100% to one worker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import IntegrityError, transaction
from django.utils import timezone

from modules.core.validators import is_valid_seal_code
from modules.lots.constants import (
    CREATOR_SEPARATES_MODES,
    AssignmentType,
    LotStatus,
)
from modules.lots.events import (
    LotCompleted,
    LotCreated,
    LotDeleted,
    LotOrderSealed,
    LotStatusChanged,
)
from modules.lots.exceptions import (
    DuplicateLotCode,
    DuplicateOrderCode,
    InvalidLotStatus,
    LotAssignmentMismatch,
    LotNotFound,
    OrdersPendingSeal,
    WorkModeMismatch,
)
from modules.scoring.engine import compute_lot_xp, split_lot_xp
from modules.seals.dtos import SealErrorCode, SealResult
from shared.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from modules.accounts.dtos import WorkerIdentityDTO
    from modules.accounts.services import UserProgressService
    from modules.lots.dtos import CreateAdminLotDTO, CreateLotDTO, _LotBatchDTO
    from modules.lots.models import Lot, LotOrder
    from modules.lots.repositories.interfaces import ILotRepository
    from modules.scoring.services import PickingRulesService
    from modules.seals.registry import SealRegistry
    from modules.single_orders.repositories.interfaces import ISingleOrderRepository

logger = structlog.get_logger(__name__)


class LotService:
    """Application service for Lot use-cases.

    Receives its collaborators via constructor injection (DIP).
    """

    def __init__(
        self,
        lot_repository: ILotRepository,
        single_order_repository: ISingleOrderRepository,
        seal_registry: SealRegistry,
        rules_service: PickingRulesService,
        progress_service: UserProgressService,
    ) -> None:
        self._lot_repo = lot_repository
        self._single_order_repo = single_order_repository
        self._seals = seal_registry
        self._rules = rules_service
        self._progress = progress_service

    # ------------------------------------------------------------------
    # Creation
    # ------------------------------------------------------------------

    def create_lot(self, dto: CreateLotDTO) -> Lot:
        """Import a lot for the acting worker.  Starts in DRAFT.

        In GERAL and SEPARADOR mode the creator is pre-assigned as separator.

        Raises:
            DuplicateLotCode: a lot with the same code exists.
            DuplicateOrderCode: an order code is already used anywhere.
        """
        creator = dto.creator
        data: Dict[str, Any] = {
            "work_mode": dto.work_mode,
            "created_by_uid": creator.uid,
            "created_by_name": creator.name,
        }
        if dto.work_mode in CREATOR_SEPARATES_MODES:
            data["separator_uid"] = creator.uid
            data["separator_name"] = creator.name
        return self._create(dto, data)

    def create_admin_lot(self, dto: CreateAdminLotDTO) -> Lot:
        """Admin import, optionally assigning the lot to specific workers.

        Raises:
            PermissionDenied: the acting user is not an admin.
            DuplicateLotCode: a lot with the same code exists.
            DuplicateOrderCode: an order code is already used anywhere.
        """
        if not dto.admin.is_admin:
            logger.warning("lot.admin_create_denied", uid=dto.admin.uid)
            raise PermissionDenied("Only admins can create assigned lots.")

        data: Dict[str, Any] = {
            "work_mode": dto.work_mode,
            "created_by_uid": dto.admin.uid,
            "created_by_name": dto.admin.name,
            "is_admin_created": True,
            "assignment_type": dto.assignment_type,
        }
        if dto.assignment_type == AssignmentType.ASSIGNED_GENERAL:
            worker = dto.assigned_general
            data.update(
                assigned_general_uid=worker.uid,
                assigned_general_name=worker.name,
                separator_uid=worker.uid,
                separator_name=worker.name,
            )
        elif dto.assignment_type == AssignmentType.ASSIGNED_SEPARATED:
            separator, scanner = dto.assigned_separator, dto.assigned_scanner
            data.update(
                assigned_separator_uid=separator.uid,
                assigned_separator_name=separator.name,
                assigned_scanner_uid=scanner.uid,
                assigned_scanner_name=scanner.name,
                separator_uid=separator.uid,
                separator_name=separator.name,
            )
        return self._create(dto, data)

    @transaction.atomic
    def _create(self, dto: _LotBatchDTO, data: Dict[str, Any]) -> Lot:
        log = logger.bind(lot_code=dto.lot_code, order_count=len(dto.orders))

        if self._lot_repo.get_by_code(dto.lot_code) is not None:
            log.warning("lot.duplicate_code")
            raise DuplicateLotCode(f"Lot {dto.lot_code} already exists.")
        self._ensure_order_codes_unused(dto.order_codes, log)

        orders = [
            {
                "order_code": order.order_code,
                "cycle": order.cycle,
                "approved_at": order.approved_at,
                "items": order.items,
            }
            for order in dto.orders
        ]
        data.update(
            lot_code=dto.lot_code,
            cycle=dto.cycle,
            total_orders=len(orders),
            total_items=dto.total_items,
        )

        try:
            lot = self._lot_repo.create(data, orders)
        except IntegrityError:
            # Lost a race against a concurrent import.
            if self._lot_repo.get_by_code(dto.lot_code) is not None:
                log.warning("lot.duplicate_code_race")
                raise DuplicateLotCode(f"Lot {dto.lot_code} already exists.")
            log.warning("lot.duplicate_order_code_race")
            raise DuplicateOrderCode(
                f"An order of lot {dto.lot_code} was imported concurrently."
            )

        lot.add_domain_event(
            LotCreated(
                aggregate_id=lot.lot_code,
                order_count=lot.total_orders,
                item_count=lot.total_items,
            )
        )
        self._lot_repo.save(lot)
        log.info("lot.created", work_mode=lot.work_mode, total_items=lot.total_items)
        return lot

    def _ensure_order_codes_unused(self, order_codes: List[str], log) -> None:
        in_lots = self._lot_repo.find_existing_order_codes(order_codes)
        in_single_orders = self._single_order_repo.find_existing_order_codes(order_codes)
        for code in order_codes:
            if code in in_lots:
                log.warning("lot.duplicate_order_code", order_code=code, owner=in_lots[code])
                raise DuplicateOrderCode(
                    f"Order {code} already exists in lot {in_lots[code]}."
                )
            if code in in_single_orders:
                log.warning("lot.duplicate_order_code", order_code=code, owner="single")
                raise DuplicateOrderCode(f"Order {code} already exists as a single order.")

    # ------------------------------------------------------------------
    # Lifecycle transitions
    # ------------------------------------------------------------------

    @transaction.atomic
    def start_lot(self, lot_code: str, worker: Optional[WorkerIdentityDTO] = None) -> Lot:
        """DRAFT -> IN_PROGRESS; starts the separation clock.

        ``worker`` becomes the separator of a lot that has none yet (OPEN
        admin lots and BIPADOR imports).
        """
        lot = self._lock(lot_code)
        self._transition(lot, LotStatus.IN_PROGRESS)
        lot.start_at = timezone.now()
        if worker is not None and not lot.separator_uid:
            lot.separator_uid = worker.uid
            lot.separator_name = worker.name
        return self._lot_repo.save(lot)

    @transaction.atomic
    def close_lot(self, lot_code: str) -> Lot:
        """Unified mode: IN_PROGRESS -> CLOSING.

        The separation duration is computed later, at completion.

        Raises:
            WorkModeMismatch: the lot runs in a split mode.
        """
        lot = self._lock(lot_code)
        if lot.is_split_mode:
            raise WorkModeMismatch(
                f"Lot {lot_code} runs in {lot.work_mode} mode; "
                "use close_lot_for_separator."
            )
        self._require_status(lot, LotStatus.IN_PROGRESS, "close")
        self._transition(lot, LotStatus.CLOSING)
        lot.end_at = timezone.now()
        return self._lot_repo.save(lot)

    @transaction.atomic
    def close_lot_for_separator(self, lot_code: str) -> Lot:
        """Split mode: IN_PROGRESS -> READY_FOR_SCAN.

        The separator's clock stops here, regardless of how long the lot
        then waits for a scanner.

        Raises:
            WorkModeMismatch: the lot runs in unified (GERAL) mode.
        """
        lot = self._lock(lot_code)
        if not lot.is_split_mode:
            raise WorkModeMismatch(
                f"Lot {lot_code} runs in {lot.work_mode} mode; use close_lot."
            )
        self._transition(lot, LotStatus.READY_FOR_SCAN)
        lot.end_at = timezone.now()
        lot.duration_ms = lot.elapsed_ms(lot.start_at, lot.end_at)
        return self._lot_repo.save(lot)

    @transaction.atomic
    def claim_lot_for_scanning(self, lot_code: str, scanner: WorkerIdentityDTO) -> Lot:
        """READY_FOR_SCAN -> CLOSING, recording the claiming scanner.

        The lot row is locked, so of two concurrent claims the second one
        sees CLOSING and fails.

        Raises:
            LotAssignmentMismatch: an ASSIGNED_SEPARATED lot was claimed by
                someone other than its assigned scanner.
        """
        lot = self._lock(lot_code)
        self._require_status(lot, LotStatus.READY_FOR_SCAN, "claim")
        if (
            lot.assignment_type == AssignmentType.ASSIGNED_SEPARATED
            and lot.assigned_scanner_uid
            and lot.assigned_scanner_uid != scanner.uid
        ):
            logger.warning(
                "lot.claim_denied",
                lot_code=lot_code,
                uid=scanner.uid,
                assigned_scanner_uid=lot.assigned_scanner_uid,
            )
            raise LotAssignmentMismatch(
                f"Lot {lot_code} is assigned to scanner {lot.assigned_scanner_name}."
            )
        self._transition(lot, LotStatus.CLOSING)
        lot.scanner_uid = scanner.uid
        lot.scanner_name = scanner.name
        logger.info("lot.claimed", lot_code=lot_code, scanner_uid=scanner.uid)
        return self._lot_repo.save(lot)

    @transaction.atomic
    def start_scanning(self, lot_code: str) -> Lot:
        """Record the start of the scan phase (lot must be CLOSING).

        Repeated calls keep the first timestamp.
        """
        lot = self._lock(lot_code)
        if lot.status != LotStatus.CLOSING:
            raise InvalidLotStatus(
                f"Cannot start scanning lot {lot_code} in status {lot.status}."
            )
        if lot.scan_start_at is None:
            lot.scan_start_at = timezone.now()
            self._lot_repo.save(lot)
            logger.info("lot.scanning_started", lot_code=lot_code)
        return lot

    def seal_order(self, lot_code: str, order_code: str, sealed_code: str) -> SealResult:
        """Seal one order of a CLOSING lot.

        Never raises for business failures: the outcome is reported in the
        returned ``SealResult`` so a scanning session survives a bad scan.
        """
        log = logger.bind(lot_code=lot_code, order_code=order_code, sealed_code=sealed_code)

        if not is_valid_seal_code(sealed_code):
            log.info("lot.seal_rejected", reason=SealErrorCode.INVALID_FORMAT.value)
            return SealResult.fail(
                SealErrorCode.INVALID_FORMAT, "Seal code must have exactly 10 digits."
            )

        with transaction.atomic():
            result = self._seal_locked(lot_code, order_code, sealed_code)

        if result.success:
            log.info("lot.order_sealed")
        else:
            log.info("lot.seal_rejected", reason=result.error_code.value)
        return result

    def _seal_locked(self, lot_code: str, order_code: str, sealed_code: str) -> SealResult:
        lot = self._lot_repo.get_for_update(lot_code)
        if lot is None:
            return SealResult.fail(SealErrorCode.LOT_NOT_FOUND, f"Lot {lot_code} not found.")
        if lot.status != LotStatus.CLOSING:
            return SealResult.fail(
                SealErrorCode.INVALID_STATE,
                f"Lot {lot_code} is {lot.status}; orders can only be sealed while CLOSING.",
            )

        existing = self._seals.find(sealed_code)
        if existing is not None:
            return self._seal_conflict(sealed_code, existing.order_code)

        order = self._lot_repo.get_order_for_update(lot_code, order_code)
        if order is None:
            return SealResult.fail(
                SealErrorCode.ORDER_NOT_FOUND,
                f"Order {order_code} does not belong to lot {lot_code}.",
            )
        if order.is_sealed:
            return SealResult.fail(
                SealErrorCode.ALREADY_SEALED,
                f"Order {order_code} is already sealed with {order.sealed_code}.",
            )

        reservation = self._seals.try_reserve(sealed_code, order_code, lot_code=lot_code)
        if not reservation.ok:
            return self._seal_conflict(sealed_code, reservation.conflicting_order_code)

        order.mark_sealed(sealed_code, timezone.now())
        self._lot_repo.save_order(order)
        lot.add_domain_event(
            LotOrderSealed(aggregate_id=lot_code, order_code=order_code, sealed_code=sealed_code)
        )
        self._lot_repo.save(lot)
        return SealResult.ok()

    @staticmethod
    def _seal_conflict(sealed_code: str, owner_order_code: Optional[str]) -> SealResult:
        return SealResult.fail(
            SealErrorCode.SEAL_CONFLICT,
            f"Seal {sealed_code} is already used by order {owner_order_code}.",
        )

    def check_all_sealed(self, lot_code: str) -> bool:
        self._get(lot_code)
        return self._lot_repo.count_pending_orders(lot_code) == 0

    def complete_lot(self, lot_code: str) -> Lot:
        """CLOSING -> DONE, computing durations and awarding XP.

        Rules are read at this moment, not at lot creation.  XP and streak
        are posted after the lot transaction commits.

        Raises:
            InvalidLotStatus: the lot is not CLOSING.
            OrdersPendingSeal: at least one order is still pending.
        """
        with transaction.atomic():
            lot = self._lock(lot_code)
            if not lot.can_transition_to(LotStatus.DONE):
                raise InvalidLotStatus(
                    f"Cannot complete lot {lot_code} in status {lot.status}."
                )
            pending = self._lot_repo.count_pending_orders(lot_code)
            if pending:
                logger.warning("lot.completion_blocked", lot_code=lot_code, pending=pending)
                raise OrdersPendingSeal(
                    f"Lot {lot_code} still has {pending} order(s) pending seal."
                )

            now = timezone.now()
            if lot.duration_ms is None:
                lot.duration_ms = lot.elapsed_ms(lot.start_at, lot.end_at)
            lot.scan_end_at = now
            lot.scan_duration_ms = lot.elapsed_ms(lot.scan_start_at or lot.end_at, now)
            lot.total_duration_ms = lot.elapsed_ms(lot.end_at, now)

            rules = self._rules.get_rules()
            xp = compute_lot_xp(lot.totals, lot.duration_ms, rules)
            lot.xp_earned = xp.total

            awards = self._distribute_xp(lot, xp.total)

            self._transition(lot, LotStatus.DONE)
            lot.add_domain_event(
                LotCompleted(
                    aggregate_id=lot_code,
                    xp_earned=xp.total,
                    separator_uid=lot.separator_uid or None,
                    scanner_uid=lot.scanner_uid or None,
                )
            )
            self._lot_repo.save(lot)

        logger.info(
            "lot.completed",
            lot_code=lot_code,
            xp_earned=xp.total,
            bonus_percent=xp.bonus_percent,
            speed=xp.speed,
            duration_ms=lot.duration_ms,
        )
        for uid, amount in awards:
            self._progress.award(uid, amount)
        return lot

    def _distribute_xp(self, lot: Lot, total: int) -> List[tuple[str, int]]:
        """Fill the per-role XP fields and return who gets what."""
        if lot.splits_xp:
            separator_xp, scanner_xp = split_lot_xp(total)
            lot.separator_xp_earned = separator_xp
            lot.scanner_xp_earned = scanner_xp
            return [(lot.separator_uid, separator_xp), (lot.scanner_uid, scanner_xp)]
        return [(lot.xp_owner_uid, total)]

    @transaction.atomic
    def delete_lot(self, lot_code: str) -> None:
        """Admin purge, allowed in any state.

        Deletes the orders, releases their seal codes for reuse and deletes
        the lot.
        """
        lot = self._lock(lot_code)
        released = self._seals.release_for_lot(lot_code)
        lot.add_domain_event(LotDeleted(aggregate_id=lot_code, released_seals=released))
        orders_deleted = self._lot_repo.purge(lot)
        logger.info(
            "lot.deleted",
            lot_code=lot_code,
            orders_deleted=orders_deleted,
            released_seals=released,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_lot(self, lot_code: str) -> Lot:
        """Raises ``LotNotFound`` when the code is unknown."""
        return self._get(lot_code)

    def list_lots(self, filters: Optional[Dict[str, Any]] = None) -> List[Lot]:
        return self._lot_repo.list(filters)

    def list_orders(self, lot_code: str) -> List[LotOrder]:
        self._get(lot_code)
        return self._lot_repo.list_orders(lot_code)

    def list_lots_ready_for_scan(self) -> List[Lot]:
        """Hand-off queue for scanners, oldest ``end_at`` first."""
        return self._lot_repo.list_ready_for_scan()

    def list_lots_by_scanner(self, uid: str) -> List[Lot]:
        return self._lot_repo.list_by_scanner(uid)

    def list_lots_by_user(self, uid: str) -> List[Lot]:
        return self._lot_repo.list_by_user(uid)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get(self, lot_code: str) -> Lot:
        lot = self._lot_repo.get_by_code(lot_code)
        if lot is None:
            raise LotNotFound(f"Lot {lot_code} not found.")
        return lot

    def _lock(self, lot_code: str) -> Lot:
        lot = self._lot_repo.get_for_update(lot_code)
        if lot is None:
            raise LotNotFound(f"Lot {lot_code} not found.")
        return lot

    def _require_status(self, lot: Lot, expected: str, action: str) -> None:
        """The transition table allows several sources for CLOSING; each
        operation accepts exactly one."""
        if lot.status != expected:
            logger.warning(
                "lot.invalid_transition",
                lot_code=lot.lot_code,
                action=action,
                current_status=lot.status,
                expected_status=expected,
            )
            raise InvalidLotStatus(
                f"Cannot {action} lot {lot.lot_code} in status {lot.status}; "
                f"it must be {expected}."
            )

    def _transition(self, lot: Lot, new_status: str) -> None:
        if not lot.can_transition_to(new_status):
            logger.warning(
                "lot.invalid_transition",
                lot_code=lot.lot_code,
                current_status=lot.status,
                new_status=new_status,
            )
            raise InvalidLotStatus(
                f"Cannot transition lot {lot.lot_code} from {lot.status} to {new_status}."
            )
        old_status = lot.status
        lot.status = new_status
        lot.add_domain_event(
            LotStatusChanged(
                aggregate_id=lot.lot_code,
                old_status=str(old_status),
                new_status=str(new_status),
            )
        )
