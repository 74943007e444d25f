"""Unit tests for LotService.

Covers:
- Creation: totals frozen at import, separator pre-assignment, duplicate
  lot/order codes rejected before any write.
- Transitions: unified (GERAL) and split (SEPARADOR/BIPADOR) paths, wrong
  state and wrong work mode raise.
- Claim-for-scanning: first claim wins, admin assignment enforced.
- Sealing: every failure reported through SealResult.
- Completion: gate on pending orders, durations, fresh rules, XP split.
- Cascade delete releasing seal codes.
"""

from __future__ import annotations

from datetime import timedelta

import pytest
from freezegun import freeze_time

from modules.accounts.dtos import WorkerIdentityDTO
from modules.accounts.models import AppUser
from modules.lots.constants import AssignmentType, LotOrderStatus, LotStatus, WorkMode
from modules.lots.dtos import CreateAdminLotDTO
from modules.lots.exceptions import (
    DuplicateLotCode,
    DuplicateOrderCode,
    InvalidLotStatus,
    LotAssignmentMismatch,
    LotNotFound,
    OrdersPendingSeal,
    WorkModeMismatch,
)
from modules.lots.models import Lot, LotOrder
from modules.scoring.dtos import PickingRulesDTO
from modules.seals.dtos import SealErrorCode
from modules.seals.models import SealedCode
from modules.single_orders.dtos import CreateSingleOrderDTO
from shared.domain.exceptions import PermissionDenied

pytestmark = pytest.mark.unit

T0 = "2026-03-10 12:00:00"


def _seal_all(lot_service, lot_code, first_seal=9000000000):
    for offset, order in enumerate(lot_service.list_orders(lot_code)):
        result = lot_service.seal_order(lot_code, order.order_code, str(first_seal + offset))
        assert result.success, result.error


@pytest.fixture()
def closing_lot(lot_service, lot_dto, users):
    """A GERAL lot of five orders in CLOSING."""
    lot = lot_service.create_lot(lot_dto())
    lot_service.start_lot(lot.lot_code)
    lot_service.close_lot(lot.lot_code)
    return lot_service.get_lot(lot.lot_code)


# ---------------------------------------------------------------------------
# Creation
# ---------------------------------------------------------------------------


class TestCreateLot:
    def test_creates_draft_lot_with_orders(self, lot_service, lot_dto, worker):
        lot = lot_service.create_lot(lot_dto(items=(3, 0, 7)))

        assert lot.status == LotStatus.DRAFT
        assert lot.total_orders == 3
        assert lot.total_items == 10
        assert lot.cycle == "C1"
        assert lot.created_by_uid == worker.uid
        orders = lot_service.list_orders(lot.lot_code)
        assert [o.order_code for o in orders] == ["100000001", "100000002", "100000003"]
        assert all(o.status == LotOrderStatus.PENDING for o in orders)
        assert all(o.sealed_code is None and o.sealed_at is None for o in orders)

    @pytest.mark.parametrize("mode", [WorkMode.GERAL, WorkMode.SEPARADOR])
    def test_creator_is_preassigned_separator(self, lot_service, lot_dto, worker, mode):
        lot = lot_service.create_lot(lot_dto(work_mode=mode))
        assert lot.separator_uid == worker.uid
        assert lot.separator_name == worker.name

    def test_bipador_lot_has_no_separator(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.BIPADOR))
        assert lot.separator_uid == ""

    def test_duplicate_lot_code(self, lot_service, lot_dto):
        lot_service.create_lot(lot_dto())

        with pytest.raises(DuplicateLotCode):
            lot_service.create_lot(lot_dto(first_order_code=200000001))

        assert Lot.objects.count() == 1
        assert LotOrder.objects.count() == 5

    def test_order_code_used_by_another_lot(self, lot_service, lot_dto):
        lot_service.create_lot(lot_dto(lot_code="10000001", first_order_code=100000001))

        with pytest.raises(DuplicateOrderCode, match="100000005.*10000001"):
            lot_service.create_lot(lot_dto(lot_code="10000002", first_order_code=100000005))

        assert not Lot.objects.filter(lot_code="10000002").exists()
        assert LotOrder.objects.count() == 5

    def test_order_code_used_by_single_order(self, lot_service, single_order_service, lot_dto, worker):
        single_order_service.create_single_order(
            CreateSingleOrderDTO(order_code="100000003", items=2, creator=worker)
        )

        with pytest.raises(DuplicateOrderCode, match="single order"):
            lot_service.create_lot(lot_dto())

        assert Lot.objects.count() == 0
        assert LotOrder.objects.count() == 0

    def test_totals_are_not_recalculated(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto(items=(5, 5)))
        LotOrder.objects.filter(lot=lot).update(items=50)

        assert lot_service.get_lot(lot.lot_code).total_items == 10


class TestCreateAdminLot:
    def _dto(self, admin, **kwargs):
        return CreateAdminLotDTO(
            lot_code="30000001",
            orders=[{"order_code": "300000001", "cycle": "C2", "items": 4}],
            admin=admin,
            **kwargs,
        )

    def test_requires_admin(self, lot_service, worker):
        with pytest.raises(PermissionDenied):
            lot_service.create_admin_lot(self._dto(worker))
        assert Lot.objects.count() == 0

    def test_open_lot(self, lot_service, admin):
        lot = lot_service.create_admin_lot(self._dto(admin))

        assert lot.is_admin_created is True
        assert lot.assignment_type == AssignmentType.OPEN
        assert lot.work_mode == WorkMode.GERAL
        assert lot.separator_uid == ""

    def test_assigned_general(self, lot_service, admin, worker):
        lot = lot_service.create_admin_lot(
            self._dto(
                admin,
                assignment_type=AssignmentType.ASSIGNED_GENERAL,
                assigned_general=worker,
            )
        )

        assert lot.assigned_general_uid == worker.uid
        assert lot.separator_uid == worker.uid
        assert lot.created_by_uid == admin.uid

    def test_assigned_separated(self, lot_service, admin, worker, scanner):
        lot = lot_service.create_admin_lot(
            self._dto(
                admin,
                assignment_type=AssignmentType.ASSIGNED_SEPARATED,
                assigned_separator=worker,
                assigned_scanner=scanner,
            )
        )

        assert lot.work_mode == WorkMode.SEPARADOR
        assert lot.separator_uid == worker.uid
        assert lot.assigned_scanner_uid == scanner.uid
        assert lot.scanner_uid == ""


# ---------------------------------------------------------------------------
# Transitions
# ---------------------------------------------------------------------------


class TestTransitions:
    @freeze_time(T0)
    def test_start_records_start_at(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())

        started = lot_service.start_lot(lot.lot_code)

        assert started.status == LotStatus.IN_PROGRESS
        assert started.start_at.isoformat() == "2026-03-10T12:00:00+00:00"

    def test_start_twice_raises(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.start_lot(lot.lot_code)

        with pytest.raises(InvalidLotStatus):
            lot_service.start_lot(lot.lot_code)

    def test_start_unknown_lot(self, lot_service):
        with pytest.raises(LotNotFound):
            lot_service.start_lot("99999999")

    def test_start_assigns_worker_to_open_lot(self, lot_service, admin, worker):
        lot = lot_service.create_admin_lot(
            CreateAdminLotDTO(
                lot_code="30000001",
                orders=[{"order_code": "300000001", "items": 1}],
                admin=admin,
            )
        )

        started = lot_service.start_lot(lot.lot_code, worker=worker)

        assert started.separator_uid == worker.uid

    def test_close_geral(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.start_lot(lot.lot_code)

        closed = lot_service.close_lot(lot.lot_code)

        assert closed.status == LotStatus.CLOSING
        assert closed.end_at is not None
        assert closed.duration_ms is None

    def test_close_draft_raises(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        with pytest.raises(InvalidLotStatus):
            lot_service.close_lot(lot.lot_code)

    def test_close_twice_keeps_first_end_at(self, lot_service, closing_lot):
        with pytest.raises(InvalidLotStatus):
            lot_service.close_lot(closing_lot.lot_code)
        assert lot_service.get_lot(closing_lot.lot_code).end_at == closing_lot.end_at

    def test_close_split_lot_with_unified_close_raises(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
        lot_service.start_lot(lot.lot_code)

        with pytest.raises(WorkModeMismatch):
            lot_service.close_lot(lot.lot_code)
        assert lot_service.get_lot(lot.lot_code).status == LotStatus.IN_PROGRESS

    def test_close_for_separator_on_geral_raises(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.start_lot(lot.lot_code)

        with pytest.raises(WorkModeMismatch):
            lot_service.close_lot_for_separator(lot.lot_code)

    def test_close_for_separator_stops_the_clock(self, lot_service, lot_dto):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
            lot_service.start_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=12))

            handed_off = lot_service.close_lot_for_separator(lot.lot_code)

        assert handed_off.status == LotStatus.READY_FOR_SCAN
        assert handed_off.duration_ms == 12 * 60_000


class TestClaimAndScan:
    @pytest.fixture()
    def ready_lot(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
        lot_service.start_lot(lot.lot_code)
        return lot_service.close_lot_for_separator(lot.lot_code)

    def test_claim_sets_scanner(self, lot_service, ready_lot, scanner):
        claimed = lot_service.claim_lot_for_scanning(ready_lot.lot_code, scanner)

        assert claimed.status == LotStatus.CLOSING
        assert claimed.scanner_uid == scanner.uid
        assert claimed.scanner_name == scanner.name

    def test_second_claim_fails(self, lot_service, ready_lot, scanner, worker):
        lot_service.claim_lot_for_scanning(ready_lot.lot_code, scanner)

        with pytest.raises(InvalidLotStatus):
            lot_service.claim_lot_for_scanning(ready_lot.lot_code, worker)
        assert lot_service.get_lot(ready_lot.lot_code).scanner_uid == scanner.uid

    def test_claim_before_hand_off_fails(self, lot_service, lot_dto, scanner):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
        with pytest.raises(InvalidLotStatus):
            lot_service.claim_lot_for_scanning(lot.lot_code, scanner)

    @pytest.mark.parametrize("mode", [WorkMode.SEPARADOR, WorkMode.GERAL])
    def test_claim_while_separating_fails(self, lot_service, lot_dto, scanner, mode):
        lot = lot_service.create_lot(lot_dto(work_mode=mode))
        lot_service.start_lot(lot.lot_code)

        with pytest.raises(InvalidLotStatus):
            lot_service.claim_lot_for_scanning(lot.lot_code, scanner)

        unchanged = lot_service.get_lot(lot.lot_code)
        assert unchanged.status == LotStatus.IN_PROGRESS
        assert unchanged.scanner_uid == ""
        assert unchanged.end_at is None

    def test_claim_of_closing_geral_lot_fails(self, lot_service, closing_lot, scanner):
        with pytest.raises(InvalidLotStatus):
            lot_service.claim_lot_for_scanning(closing_lot.lot_code, scanner)
        assert lot_service.get_lot(closing_lot.lot_code).scanner_uid == ""

    def test_separation_time_survives_until_completion(self, lot_service, lot_dto, users, scanner):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
            lot_service.start_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=10))
            with pytest.raises(InvalidLotStatus):
                lot_service.claim_lot_for_scanning(lot.lot_code, scanner)
            lot_service.close_lot_for_separator(lot.lot_code)
            lot_service.claim_lot_for_scanning(lot.lot_code, scanner)
            _seal_all(lot_service, lot.lot_code)
            done = lot_service.complete_lot(lot.lot_code)

        # 50 items in 10 minutes: 5 items/min hits the +10% tier
        assert done.duration_ms == 10 * 60_000
        assert done.xp_earned == 220

    def test_assigned_lot_rejects_other_scanner(self, lot_service, admin, worker, scanner):
        lot = lot_service.create_admin_lot(
            CreateAdminLotDTO(
                lot_code="30000001",
                orders=[{"order_code": "300000001", "items": 1}],
                admin=admin,
                assignment_type=AssignmentType.ASSIGNED_SEPARATED,
                assigned_separator=worker,
                assigned_scanner=scanner,
            )
        )
        lot_service.start_lot(lot.lot_code)
        lot_service.close_lot_for_separator(lot.lot_code)
        intruder = WorkerIdentityDTO(uid="worker-003", name="Daniel Costa")

        with pytest.raises(LotAssignmentMismatch):
            lot_service.claim_lot_for_scanning(lot.lot_code, intruder)

        assert lot_service.claim_lot_for_scanning(lot.lot_code, scanner).scanner_uid == scanner.uid

    def test_start_scanning_keeps_first_timestamp(self, lot_service, closing_lot):
        with freeze_time(T0) as frozen:
            first = lot_service.start_scanning(closing_lot.lot_code).scan_start_at
            frozen.tick(timedelta(minutes=3))
            second = lot_service.start_scanning(closing_lot.lot_code).scan_start_at

        assert first == second
        assert lot_service.get_lot(closing_lot.lot_code).scan_start_at == first

    def test_start_scanning_requires_closing(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        with pytest.raises(InvalidLotStatus):
            lot_service.start_scanning(lot.lot_code)


# ---------------------------------------------------------------------------
# Sealing
# ---------------------------------------------------------------------------


class TestSealOrder:
    def test_success(self, lot_service, closing_lot):
        result = lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")

        assert result.success is True
        assert result.error is None
        order = LotOrder.objects.get(order_code="100000001")
        assert order.status == LotOrderStatus.SEALED
        assert order.sealed_code == "1234567890"
        assert order.sealed_at is not None
        seal = SealedCode.objects.get(sealed_code="1234567890")
        assert seal.order_code == "100000001"
        assert seal.lot_code == closing_lot.lot_code

    @pytest.mark.parametrize("code", ["123", "12345678901", "abcdefghij", ""])
    def test_invalid_format(self, lot_service, closing_lot, code):
        result = lot_service.seal_order(closing_lot.lot_code, "100000001", code)

        assert result.success is False
        assert result.error_code == SealErrorCode.INVALID_FORMAT
        assert SealedCode.objects.count() == 0

    def test_unknown_lot(self, lot_service):
        result = lot_service.seal_order("99999999", "100000001", "1234567890")
        assert result.error_code == SealErrorCode.LOT_NOT_FOUND

    def test_unknown_order(self, lot_service, closing_lot):
        result = lot_service.seal_order(closing_lot.lot_code, "999999999", "1234567890")

        assert result.error_code == SealErrorCode.ORDER_NOT_FOUND
        assert SealedCode.objects.count() == 0

    def test_lot_not_closing(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.start_lot(lot.lot_code)

        result = lot_service.seal_order(lot.lot_code, "100000001", "1234567890")

        assert result.error_code == SealErrorCode.INVALID_STATE
        assert SealedCode.objects.count() == 0

    def test_order_already_sealed(self, lot_service, closing_lot):
        lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")

        result = lot_service.seal_order(closing_lot.lot_code, "100000001", "1111111111")

        assert result.error_code == SealErrorCode.ALREADY_SEALED
        assert LotOrder.objects.get(order_code="100000001").sealed_code == "1234567890"
        assert not SealedCode.objects.filter(sealed_code="1111111111").exists()

    def test_seal_code_reused_cites_owner(self, lot_service, closing_lot):
        lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")

        result = lot_service.seal_order(closing_lot.lot_code, "100000002", "1234567890")

        assert result.success is False
        assert result.error_code == SealErrorCode.SEAL_CONFLICT
        assert "100000001" in result.error
        assert LotOrder.objects.get(order_code="100000002").status == LotOrderStatus.PENDING

    def test_check_all_sealed(self, lot_service, closing_lot):
        assert lot_service.check_all_sealed(closing_lot.lot_code) is False
        _seal_all(lot_service, closing_lot.lot_code)
        assert lot_service.check_all_sealed(closing_lot.lot_code) is True


# ---------------------------------------------------------------------------
# Completion
# ---------------------------------------------------------------------------


class TestCompleteLot:
    def test_pending_orders_block_completion(self, lot_service, closing_lot):
        lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")

        with pytest.raises(OrdersPendingSeal):
            lot_service.complete_lot(closing_lot.lot_code)

        lot = lot_service.get_lot(closing_lot.lot_code)
        assert lot.status == LotStatus.CLOSING
        assert lot.xp_earned == 0

    def test_completing_in_progress_lot_raises(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.start_lot(lot.lot_code)

        with pytest.raises(InvalidLotStatus):
            lot_service.complete_lot(lot.lot_code)

    def test_geral_lot_pays_creator_with_bonus(self, lot_service, lot_dto, users, worker):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto(items=[10] * 10))
            lot_service.start_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=20))
            lot_service.close_lot(lot.lot_code)
            lot_service.start_scanning(lot.lot_code)
            frozen.tick(timedelta(minutes=5))
            _seal_all(lot_service, lot.lot_code)

            done = lot_service.complete_lot(lot.lot_code)

        assert done.status == LotStatus.DONE
        assert done.duration_ms == 20 * 60_000
        assert done.scan_duration_ms == 5 * 60_000
        assert done.total_duration_ms == 5 * 60_000
        assert done.scan_end_at is not None
        assert done.xp_earned == 385
        assert done.separator_xp_earned is None
        assert done.scanner_xp_earned is None
        creator = AppUser.objects.get(uid=worker.uid)
        assert creator.xp_total == 385
        assert creator.streak == 1

    def test_scan_duration_falls_back_to_end_at(self, lot_service, lot_dto, users):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto())
            lot_service.start_lot(lot.lot_code)
            lot_service.close_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=7))
            _seal_all(lot_service, lot.lot_code)
            done = lot_service.complete_lot(lot.lot_code)

        assert done.scan_start_at is None
        assert done.scan_duration_ms == 7 * 60_000
        assert done.duration_ms == 0

    def test_split_mode_pays_60_40(self, lot_service, lot_dto, users, worker, scanner):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
            lot_service.start_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=30))
            lot_service.close_lot_for_separator(lot.lot_code)
            frozen.tick(timedelta(hours=2))
            lot_service.claim_lot_for_scanning(lot.lot_code, scanner)
            _seal_all(lot_service, lot.lot_code)
            done = lot_service.complete_lot(lot.lot_code)

        assert done.duration_ms == 30 * 60_000
        assert done.xp_earned == 200
        assert done.separator_xp_earned == 120
        assert done.scanner_xp_earned == 80
        assert AppUser.objects.get(uid=worker.uid).xp_total == 120
        assert AppUser.objects.get(uid=scanner.uid).xp_total == 80
        assert AppUser.objects.get(uid=scanner.uid).streak == 1

    def test_split_shares_are_rounded_independently(self, lot_service, lot_dto, users, rules_service, admin, scanner):
        # 1 order of 0 items, base 191 -> total 201 -> 120.6 / 80.4 -> 121 / 80
        rules_service.update_rules(
            PickingRulesDTO(xp_base_per_lot=191, xp_per_order=10, xp_per_item=0), admin
        )
        lot = lot_service.create_lot(lot_dto(items=[0], work_mode=WorkMode.SEPARADOR))
        lot_service.start_lot(lot.lot_code)
        lot_service.close_lot_for_separator(lot.lot_code)
        lot_service.claim_lot_for_scanning(lot.lot_code, scanner)
        _seal_all(lot_service, lot.lot_code)

        done = lot_service.complete_lot(lot.lot_code)

        assert done.xp_earned == 201
        assert (done.separator_xp_earned, done.scanner_xp_earned) == (121, 80)

    def test_separator_scanning_own_lot_gets_everything(self, lot_service, lot_dto, users, worker):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
        lot_service.start_lot(lot.lot_code)
        lot_service.close_lot_for_separator(lot.lot_code)
        lot_service.claim_lot_for_scanning(lot.lot_code, worker)
        _seal_all(lot_service, lot.lot_code)

        done = lot_service.complete_lot(lot.lot_code)

        assert done.separator_xp_earned is None
        assert AppUser.objects.get(uid=worker.uid).xp_total == done.xp_earned

    def test_assigned_general_lot_pays_assigned_worker(self, lot_service, users, admin, worker):
        lot = lot_service.create_admin_lot(
            CreateAdminLotDTO(
                lot_code="30000001",
                orders=[{"order_code": "300000001", "items": 4}],
                admin=admin,
                assignment_type=AssignmentType.ASSIGNED_GENERAL,
                assigned_general=worker,
            )
        )
        lot_service.start_lot(lot.lot_code)
        lot_service.close_lot(lot.lot_code)
        _seal_all(lot_service, lot.lot_code)

        done = lot_service.complete_lot(lot.lot_code)

        assert AppUser.objects.get(uid=worker.uid).xp_total == done.xp_earned
        assert AppUser.objects.get(uid=admin.uid).xp_total == 0

    def test_rules_are_read_at_completion(self, lot_service, lot_dto, rules_service, admin):
        with freeze_time(T0) as frozen:
            lot = lot_service.create_lot(lot_dto())
            lot_service.start_lot(lot.lot_code)
            frozen.tick(timedelta(minutes=10))
            lot_service.close_lot(lot.lot_code)
            _seal_all(lot_service, lot.lot_code)
            rules_service.update_rules(
                PickingRulesDTO(xp_base_per_lot=0, xp_per_order=0, xp_per_item=1), admin
            )

            done = lot_service.complete_lot(lot.lot_code)

        # 50 items in 10 minutes hits the speed target: 50 + 10%
        assert done.xp_earned == 55

    def test_completing_twice_raises(self, lot_service, closing_lot, worker):
        _seal_all(lot_service, closing_lot.lot_code)
        lot_service.complete_lot(closing_lot.lot_code)

        with pytest.raises(InvalidLotStatus):
            lot_service.complete_lot(closing_lot.lot_code)
        assert AppUser.objects.get(uid=worker.uid).xp_total == Lot.objects.get(
            lot_code=closing_lot.lot_code
        ).xp_earned


# ---------------------------------------------------------------------------
# Delete and queries
# ---------------------------------------------------------------------------


class TestDeleteLot:
    def test_cascade_releases_seals(self, lot_service, closing_lot):
        lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")
        lot_service.seal_order(closing_lot.lot_code, "100000002", "1234567891")

        lot_service.delete_lot(closing_lot.lot_code)

        assert not Lot.objects.filter(lot_code=closing_lot.lot_code).exists()
        assert LotOrder.objects.count() == 0
        assert SealedCode.objects.count() == 0

    def test_freed_seal_can_be_reused(self, lot_service, closing_lot, lot_dto):
        lot_service.seal_order(closing_lot.lot_code, "100000001", "1234567890")
        lot_service.delete_lot(closing_lot.lot_code)

        other = lot_service.create_lot(lot_dto(lot_code="20000002", first_order_code=200000001))
        lot_service.start_lot(other.lot_code)
        lot_service.close_lot(other.lot_code)

        assert lot_service.seal_order(other.lot_code, "200000001", "1234567890").success is True

    def test_freed_order_codes_can_be_imported_again(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.delete_lot(lot.lot_code)

        assert lot_service.create_lot(lot_dto()).lot_code == lot.lot_code

    def test_delete_in_draft(self, lot_service, lot_dto):
        lot = lot_service.create_lot(lot_dto())
        lot_service.delete_lot(lot.lot_code)
        assert Lot.objects.count() == 0

    def test_delete_unknown_lot(self, lot_service):
        with pytest.raises(LotNotFound):
            lot_service.delete_lot("99999999")


class TestQueries:
    def test_get_lot_unknown(self, lot_service):
        with pytest.raises(LotNotFound):
            lot_service.get_lot("99999999")

    def test_ready_for_scan_ordered_by_hand_off(self, lot_service, lot_dto):
        with freeze_time(T0) as frozen:
            for lot_code, first in (("10000001", 100000001), ("10000002", 200000001)):
                lot_service.create_lot(
                    lot_dto(lot_code=lot_code, first_order_code=first, work_mode=WorkMode.SEPARADOR)
                )
                lot_service.start_lot(lot_code)
            lot_service.close_lot_for_separator("10000002")
            frozen.tick(timedelta(minutes=1))
            lot_service.close_lot_for_separator("10000001")

        queue = lot_service.list_lots_ready_for_scan()

        assert [lot.lot_code for lot in queue] == ["10000002", "10000001"]

    def test_lists_by_scanner_and_user(self, lot_service, lot_dto, worker, scanner):
        lot = lot_service.create_lot(lot_dto(work_mode=WorkMode.SEPARADOR))
        lot_service.start_lot(lot.lot_code)
        lot_service.close_lot_for_separator(lot.lot_code)
        lot_service.claim_lot_for_scanning(lot.lot_code, scanner)

        assert [l.lot_code for l in lot_service.list_lots_by_scanner(scanner.uid)] == [lot.lot_code]
        assert [l.lot_code for l in lot_service.list_lots_by_user(worker.uid)] == [lot.lot_code]
        assert [l.lot_code for l in lot_service.list_lots_by_user(scanner.uid)] == [lot.lot_code]
        assert lot_service.list_lots_by_user("nobody") == []

    def test_list_lots_with_filters(self, lot_service, lot_dto):
        lot_service.create_lot(lot_dto(lot_code="10000001", first_order_code=100000001))
        lot_service.create_lot(lot_dto(lot_code="10000002", first_order_code=200000001))
        lot_service.start_lot("10000002")

        assert len(lot_service.list_lots()) == 2
        drafts = lot_service.list_lots({"status": LotStatus.DRAFT})
        assert [lot.lot_code for lot in drafts] == ["10000001"]
