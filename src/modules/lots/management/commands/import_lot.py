from __future__ import annotations

import json
from pathlib import Path

from django.core.management.base import BaseCommand, CommandError
from pydantic import ValidationError

from modules.accounts.dtos import WorkerIdentityDTO
from modules.accounts.repositories import AppUserDjangoRepository
from modules.accounts.services import UserProgressService
from modules.lots.constants import WorkMode
from modules.lots.dtos import CreateLotDTO
from modules.lots.repositories import LotDjangoRepository
from modules.lots.services import LotService
from modules.scoring.repositories import PickingRulesDjangoRepository
from modules.scoring.services import PickingRulesService
from modules.seals.registry import SealRegistry
from modules.single_orders.repositories import SingleOrderDjangoRepository
from shared.domain.exceptions import DomainError


class Command(BaseCommand):
    help = (
        "Import a lot from a JSON file shaped as "
        '{"lot_code": "12345678", "orders": [{"order_code": "123456789", '
        '"cycle": "C1", "approved_at": null, "items": 3}]}.'
    )

    def add_arguments(self, parser):
        parser.add_argument("path", help="JSON file with lot_code and orders.")
        parser.add_argument("--uid", required=True, help="Identity-provider uid of the creator.")
        parser.add_argument("--name", required=True, help="Display name of the creator.")
        parser.add_argument(
            "--work-mode",
            default=WorkMode.GERAL,
            choices=WorkMode.values,
            help="GERAL (default), SEPARADOR or BIPADOR.",
        )

    def handle(self, *args, **options):
        path = Path(options["path"])
        try:
            payload = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CommandError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise CommandError(
                f"Invalid lot file: expected an object with lot_code and orders, "
                f"got {type(payload).__name__}."
            )

        try:
            dto = CreateLotDTO(
                lot_code=str(payload.get("lot_code", "")),
                orders=payload.get("orders", []),
                creator=WorkerIdentityDTO(uid=options["uid"], name=options["name"]),
                work_mode=options["work_mode"],
            )
        except ValidationError as exc:
            raise CommandError(f"Invalid lot file: {exc}") from exc

        service = LotService(
            lot_repository=LotDjangoRepository(),
            single_order_repository=SingleOrderDjangoRepository(),
            seal_registry=SealRegistry(),
            rules_service=PickingRulesService(rules_repository=PickingRulesDjangoRepository()),
            progress_service=UserProgressService(user_repository=AppUserDjangoRepository()),
        )
        try:
            lot = service.create_lot(dto)
        except DomainError as exc:
            raise CommandError(str(exc)) from exc

        self.stdout.write(
            self.style.SUCCESS(
                f"Lot {lot.lot_code} imported: "
                f"orders={lot.total_orders}, items={lot.total_items}, "
                f"work_mode={lot.work_mode}"
            )
        )
