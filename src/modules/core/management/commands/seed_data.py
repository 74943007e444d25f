from __future__ import annotations

import random

from django.core.management.base import BaseCommand

from modules.accounts.constants import UserRole
from modules.accounts.models import AppUser
from modules.activities.models import TaskType
from modules.lots.constants import LotStatus, WorkMode
from modules.lots.models import Lot, LotOrder
from modules.scoring.constants import DEFAULT_PICKING_RULES, RULES_SINGLETON_KEY
from modules.scoring.models import PickingRules


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        users = self._seed_users()
        self._seed_rules()
        task_types = self._seed_task_types()
        lots_created = self._seed_lots(users)

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"users={len(users)}, "
                f"task_types={len(task_types)}, "
                f"lots={lots_created}"
            )
        )

    def _seed_users(self) -> list[AppUser]:
        self.stdout.write("Creating users...")
        seed_users = [
            ("admin-001", "Ana Souza", "ana@example.com", UserRole.ADMIN),
            ("worker-001", "Bruno Lima", "bruno@example.com", UserRole.ESTOQUISTA),
            ("worker-002", "Carla Mendes", "carla@example.com", UserRole.ESTOQUISTA),
            ("worker-003", "Daniel Costa", "daniel@example.com", UserRole.ESTOQUISTA),
        ]
        users: list[AppUser] = []
        for uid, name, email, role in seed_users:
            user, _ = AppUser.objects.get_or_create(
                uid=uid,
                defaults={"name": name, "email": email, "role": role},
            )
            users.append(user)
        self.stdout.write(self.style.SUCCESS("Creating users... Done!"))
        return users

    def _seed_rules(self) -> None:
        PickingRules.objects.get_or_create(
            key=RULES_SINGLETON_KEY, defaults=dict(DEFAULT_PICKING_RULES)
        )

    def _seed_task_types(self) -> list[TaskType]:
        self.stdout.write("Creating task types...")
        catalog = [
            ("Reposição de prateleira", 15),
            ("Inventário de corredor", 40),
            ("Recebimento de carga", 30),
            ("Organização de devoluções", 20),
        ]
        task_types: list[TaskType] = []
        for name, xp in catalog:
            task_type, _ = TaskType.objects.get_or_create(
                name=name, defaults={"xp": xp, "active": True}
            )
            task_types.append(task_type)
        self.stdout.write(self.style.SUCCESS("Creating task types... Done!"))
        return task_types

    def _seed_lots(self, users: list[AppUser]) -> int:
        self.stdout.write("Creating draft lots...")
        workers = [user for user in users if user.role == UserRole.ESTOQUISTA]
        created = 0
        for index, worker in enumerate(workers, start=1):
            lot_code = f"{20260000 + index:08d}"
            if Lot.objects.filter(lot_code=lot_code).exists():
                continue
            order_count = random.randint(3, 8)
            items = [random.randint(1, 12) for _ in range(order_count)]
            work_mode = WorkMode.GERAL if index % 2 else WorkMode.SEPARADOR
            lot = Lot.objects.create(
                lot_code=lot_code,
                status=LotStatus.DRAFT,
                cycle=f"CICLO-{index:02d}",
                work_mode=work_mode,
                total_orders=order_count,
                total_items=sum(items),
                created_by_uid=worker.uid,
                created_by_name=worker.name,
                separator_uid=worker.uid,
                separator_name=worker.name,
            )
            LotOrder.objects.bulk_create(
                [
                    LotOrder(
                        lot=lot,
                        order_code=f"{index:03d}{position:06d}",
                        cycle=lot.cycle,
                        items=count,
                    )
                    for position, count in enumerate(items, start=1)
                ]
            )
            created += 1
        self.stdout.write(self.style.SUCCESS("Creating draft lots... Done!"))
        return created
