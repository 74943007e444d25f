"""Django ORM implementation of the PickingRules repository."""

from __future__ import annotations

from typing import Optional

import structlog
from django.db import transaction

from modules.scoring.constants import RULES_SINGLETON_KEY
from modules.scoring.models import PickingRules
from modules.scoring.repositories.interfaces import IPickingRulesRepository

logger = structlog.get_logger(__name__)


class PickingRulesDjangoRepository(IPickingRulesRepository):
    def get(self) -> Optional[PickingRules]:
        return PickingRules.objects.filter(key=RULES_SINGLETON_KEY).first()

    @transaction.atomic
    def upsert(self, values: dict, updated_by_uid: str = "") -> PickingRules:
        rules, created = PickingRules.objects.update_or_create(
            key=RULES_SINGLETON_KEY,
            defaults={**values, "updated_by_uid": updated_by_uid},
        )
        logger.info("picking_rules.saved", created=created, updated_by=updated_by_uid)
        return rules
