"""XP rules store service.

``get_rules`` is called by the lifecycle services at completion time, every
time, so an admin edit applies to the next lot or order that finishes.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from modules.scoring.dtos import PickingRulesDTO
from shared.domain.exceptions import PermissionDenied

if TYPE_CHECKING:
    from modules.accounts.dtos import WorkerIdentityDTO
    from modules.scoring.repositories.interfaces import IPickingRulesRepository

logger = structlog.get_logger(__name__)


class PickingRulesService:
    def __init__(self, rules_repository: IPickingRulesRepository) -> None:
        self._rules_repo = rules_repository

    def get_rules(self) -> PickingRulesDTO:
        """Current rules, or the defaults when none were ever saved."""
        stored = self._rules_repo.get()
        if stored is None:
            return PickingRulesDTO()
        return PickingRulesDTO.model_validate(stored)

    def update_rules(
        self, dto: PickingRulesDTO, actor: WorkerIdentityDTO
    ) -> PickingRulesDTO:
        """Replace the rules.

        Raises:
            PermissionDenied: the actor is not an admin.
        """
        if not actor.is_admin:
            logger.warning("picking_rules.update_denied", uid=actor.uid)
            raise PermissionDenied("Only admins can change the XP rules.")
        stored = self._rules_repo.upsert(dto.model_dump(), updated_by_uid=actor.uid)
        return PickingRulesDTO.model_validate(stored)
