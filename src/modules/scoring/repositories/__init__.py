"""PickingRules repositories package."""

from modules.scoring.repositories.django_repository import PickingRulesDjangoRepository
from modules.scoring.repositories.interfaces import IPickingRulesRepository

__all__ = ["IPickingRulesRepository", "PickingRulesDjangoRepository"]
