"""Lot repositories package."""

from modules.lots.repositories.django_repository import LotDjangoRepository
from modules.lots.repositories.interfaces import ILotRepository

__all__ = ["ILotRepository", "LotDjangoRepository"]
