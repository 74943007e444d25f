"""Django ORM implementation of the AppUser repository."""

from __future__ import annotations

from datetime import date
from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db.models import F
from django.utils import timezone

from modules.accounts.models import AppUser
from modules.accounts.repositories.interfaces import IAppUserRepository

logger = structlog.get_logger(__name__)


class AppUserDjangoRepository(IAppUserRepository):
    """Concrete AppUser repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[AppUser]:
        try:
            return AppUser.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_by_uid(self, uid: str) -> Optional[AppUser]:
        return AppUser.objects.filter(uid=uid).first()

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[AppUser]:
        queryset = AppUser.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def save(self, entity: AppUser) -> AppUser:
        entity.save()
        return entity

    def delete(self, id: str) -> bool:
        deleted, _ = AppUser.objects.filter(id=id).delete()
        return deleted > 0

    def add_xp(self, uid: str, delta: int) -> Optional[int]:
        """Single ``UPDATE ... SET xp_total = xp_total + delta`` statement."""
        updated = AppUser.objects.filter(uid=uid).update(
            xp_total=F("xp_total") + delta,
            updated_at=timezone.now(),
        )
        if not updated:
            return None
        return AppUser.objects.filter(uid=uid).values_list("xp_total", flat=True).first()

    def set_streak(self, uid: str, streak: int, last_activity_date: date) -> None:
        AppUser.objects.filter(uid=uid).update(
            streak=streak,
            last_activity_date=last_activity_date,
            updated_at=timezone.now(),
        )
