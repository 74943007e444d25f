"""AppUser model: identity mirror plus XP and streak counters.

The identity provider owns authentication; this table only mirrors the
stable ``uid``, display name and role, and carries the gamification
counters mutated by ``UserProgressService``:

- ``xp_total`` never decreases.
- ``streak`` counts consecutive calendar days with XP-earning activity.
- ``last_activity_date`` drives the streak computation.
"""

from __future__ import annotations

from django.db import models

from modules.accounts.constants import UserRole
from modules.accounts.leveling import calculate_level
from modules.core.models import BaseModel


class AppUser(BaseModel):
    uid = models.CharField(max_length=128, unique=True)
    name = models.CharField(max_length=255)
    email = models.EmailField(blank=True, default="")
    role = models.CharField(
        max_length=20,
        choices=UserRole.choices,
        default=UserRole.ESTOQUISTA,
    )
    xp_total = models.PositiveIntegerField(default=0)
    streak = models.PositiveIntegerField(default=0)
    last_activity_date = models.DateField(null=True, blank=True, default=None)

    class Meta:
        db_table = "app_users"
        ordering = ["name"]
        indexes = [
            models.Index(fields=["role"], name="app_users_role_idx"),
        ]

    @property
    def level(self) -> int:
        return calculate_level(self.xp_total)

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __str__(self) -> str:
        return f"{self.name} ({self.uid})"
