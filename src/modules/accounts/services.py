"""User XP/Streak accumulator.

Every XP-earning action (lot completion, single-order seal, task log) ends
with ``award``: first the XP increment, then the streak update.  The two are
independent writes; a crash between them leaves XP posted without the
streak touch, which the next activity repairs on its own.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import TYPE_CHECKING, Optional

import structlog
from django.utils import timezone

from modules.accounts.dtos import UserProgressDTO, WorkerIdentityDTO
from modules.accounts.exceptions import UserNotFound
from modules.accounts.models import AppUser

if TYPE_CHECKING:
    from modules.accounts.repositories.interfaces import IAppUserRepository

logger = structlog.get_logger(__name__)


class UserProgressService:
    """Application service for XP totals, streaks and identity sync."""

    def __init__(self, user_repository: IAppUserRepository) -> None:
        self._user_repo = user_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    def sync_identity(self, identity: WorkerIdentityDTO) -> AppUser:
        """Mirror the identity provider's user, creating it on first sight.

        Name, e-mail and role follow the provider; counters are untouched.
        """
        user = self._user_repo.get_by_uid(identity.uid)
        if user is None:
            user = AppUser(
                uid=identity.uid,
                name=identity.name,
                email=identity.email,
                role=identity.role,
            )
            logger.info("user.created", uid=identity.uid, role=str(identity.role))
        else:
            user.name = identity.name
            user.role = identity.role
            if identity.email:
                user.email = identity.email
        return self._user_repo.save(user)

    def increment_xp(self, uid: str, delta: int) -> Optional[int]:
        """Add ``delta`` XP to the user's running total.

        Unknown users are skipped (logged), matching how XP posting runs
        after the lot or order has already been finalised.

        Raises:
            ValueError: ``delta`` is negative (``xp_total`` never decreases).
        """
        if delta < 0:
            raise ValueError(f"XP delta must be non-negative, got {delta}.")
        new_total = self._user_repo.add_xp(uid, delta)
        if new_total is None:
            logger.warning("user.xp_skipped_unknown_user", uid=uid, delta=delta)
            return None
        logger.info("user.xp_incremented", uid=uid, delta=delta, xp_total=new_total)
        return new_total

    def update_streak(self, uid: str, today: Optional[date] = None) -> Optional[int]:
        """Count today's activity towards the consecutive-day streak.

        Same day: unchanged.  Previous day: +1.  Any gap or first activity: 1.
        ``today`` defaults to the current date in ``settings.TIME_ZONE``.
        """
        user = self._user_repo.get_by_uid(uid)
        if user is None:
            logger.warning("user.streak_skipped_unknown_user", uid=uid)
            return None

        today = today or timezone.localdate()
        last = user.last_activity_date
        if last == today:
            return user.streak

        if last == today - timedelta(days=1):
            streak = user.streak + 1
        else:
            streak = 1

        self._user_repo.set_streak(uid, streak, today)
        logger.info(
            "user.streak_updated",
            uid=uid,
            streak=streak,
            previous_activity=last.isoformat() if last else None,
        )
        return streak

    def award(self, uid: str, xp: int, today: Optional[date] = None) -> None:
        """Post earned XP and then touch the streak."""
        self.increment_xp(uid, xp)
        self.update_streak(uid, today=today)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_user(self, uid: str) -> AppUser:
        """Raises ``UserNotFound`` when the uid is not mirrored."""
        user = self._user_repo.get_by_uid(uid)
        if user is None:
            raise UserNotFound(f"User {uid} not found.")
        return user

    def get_progress(self, uid: str) -> UserProgressDTO:
        user = self.get_user(uid)
        return UserProgressDTO(
            uid=user.uid,
            name=user.name,
            xp_total=user.xp_total,
            level=user.level,
            streak=user.streak,
            last_activity_date=user.last_activity_date,
        )
