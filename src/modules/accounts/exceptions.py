"""Account domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import NotFoundError


class UserNotFound(NotFoundError):
    """No ``AppUser`` is mirrored for the given uid."""
