"""Domain error taxonomy shared by every bounded context.

Module-specific exceptions subclass one of these so callers can handle a
whole category (e.g. every ``ConflictError``) without importing each module.
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for business rule violations."""


class NotFoundError(DomainError):
    """The referenced entity does not exist."""


class ConflictError(DomainError):
    """The operation collides with an existing entity (duplicate codes)."""


class InvalidStateError(DomainError):
    """The entity is not in a state that permits the requested transition."""


class InvalidCodeFormat(DomainError):
    """A lot, order or seal code does not match its required format."""


class PermissionDenied(DomainError):
    """The acting user's role does not allow the operation."""
