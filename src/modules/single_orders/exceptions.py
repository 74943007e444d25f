"""Single-order domain exceptions."""

from __future__ import annotations

from shared.domain.exceptions import InvalidStateError, NotFoundError


class SingleOrderNotFound(NotFoundError):
    """No single order exists with the given id."""


class InvalidSingleOrderStatus(InvalidStateError):
    """The single order's status does not allow the requested transition."""
