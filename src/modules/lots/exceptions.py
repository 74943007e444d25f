"""Lot domain exceptions.

Raised by ``LotService`` for every lifecycle operation except sealing,
which reports failures through ``SealResult`` instead.
"""

from __future__ import annotations

from shared.domain.exceptions import ConflictError, InvalidStateError, NotFoundError


class LotNotFound(NotFoundError):
    """No lot exists with the given lot code."""


class DuplicateLotCode(ConflictError):
    """A lot with the same code already exists."""


class DuplicateOrderCode(ConflictError):
    """An order code in the batch already exists in a lot or single order."""


class InvalidLotStatus(InvalidStateError):
    """The lot's current status does not allow the requested transition."""


class WorkModeMismatch(InvalidStateError):
    """The transition belongs to the other work mode (unified vs split)."""


class OrdersPendingSeal(InvalidStateError):
    """The lot cannot complete while orders are still pending."""


class LotAssignmentMismatch(InvalidStateError):
    """An admin-assigned lot was claimed by someone other than the assignee."""
