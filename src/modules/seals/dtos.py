"""Result of a seal attempt.

Sealing is the one operation that reports business failures as data: a
scanning session keeps going after a bad scan, so callers read
``success`` / ``error`` instead of catching exceptions.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict


class SealErrorCode(str, Enum):
    INVALID_FORMAT = "invalid_format"
    LOT_NOT_FOUND = "lot_not_found"
    ORDER_NOT_FOUND = "order_not_found"
    INVALID_STATE = "invalid_state"
    ALREADY_SEALED = "already_sealed"
    SEAL_CONFLICT = "seal_conflict"


class SealResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    error: Optional[str] = None
    error_code: Optional[SealErrorCode] = None

    @classmethod
    def ok(cls) -> SealResult:
        return cls(success=True)

    @classmethod
    def fail(cls, error_code: SealErrorCode, error: str) -> SealResult:
        return cls(success=False, error=error, error_code=error_code)
