"""Code formats enforced by the core itself.

Lot codes have 8 digits, order codes 9 and seal codes 10.  The predicates
are used by DTO validators; ``ensure_*`` helpers raise ``InvalidCodeFormat``
for service-level checks and ``*_validator`` objects are attached to model
fields.
"""

from __future__ import annotations

import re

from django.core.validators import RegexValidator

from shared.domain.exceptions import InvalidCodeFormat

LOT_CODE_RE = re.compile(r"\A[0-9]{8}\Z")
ORDER_CODE_RE = re.compile(r"\A[0-9]{9}\Z")
SEAL_CODE_RE = re.compile(r"\A[0-9]{10}\Z")

lot_code_validator = RegexValidator(LOT_CODE_RE, "Lot code must have exactly 8 digits.")
order_code_validator = RegexValidator(
    ORDER_CODE_RE, "Order code must have exactly 9 digits."
)
seal_code_validator = RegexValidator(SEAL_CODE_RE, "Seal code must have exactly 10 digits.")


def is_valid_lot_code(code: str) -> bool:
    return bool(LOT_CODE_RE.match(code or ""))


def is_valid_order_code(code: str) -> bool:
    return bool(ORDER_CODE_RE.match(code or ""))


def is_valid_seal_code(code: str) -> bool:
    return bool(SEAL_CODE_RE.match(code or ""))


def ensure_seal_code(code: str) -> str:
    if not is_valid_seal_code(code):
        raise InvalidCodeFormat(f"Seal code '{code}' must have exactly 10 digits.")
    return code
