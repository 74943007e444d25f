from __future__ import annotations

import pytest
from django.core.exceptions import ValidationError

from modules.core.validators import (
    ensure_seal_code,
    is_valid_lot_code,
    is_valid_order_code,
    is_valid_seal_code,
    lot_code_validator,
)
from shared.domain.exceptions import InvalidCodeFormat

pytestmark = pytest.mark.unit


@pytest.mark.parametrize(
    "code, valid",
    [
        ("12345678", True),
        ("00000000", True),
        ("1234567", False),
        ("123456789", False),
        ("1234567a", False),
        ("12345678\n", False),
        (" 12345678", False),
        ("", False),
        (None, False),
    ],
)
def test_lot_code_format(code, valid):
    assert is_valid_lot_code(code) is valid


@pytest.mark.parametrize(
    "code, valid",
    [("123456789", True), ("12345678", False), ("1234567890", False), ("12345678x", False)],
)
def test_order_code_format(code, valid):
    assert is_valid_order_code(code) is valid


@pytest.mark.parametrize(
    "code, valid",
    [
        ("1234567890", True),
        ("123456789", False),
        ("12345678901", False),
        ("12345-7890", False),
        ("١٢٣٤٥٦٧٨٩٠", False),  # Arabic-Indic digits
    ],
)
def test_seal_code_format(code, valid):
    assert is_valid_seal_code(code) is valid


def test_ensure_seal_code_raises_domain_error():
    assert ensure_seal_code("1234567890") == "1234567890"
    with pytest.raises(InvalidCodeFormat):
        ensure_seal_code("123")


def test_model_field_validator():
    lot_code_validator("12345678")
    with pytest.raises(ValidationError):
        lot_code_validator("1234")
