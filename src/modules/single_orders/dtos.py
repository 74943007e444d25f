"""Single-order DTOs."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, NonNegativeInt, field_validator

from modules.accounts.dtos import WorkerIdentityDTO
from modules.core.validators import is_valid_order_code


class CreateSingleOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_code: str
    items: NonNegativeInt
    creator: WorkerIdentityDTO

    @field_validator("order_code")
    @classmethod
    def order_code_format(cls, v: str) -> str:
        if not is_valid_order_code(v):
            raise ValueError("Order code must have exactly 9 digits.")
        return v
