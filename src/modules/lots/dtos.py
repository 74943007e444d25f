"""Lot DTOs for the Service Layer.

Input contracts for lot creation.  The upstream spreadsheet import hands
over already-normalised order records; formats are still re-checked here so
nothing malformed reaches the database.

- ``ImportedOrderDTO``: one order record from the import source.
- ``CreateLotDTO``: a worker importing a lot for themselves.
- ``CreateAdminLotDTO``: an admin creating a lot, optionally assigned.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    field_validator,
    model_validator,
)

from modules.accounts.dtos import WorkerIdentityDTO
from modules.core.validators import is_valid_lot_code, is_valid_order_code
from modules.lots.constants import AssignmentType, WorkMode


class ImportedOrderDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    order_code: str
    cycle: str = ""
    approved_at: Optional[datetime] = None
    items: NonNegativeInt = 0

    @field_validator("order_code")
    @classmethod
    def order_code_format(cls, v: str) -> str:
        if not is_valid_order_code(v):
            raise ValueError("Order code must have exactly 9 digits.")
        return v


class _LotBatchDTO(BaseModel):
    """Fields and checks shared by both creation flows."""

    model_config = ConfigDict(frozen=True)

    lot_code: str
    orders: List[ImportedOrderDTO]

    @field_validator("lot_code")
    @classmethod
    def lot_code_format(cls, v: str) -> str:
        if not is_valid_lot_code(v):
            raise ValueError("Lot code must have exactly 8 digits.")
        return v

    @field_validator("orders")
    @classmethod
    def orders_must_not_be_empty(
        cls, v: List[ImportedOrderDTO]
    ) -> List[ImportedOrderDTO]:
        if not v:
            raise ValueError("A lot must have at least one order.")
        return v

    @model_validator(mode="after")
    def no_duplicate_order_codes(self):
        codes = [order.order_code for order in self.orders]
        if len(codes) != len(set(codes)):
            raise ValueError("Duplicate order codes are not allowed in the same lot.")
        return self

    @property
    def order_codes(self) -> List[str]:
        return [order.order_code for order in self.orders]

    @property
    def total_items(self) -> int:
        return sum(order.items for order in self.orders)

    @property
    def cycle(self) -> str:
        """Batch cycle label, taken from the first order."""
        return self.orders[0].cycle


class CreateLotDTO(_LotBatchDTO):
    creator: WorkerIdentityDTO
    work_mode: WorkMode = WorkMode.GERAL


class CreateAdminLotDTO(_LotBatchDTO):
    """Admin-created lot.

    - OPEN: anyone may pick it up, unified mode.
    - ASSIGNED_GENERAL: one worker does everything and receives the XP.
    - ASSIGNED_SEPARATED: a named separator and a named scanner.
    """

    admin: WorkerIdentityDTO
    assignment_type: AssignmentType = AssignmentType.OPEN
    assigned_general: Optional[WorkerIdentityDTO] = None
    assigned_separator: Optional[WorkerIdentityDTO] = None
    assigned_scanner: Optional[WorkerIdentityDTO] = None

    @model_validator(mode="after")
    def assignees_match_assignment_type(self):
        if self.assignment_type == AssignmentType.ASSIGNED_GENERAL:
            if self.assigned_general is None:
                raise ValueError("ASSIGNED_GENERAL lots need an assigned worker.")
        elif self.assignment_type == AssignmentType.ASSIGNED_SEPARATED:
            if self.assigned_separator is None or self.assigned_scanner is None:
                raise ValueError(
                    "ASSIGNED_SEPARATED lots need both a separator and a scanner."
                )
        return self

    @property
    def work_mode(self) -> WorkMode:
        if self.assignment_type == AssignmentType.ASSIGNED_SEPARATED:
            return WorkMode.SEPARADOR
        return WorkMode.GERAL
