"""Enumerations and database tables for the local document store."""
from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

import pendulum
from sqlmodel import Field, SQLModel


class TimestampMixin(SQLModel):
    created_at: datetime = Field(default_factory=lambda: pendulum.now("UTC"))
    updated_at: datetime = Field(default_factory=lambda: pendulum.now("UTC"))

    def touch(self) -> None:
        self.updated_at = pendulum.now("UTC")


class Language(str, Enum):
    EN = "en"
    FR = "fr"


class Party(str, Enum):
    BUSINESS = "business"
    CLIENT = "client"


class FiscalField(str, Enum):
    NIF = "nif"
    NIC = "nic"
    AIT = "ait"
    RC = "rc"
    ARTISAN = "artisan"
    ACTIVITY = "activity"


class CalculationLineType(str, Enum):
    DISCOUNT_PERCENT = "discount_percent"
    DISCOUNT_FIXED = "discount_fixed"
    SHIPPING = "shipping"
    DEPOSIT = "deposit"
    ADDITIONAL_FEE = "additional_fee"
    CUSTOM = "custom"


SUBTRACTIVE_LINE_TYPES = frozenset(
    {
        CalculationLineType.DISCOUNT_PERCENT,
        CalculationLineType.DISCOUNT_FIXED,
        CalculationLineType.DEPOSIT,
    }
)


class DocumentTypeRecord(TimestampMixin, table=True):
    document_type_id: str = Field(primary_key=True)
    position: int = Field(default=0)
    payload: str


class DocumentTypeConfigRecord(TimestampMixin, table=True):
    document_type_id: str = Field(primary_key=True)
    payload: str


class SavedDocument(TimestampMixin, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    document_number: str = Field(index=True)
    document_type_id: str = Field(index=True)
    client_name: str = Field(default="")
    total: float
    payload: str = Field(description="Frozen JSON copy of the document snapshot")
