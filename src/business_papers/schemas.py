"""Pydantic schemas shared by the engine, the store and the API."""
from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from .models import SUBTRACTIVE_LINE_TYPES, CalculationLineType, FiscalField, Party

logger = logging.getLogger(__name__)


def normalize_number(value: Any) -> float:
    """Coerce form input to a finite float, falling back to ``0``."""

    if isinstance(value, str):
        value = value.strip().replace(",", ".")
    try:
        number = float(value)
    except (TypeError, ValueError):
        return 0.0
    if not math.isfinite(number):
        return 0.0
    return number


class ServiceItem(BaseModel):
    id: str
    description: str = ""
    quantity: float = 0.0
    rate: float = 0.0

    @field_validator("quantity", "rate", mode="before")
    @classmethod
    def _normalize(cls, value: Any) -> float:
        return normalize_number(value)

    @property
    def amount(self) -> float:
        return self.quantity * self.rate


class CalculationLine(BaseModel):
    id: str
    type: CalculationLineType
    label: str
    value: float = 0.0
    order: int = 0
    is_subtraction: bool = False

    @model_validator(mode="before")
    @classmethod
    def _derive_subtraction(cls, data: Any) -> Any:
        # the sign always follows the line type, whatever the payload says
        if isinstance(data, dict) and "type" in data:
            data = dict(data)
            data["is_subtraction"] = CalculationLineType(data["type"]) in SUBTRACTIVE_LINE_TYPES
        return data

    @field_validator("value", mode="before")
    @classmethod
    def _normalize_value(cls, value: Any) -> float:
        return normalize_number(value)

    @field_validator("order", mode="before")
    @classmethod
    def _normalize_order(cls, value: Any) -> int:
        return int(normalize_number(value))


class GovernmentCharge(BaseModel):
    id: str
    name: str
    amount: float = Field(gt=0)
    percentage: bool = False
    is_enabled: bool = True


class CustomFiscalField(BaseModel):
    id: str
    label: str
    enabled: bool = True


class GlobalCustomFiscalField(BaseModel):
    """Business-wide custom fiscal definition shared by every document type."""

    id: str
    label: str
    value: str = ""


class EndingChoice(BaseModel):
    id: str
    label: str


class DocumentTypeConfig(BaseModel):
    document_type_id: str

    show_business_fiscal_info: bool = False
    business_fiscal_fields: list[FiscalField] = Field(default_factory=list)
    business_custom_fiscal_fields: list[CustomFiscalField] = Field(default_factory=list)

    show_client_fiscal_info: bool = False
    client_fiscal_fields: list[FiscalField] = Field(default_factory=list)
    client_custom_fiscal_fields: list[CustomFiscalField] = Field(default_factory=list)

    government_charges: list[GovernmentCharge] = Field(default_factory=list)

    requires_client_fiscal_info: bool = False
    requires_business_fiscal_info: bool = False

    show_tax_calculation: bool = True
    show_due_date: bool = True
    show_notes: bool = True

    show_ending_block: bool = False
    ending_line1_text: str = ""
    ending_line2_text: str = ""
    ending_choices: list[EndingChoice] = Field(default_factory=list)
    signature_image_url: str = ""

    @field_validator("business_fiscal_fields", "client_fiscal_fields", mode="before")
    @classmethod
    def _drop_unknown_fiscal_fields(cls, value: Any) -> Any:
        if not isinstance(value, (list, tuple)):
            return value
        known = {field.value for field in FiscalField}
        ids = [getattr(item, "value", item) for item in value]
        kept = [item for item in ids if isinstance(item, str) and item in known]
        if len(kept) != len(ids):
            logger.warning("Dropping %d unknown fiscal field id(s)", len(ids) - len(kept))
        return kept

    def fiscal_fields(self, party: Party) -> list[FiscalField]:
        if party == Party.BUSINESS:
            return list(self.business_fiscal_fields)
        return list(self.client_fiscal_fields)

    def custom_fiscal_fields(self, party: Party) -> list[CustomFiscalField]:
        if party == Party.BUSINESS:
            return list(self.business_custom_fiscal_fields)
        return list(self.client_custom_fiscal_fields)

    def requires_fiscal_info(self, party: Party) -> bool:
        if party == Party.BUSINESS:
            return self.requires_business_fiscal_info
        return self.requires_client_fiscal_info


class DocumentType(BaseModel):
    id: str
    name: str
    name_fr: str
    name_en: str
    prefix: str
    is_default: bool = False
    is_system: bool = False
    color: str = "#3b82f6"


class FiscalInfo(BaseModel):
    nif: str = ""
    nic: str = ""
    ait: str = ""
    rc: str = ""
    artisan: str = ""
    activity: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_blank(cls, value: Any) -> str:
        return "" if value is None else str(value)

    def value_of(self, field: FiscalField) -> str:
        return getattr(self, FiscalField(field).value)


class DocumentSnapshot(BaseModel):
    document_type_id: str = "invoice"
    document_number: str = ""
    client_name: str = ""
    client_company: str = ""
    project_name: str = ""
    document_date: str = ""
    due_date: str = ""
    notes: str = ""
    services: list[ServiceItem] = Field(default_factory=list)
    calculation_lines: list[CalculationLine] = Field(default_factory=list)
    tax_rate: Optional[float] = None
    business_fiscal: FiscalInfo = Field(default_factory=FiscalInfo)
    client_fiscal: FiscalInfo = Field(default_factory=FiscalInfo)
    business_custom_fiscal: dict[str, str] = Field(default_factory=dict)
    client_custom_fiscal: dict[str, str] = Field(default_factory=dict)

    @field_validator("tax_rate", mode="before")
    @classmethod
    def _normalize_tax_rate(cls, value: Any) -> Optional[float]:
        # absent means "use the configured default rate"
        if value is None or (isinstance(value, str) and not value.strip()):
            return None
        return normalize_number(value)

    def fiscal_info(self, party: Party) -> FiscalInfo:
        return self.business_fiscal if party == Party.BUSINESS else self.client_fiscal

    def custom_fiscal_values(self, party: Party) -> dict[str, str]:
        if party == Party.BUSINESS:
            return dict(self.business_custom_fiscal)
        return dict(self.client_custom_fiscal)


class BreakdownLine(BaseModel):
    label: str
    value: float
    is_subtraction: bool


class CalculationResult(BaseModel):
    subtotal: float
    lines: list[BreakdownLine]
    tax: float
    total: float
    balance_due: float


class GovernmentChargeLine(BaseModel):
    name: str
    amount: float


class GovernmentChargeResult(BaseModel):
    total: float = 0.0
    breakdown: list[GovernmentChargeLine] = Field(default_factory=list)


class FiscalEntry(BaseModel):
    key: str
    value: str


class MissingField(BaseModel):
    party: Party
    field_id: str
    label: str


class DocumentTotals(CalculationResult):
    government_charges: GovernmentChargeResult
    amount_payable: float


class ValidationReport(BaseModel):
    valid: bool
    missing_fields: list[MissingField]


class PreparedDocument(BaseModel):
    missing_fields: list[MissingField]
    totals: Optional[DocumentTotals] = None
    business_entries: list[FiscalEntry] = Field(default_factory=list)
    client_entries: list[FiscalEntry] = Field(default_factory=list)

    @property
    def ready(self) -> bool:
        return not self.missing_fields


class SavedDocumentRead(BaseModel):
    id: int
    document_number: str
    document_type_id: str
    client_name: str
    total: float
    created_at: datetime
    snapshot: DocumentSnapshot


class GovernmentChargeCreate(BaseModel):
    name: str
    amount: float = Field(gt=0)
    percentage: bool = False
    is_enabled: bool = True


class GovernmentChargeUpdate(BaseModel):
    name: Optional[str] = None
    amount: Optional[float] = Field(default=None, gt=0)
    percentage: Optional[bool] = None
    is_enabled: Optional[bool] = None


class DocumentTypeCreate(BaseModel):
    name: str
    name_fr: str
    name_en: str
    prefix: str = Field(min_length=1, max_length=10)
    is_default: bool = False
    color: str = "#3b82f6"


class DocumentTypeUpdate(BaseModel):
    name: Optional[str] = None
    name_fr: Optional[str] = None
    name_en: Optional[str] = None
    prefix: Optional[str] = Field(default=None, min_length=1, max_length=10)
    is_default: Optional[bool] = None
    color: Optional[str] = None


class DocumentNumberRead(BaseModel):
    document_type_id: str
    document_number: str


class DocumentSubmission(BaseModel):
    """A document plus the business-wide custom fiscal definitions in effect."""

    document: DocumentSnapshot
    business_custom_fiscal_fields: list[GlobalCustomFiscalField] = Field(default_factory=list)
    client_custom_fiscal_fields: list[GlobalCustomFiscalField] = Field(default_factory=list)
