"""Document types and their per-type configuration records."""
from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any, Generic, Iterable, Optional, TypeVar

from pydantic import ValidationError

from ..exceptions import DocumentTypeNotFoundError, GovernmentChargeNotFoundError, SystemDocumentTypeError
from ..models import FiscalField
from ..schemas import (
    DocumentType,
    DocumentTypeConfig,
    DocumentTypeUpdate,
    GovernmentCharge,
    GovernmentChargeCreate,
    GovernmentChargeUpdate,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Outcome of validating a stored record: always a usable value."""

    value: T
    error: Optional[ValidationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


DEFAULT_DOCUMENT_TYPES: tuple[DocumentType, ...] = (
    DocumentType(
        id="invoice",
        name="Facture",
        name_fr="Facture",
        name_en="Invoice",
        prefix="FAC",
        is_default=True,
        is_system=True,
        color="#3b82f6",
    ),
    DocumentType(
        id="quote",
        name="Devis",
        name_fr="Devis",
        name_en="Quote",
        prefix="DEV",
        is_system=True,
        color="#8b5cf6",
    ),
    DocumentType(
        id="delivery_note",
        name="Bon de livraison",
        name_fr="Bon de livraison",
        name_en="Delivery Note",
        prefix="BL",
        is_system=True,
        color="#10b981",
    ),
    DocumentType(
        id="proforma",
        name="Proforma",
        name_fr="Proforma",
        name_en="Proforma",
        prefix="PRO",
        is_system=True,
        color="#06b6d4",
    ),
    DocumentType(
        id="credit_note",
        name="Avoir",
        name_fr="Avoir",
        name_en="Credit Note",
        prefix="AVO",
        is_system=True,
        color="#ef4444",
    ),
)

_FULL_BUSINESS = [FiscalField.NIF, FiscalField.NIC, FiscalField.RC]
_SHORT_BUSINESS = [FiscalField.NIF, FiscalField.NIC]
_CLIENT = [FiscalField.NIF, FiscalField.NIC]

DEFAULT_CONFIGS: tuple[DocumentTypeConfig, ...] = (
    DocumentTypeConfig(
        document_type_id="invoice",
        show_business_fiscal_info=True,
        business_fiscal_fields=_FULL_BUSINESS,
        show_client_fiscal_info=True,
        client_fiscal_fields=_CLIENT,
    ),
    DocumentTypeConfig(
        document_type_id="quote",
        show_business_fiscal_info=True,
        business_fiscal_fields=_SHORT_BUSINESS,
        show_due_date=False,
    ),
    DocumentTypeConfig(
        document_type_id="delivery_note",
        show_business_fiscal_info=True,
        business_fiscal_fields=_FULL_BUSINESS,
        show_client_fiscal_info=True,
        client_fiscal_fields=_CLIENT,
        show_tax_calculation=False,
        show_due_date=False,
    ),
    DocumentTypeConfig(
        document_type_id="proforma",
        show_business_fiscal_info=True,
        business_fiscal_fields=_SHORT_BUSINESS,
        show_due_date=False,
    ),
    DocumentTypeConfig(
        document_type_id="credit_note",
        show_business_fiscal_info=True,
        business_fiscal_fields=_FULL_BUSINESS,
        show_client_fiscal_info=True,
        client_fiscal_fields=_CLIENT,
    ),
)

_DEFAULT_CONFIGS_BY_ID = {config.document_type_id: config for config in DEFAULT_CONFIGS}


def blank_config(document_type_id: str) -> DocumentTypeConfig:
    return DocumentTypeConfig(document_type_id=document_type_id)


def default_config(document_type_id: str) -> DocumentTypeConfig:
    """System default for a known type, a blank configuration otherwise."""

    config = _DEFAULT_CONFIGS_BY_ID.get(document_type_id)
    if config is None:
        return blank_config(document_type_id)
    return config.model_copy(deep=True)


def _validate(model: type[T], raw: Any) -> T:
    if isinstance(raw, (str, bytes)):
        return model.model_validate_json(raw)  # type: ignore[attr-defined]
    return model.model_validate(raw)  # type: ignore[attr-defined]


def parse_document_type_config(raw: Any, document_type_id: str) -> ParseResult[DocumentTypeConfig]:
    """Validate a stored configuration, falling back to the type's default.

    ``raw`` may be a mapping or the JSON text read from the store.
    """

    try:
        config = _validate(DocumentTypeConfig, raw)
    except ValidationError as exc:
        logger.warning(
            "Ignoring malformed configuration for %s: %d error(s)",
            document_type_id,
            exc.error_count(),
        )
        return ParseResult(default_config(document_type_id), exc)
    if config.document_type_id != document_type_id:
        config = config.model_copy(update={"document_type_id": document_type_id})
    return ParseResult(config)


def parse_document_type(raw: Any) -> ParseResult[Optional[DocumentType]]:
    try:
        return ParseResult(_validate(DocumentType, raw))
    except ValidationError as exc:
        logger.warning("Ignoring malformed document type: %d error(s)", exc.error_count())
        return ParseResult(None, exc)


def merge_document_types(stored: Iterable[DocumentType]) -> list[DocumentType]:
    """Stored types in their order, followed by any missing system type."""

    types = [document_type.model_copy() for document_type in stored]
    stored_ids = {document_type.id for document_type in types}
    types.extend(
        default.model_copy() for default in DEFAULT_DOCUMENT_TYPES if default.id not in stored_ids
    )
    return types


def merge_with_defaults(
    stored: Iterable[DocumentTypeConfig],
    document_types: Iterable[DocumentType] = DEFAULT_DOCUMENT_TYPES,
) -> list[DocumentTypeConfig]:
    """Stored configs win, then system defaults, then blank configs for other known types."""

    merged: dict[str, DocumentTypeConfig] = {}
    for config in stored:
        merged[config.document_type_id] = config
    for config in DEFAULT_CONFIGS:
        merged.setdefault(config.document_type_id, config.model_copy(deep=True))
    for document_type in document_types:
        merged.setdefault(document_type.id, blank_config(document_type.id))
    return list(merged.values())


def add_government_charge(config: DocumentTypeConfig, payload: GovernmentChargeCreate) -> DocumentTypeConfig:
    charge = GovernmentCharge(id=secrets.token_hex(8), **payload.model_dump())
    return config.model_copy(update={"government_charges": [*config.government_charges, charge]}, deep=True)


def remove_government_charge(config: DocumentTypeConfig, charge_id: str) -> DocumentTypeConfig:
    charges = [charge for charge in config.government_charges if charge.id != charge_id]
    if len(charges) == len(config.government_charges):
        raise GovernmentChargeNotFoundError(config.document_type_id, charge_id)
    return config.model_copy(update={"government_charges": charges}, deep=True)


def update_government_charge(
    config: DocumentTypeConfig,
    charge_id: str,
    updates: GovernmentChargeUpdate,
) -> DocumentTypeConfig:
    changes = updates.model_dump(exclude_none=True)
    charges: list[GovernmentCharge] = []
    found = False
    for charge in config.government_charges:
        if charge.id == charge_id:
            found = True
            charge = GovernmentCharge.model_validate({**charge.model_dump(), **changes})
        charges.append(charge)
    if not found:
        raise GovernmentChargeNotFoundError(config.document_type_id, charge_id)
    return config.model_copy(update={"government_charges": charges}, deep=True)


def new_document_type_id() -> str:
    return secrets.token_hex(8)


def update_document_type(
    types: Iterable[DocumentType],
    document_type_id: str,
    updates: DocumentTypeUpdate,
) -> list[DocumentType]:
    """Apply a partial update to one type; ``id`` and ``is_system`` never change.

    Making a type the default clears the flag on every other type.
    """

    changes = updates.model_dump(exclude_none=True)
    updated: list[DocumentType] = []
    found = False
    for document_type in types:
        if document_type.id == document_type_id:
            found = True
            changes.update(id=document_type.id, is_system=document_type.is_system)
            document_type = DocumentType.model_validate({**document_type.model_dump(), **changes})
        updated.append(document_type)
    if not found:
        raise DocumentTypeNotFoundError(document_type_id)
    if changes.get("is_default"):
        updated = with_default(updated, document_type_id)
    return updated


def ensure_deletable(document_type: DocumentType) -> None:
    if document_type.is_system:
        raise SystemDocumentTypeError(document_type.id)


def with_default(types: Iterable[DocumentType], document_type_id: str) -> list[DocumentType]:
    return [
        document_type.model_copy(update={"is_default": document_type.id == document_type_id})
        for document_type in types
    ]
