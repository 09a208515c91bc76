"""Exceptions raised outside the pure computation paths."""
from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from .schemas import MissingField


class MissingFiscalFieldsError(ValueError):
    """A document cannot be saved or exported while mandatory fiscal data is blank."""

    def __init__(self, missing: Sequence["MissingField"]) -> None:
        self.missing = list(missing)
        labels = ", ".join(f"{entry.party.value}: {entry.label}" for entry in self.missing)
        super().__init__(f"Missing required fiscal information ({labels})")


class DocumentTypeNotFoundError(LookupError):
    def __init__(self, document_type_id: str) -> None:
        self.document_type_id = document_type_id
        super().__init__(f"Unknown document type: {document_type_id}")


class SystemDocumentTypeError(ValueError):
    def __init__(self, document_type_id: str) -> None:
        self.document_type_id = document_type_id
        super().__init__(f"System document type cannot be deleted: {document_type_id}")


class GovernmentChargeNotFoundError(LookupError):
    def __init__(self, document_type_id: str, charge_id: str) -> None:
        self.document_type_id = document_type_id
        self.charge_id = charge_id
        super().__init__(f"Government charge {charge_id} not found for {document_type_id}")


class DocumentNotFoundError(LookupError):
    def __init__(self, document_id: int) -> None:
        self.document_id = document_id
        super().__init__(f"Saved document not found: {document_id}")
