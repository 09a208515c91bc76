"""Document endpoints consumed by the form layer."""
from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, HTTPException

from ..config import get_settings
from ..exceptions import DocumentNotFoundError, MissingFiscalFieldsError
from ..schemas import (
    DocumentSubmission,
    DocumentTotals,
    PreparedDocument,
    SavedDocumentRead,
    ValidationReport,
)
from ..services import storage
from ..services.totals import compute_document_totals, prepare_document
from ..services.validators import find_missing_fiscal_fields

router = APIRouter(prefix="/documents", tags=["documents"])


@router.post("/calculate", response_model=DocumentTotals)
def calculate_document(payload: DocumentSubmission) -> DocumentTotals:
    config = storage.get_config(payload.document.document_type_id)
    settings = get_settings()
    return compute_document_totals(payload.document, config, settings.language, settings.default_tax_rate)


@router.post("/validate", response_model=ValidationReport)
def validate_document(payload: DocumentSubmission) -> ValidationReport:
    config = storage.get_config(payload.document.document_type_id)
    missing = find_missing_fiscal_fields(
        payload.document,
        config,
        payload.business_custom_fiscal_fields,
        payload.client_custom_fiscal_fields,
        get_settings().language,
    )
    return ValidationReport(valid=not missing, missing_fields=missing)


@router.post("/prepare", response_model=PreparedDocument)
def prepare(payload: DocumentSubmission) -> PreparedDocument:
    settings = get_settings()
    config = storage.get_config(payload.document.document_type_id)
    return prepare_document(
        payload.document,
        config,
        payload.business_custom_fiscal_fields,
        payload.client_custom_fiscal_fields,
        settings.language,
        settings.default_tax_rate,
    )


@router.post("", response_model=SavedDocumentRead)
def save_document(payload: DocumentSubmission) -> SavedDocumentRead:
    try:
        return storage.save_document(
            payload.document,
            payload.business_custom_fiscal_fields,
            payload.client_custom_fiscal_fields,
        )
    except MissingFiscalFieldsError as exc:
        raise HTTPException(
            status_code=422,
            detail={
                "message": str(exc),
                "missing_fields": [entry.model_dump(mode="json") for entry in exc.missing],
            },
        ) from exc


@router.get("", response_model=list[SavedDocumentRead])
def list_documents(document_type_id: Optional[str] = None) -> list[SavedDocumentRead]:
    return storage.list_documents(document_type_id)


@router.get("/{document_id}", response_model=SavedDocumentRead)
def get_document(document_id: int) -> SavedDocumentRead:
    try:
        return storage.get_document(document_id)
    except DocumentNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document not found") from exc
