"""Document type and per-type configuration endpoints."""
from __future__ import annotations

from fastapi import APIRouter, HTTPException, Response

from ..exceptions import (
    DocumentTypeNotFoundError,
    GovernmentChargeNotFoundError,
    SystemDocumentTypeError,
)
from ..schemas import (
    DocumentNumberRead,
    DocumentType,
    DocumentTypeConfig,
    DocumentTypeCreate,
    DocumentTypeUpdate,
    GovernmentChargeCreate,
    GovernmentChargeUpdate,
)
from ..services import storage
from ..services.numbering import generate_document_number

router = APIRouter(prefix="/document-types", tags=["document-types"])


def _require_type(document_type_id: str) -> DocumentType:
    try:
        return storage.get_document_type(document_type_id)
    except DocumentTypeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document type not found") from exc


@router.get("", response_model=list[DocumentType])
def list_document_types() -> list[DocumentType]:
    return storage.load_document_types()


@router.post("", response_model=DocumentType)
def create_document_type(payload: DocumentTypeCreate) -> DocumentType:
    return storage.create_document_type(payload)


@router.get("/configs", response_model=list[DocumentTypeConfig])
def list_configs() -> list[DocumentTypeConfig]:
    return storage.load_configs()


@router.patch("/{document_type_id}", response_model=DocumentType)
def update_document_type(document_type_id: str, payload: DocumentTypeUpdate) -> DocumentType:
    try:
        return storage.update_document_type(document_type_id, payload)
    except DocumentTypeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document type not found") from exc


@router.delete("/{document_type_id}", status_code=204)
def delete_document_type(document_type_id: str) -> Response:
    try:
        storage.delete_document_type(document_type_id)
    except DocumentTypeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document type not found") from exc
    except SystemDocumentTypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return Response(status_code=204)


@router.post("/{document_type_id}/default", response_model=list[DocumentType])
def make_default(document_type_id: str) -> list[DocumentType]:
    try:
        return storage.set_default_document_type(document_type_id)
    except DocumentTypeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Document type not found") from exc


@router.post("/{document_type_id}/number", response_model=DocumentNumberRead)
def next_document_number(document_type_id: str) -> DocumentNumberRead:
    document_type = _require_type(document_type_id)
    return DocumentNumberRead(
        document_type_id=document_type.id,
        document_number=generate_document_number(document_type),
    )


@router.get("/{document_type_id}/config", response_model=DocumentTypeConfig)
def get_config(document_type_id: str) -> DocumentTypeConfig:
    _require_type(document_type_id)
    return storage.get_config(document_type_id)


@router.put("/{document_type_id}/config", response_model=DocumentTypeConfig)
def put_config(document_type_id: str, payload: DocumentTypeConfig) -> DocumentTypeConfig:
    _require_type(document_type_id)
    if payload.document_type_id != document_type_id:
        raise HTTPException(status_code=400, detail="Document type id mismatch")
    return storage.save_config(payload)


@router.post("/{document_type_id}/government-charges", response_model=DocumentTypeConfig)
def add_government_charge(document_type_id: str, payload: GovernmentChargeCreate) -> DocumentTypeConfig:
    _require_type(document_type_id)
    return storage.add_government_charge(document_type_id, payload)


@router.patch("/{document_type_id}/government-charges/{charge_id}", response_model=DocumentTypeConfig)
def update_government_charge(
    document_type_id: str, charge_id: str, payload: GovernmentChargeUpdate
) -> DocumentTypeConfig:
    _require_type(document_type_id)
    try:
        return storage.update_government_charge(document_type_id, charge_id, payload)
    except GovernmentChargeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Government charge not found") from exc


@router.delete("/{document_type_id}/government-charges/{charge_id}", response_model=DocumentTypeConfig)
def remove_government_charge(document_type_id: str, charge_id: str) -> DocumentTypeConfig:
    _require_type(document_type_id)
    try:
        return storage.remove_government_charge(document_type_id, charge_id)
    except GovernmentChargeNotFoundError as exc:
        raise HTTPException(status_code=404, detail="Government charge not found") from exc
