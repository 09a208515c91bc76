"""Local persistence of document types, their configurations and saved documents."""
from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlmodel import Session, select

from ..config import get_settings
from ..db import get_session
from ..exceptions import DocumentNotFoundError, DocumentTypeNotFoundError
from ..models import DocumentTypeConfigRecord, DocumentTypeRecord, SavedDocument
from ..schemas import (
    DocumentSnapshot,
    DocumentType,
    DocumentTypeConfig,
    DocumentTypeCreate,
    DocumentTypeUpdate,
    GlobalCustomFiscalField,
    GovernmentChargeCreate,
    GovernmentChargeUpdate,
    SavedDocumentRead,
)
from . import document_types
from .numbering import generate_document_number
from .totals import compute_document_totals
from .validators import ensure_document_is_complete

logger = logging.getLogger(__name__)


def _stored_document_types(session: Session) -> list[DocumentType]:
    records = session.exec(select(DocumentTypeRecord).order_by(DocumentTypeRecord.position)).all()
    types: list[DocumentType] = []
    for record in records:
        parsed = document_types.parse_document_type(record.payload)
        if parsed.value is not None:
            types.append(parsed.value)
    return types


def _write_document_types(session: Session, types: Iterable[DocumentType]) -> None:
    records = {record.document_type_id: record for record in session.exec(select(DocumentTypeRecord)).all()}
    for position, document_type in enumerate(types):
        record = records.pop(document_type.id, None)
        if record is None:
            record = DocumentTypeRecord(document_type_id=document_type.id, payload="")
        record.position = position
        record.payload = document_type.model_dump_json()
        record.touch()
        session.add(record)
    for record in records.values():
        session.delete(record)


def load_document_types() -> list[DocumentType]:
    with get_session() as session:
        return document_types.merge_document_types(_stored_document_types(session))


def find_document_type(document_type_id: str) -> Optional[DocumentType]:
    for document_type in load_document_types():
        if document_type.id == document_type_id:
            return document_type
    return None


def get_document_type(document_type_id: str) -> DocumentType:
    document_type = find_document_type(document_type_id)
    if document_type is None:
        raise DocumentTypeNotFoundError(document_type_id)
    return document_type


def create_document_type(payload: DocumentTypeCreate) -> DocumentType:
    document_type = DocumentType(id=document_types.new_document_type_id(), is_system=False, **payload.model_dump())
    with get_session() as session:
        types = [*document_types.merge_document_types(_stored_document_types(session)), document_type]
        if document_type.is_default:
            types = document_types.with_default(types, document_type.id)
        _write_document_types(session, types)
    logger.info("Created document type %s (%s)", document_type.id, document_type.prefix)
    return document_type


def update_document_type(document_type_id: str, updates: DocumentTypeUpdate) -> DocumentType:
    with get_session() as session:
        types = document_types.update_document_type(
            document_types.merge_document_types(_stored_document_types(session)), document_type_id, updates
        )
        _write_document_types(session, types)
    logger.info("Updated document type %s", document_type_id)
    return next(document_type for document_type in types if document_type.id == document_type_id)


def set_default_document_type(document_type_id: str) -> list[DocumentType]:
    with get_session() as session:
        types = document_types.merge_document_types(_stored_document_types(session))
        if not any(document_type.id == document_type_id for document_type in types):
            raise DocumentTypeNotFoundError(document_type_id)
        types = document_types.with_default(types, document_type_id)
        _write_document_types(session, types)
        return types


def delete_document_type(document_type_id: str) -> None:
    with get_session() as session:
        types = document_types.merge_document_types(_stored_document_types(session))
        target = next((document_type for document_type in types if document_type.id == document_type_id), None)
        if target is None:
            raise DocumentTypeNotFoundError(document_type_id)
        document_types.ensure_deletable(target)
        _write_document_types(session, [document_type for document_type in types if document_type.id != document_type_id])
        record = session.get(DocumentTypeConfigRecord, document_type_id)
        if record is not None:
            session.delete(record)
    logger.info("Deleted document type %s", document_type_id)


def load_configs() -> list[DocumentTypeConfig]:
    """All configurations, stored ones validated and completed with defaults."""

    with get_session() as session:
        stored = [
            document_types.parse_document_type_config(record.payload, record.document_type_id).value
            for record in session.exec(select(DocumentTypeConfigRecord)).all()
        ]
        types = document_types.merge_document_types(_stored_document_types(session))
    return document_types.merge_with_defaults(stored, types)


def get_config(document_type_id: str) -> DocumentTypeConfig:
    with get_session() as session:
        record = session.get(DocumentTypeConfigRecord, document_type_id)
        if record is None:
            return document_types.default_config(document_type_id)
        return document_types.parse_document_type_config(record.payload, document_type_id).value


def save_config(config: DocumentTypeConfig) -> DocumentTypeConfig:
    with get_session() as session:
        record = session.get(DocumentTypeConfigRecord, config.document_type_id)
        if record is None:
            record = DocumentTypeConfigRecord(document_type_id=config.document_type_id, payload="")
        record.payload = config.model_dump_json()
        record.touch()
        session.add(record)
    return config


def add_government_charge(document_type_id: str, payload: GovernmentChargeCreate) -> DocumentTypeConfig:
    return save_config(document_types.add_government_charge(get_config(document_type_id), payload))


def update_government_charge(
    document_type_id: str, charge_id: str, updates: GovernmentChargeUpdate
) -> DocumentTypeConfig:
    return save_config(document_types.update_government_charge(get_config(document_type_id), charge_id, updates))


def remove_government_charge(document_type_id: str, charge_id: str) -> DocumentTypeConfig:
    return save_config(document_types.remove_government_charge(get_config(document_type_id), charge_id))


def _to_read(document: SavedDocument) -> SavedDocumentRead:
    return SavedDocumentRead(
        id=document.id,
        document_number=document.document_number,
        document_type_id=document.document_type_id,
        client_name=document.client_name,
        total=document.total,
        created_at=document.created_at,
        snapshot=DocumentSnapshot.model_validate_json(document.payload),
    )


def save_document(
    snapshot: DocumentSnapshot,
    global_business_fields: Iterable[GlobalCustomFiscalField] = (),
    global_client_fields: Iterable[GlobalCustomFiscalField] = (),
) -> SavedDocumentRead:
    """Freeze a copy of the document once the fiscal gate lets it through.

    Raises :class:`MissingFiscalFieldsError` without writing anything when
    mandatory fiscal data is blank. The stored ``total`` is the balance due.
    """

    settings = get_settings()
    config = get_config(snapshot.document_type_id)
    ensure_document_is_complete(
        snapshot, config, global_business_fields, global_client_fields, settings.language
    )
    totals = compute_document_totals(snapshot, config, settings.language, settings.default_tax_rate)
    if snapshot.tax_rate is None:
        snapshot = snapshot.model_copy(update={"tax_rate": settings.default_tax_rate})
    if not snapshot.document_number.strip():
        number = generate_document_number(find_document_type(snapshot.document_type_id))
        snapshot = snapshot.model_copy(update={"document_number": number})

    with get_session() as session:
        document = SavedDocument(
            document_number=snapshot.document_number,
            document_type_id=snapshot.document_type_id,
            client_name=snapshot.client_name,
            total=totals.balance_due,
            payload=snapshot.model_dump_json(),
        )
        session.add(document)
        session.flush()
        session.refresh(document)
        logger.info("Saved %s %s", document.document_type_id, document.document_number)
        return _to_read(document)


def list_documents(document_type_id: Optional[str] = None) -> list[SavedDocumentRead]:
    with get_session() as session:
        statement = select(SavedDocument).order_by(SavedDocument.created_at.desc(), SavedDocument.id.desc())
        if document_type_id:
            statement = statement.where(SavedDocument.document_type_id == document_type_id)
        return [_to_read(document) for document in session.exec(statement).all()]


def get_document(document_id: int) -> SavedDocumentRead:
    with get_session() as session:
        document = session.get(SavedDocument, document_id)
        if document is None:
            raise DocumentNotFoundError(document_id)
        return _to_read(document)
