"""Fiscal validation gate guarding save and export."""
from __future__ import annotations

import logging
from typing import Iterable

from ..exceptions import MissingFiscalFieldsError
from ..i18n import fiscal_field_label
from ..models import Language, Party
from ..schemas import DocumentSnapshot, DocumentTypeConfig, GlobalCustomFiscalField, MissingField
from .fiscal import custom_values_with_defaults, is_blank, merge_custom_fiscal_fields

logger = logging.getLogger(__name__)


def _missing_for_party(
    snapshot: DocumentSnapshot,
    config: DocumentTypeConfig,
    party: Party,
    global_fields: Iterable[GlobalCustomFiscalField],
    language: Language | str,
) -> list[MissingField]:
    if not config.requires_fiscal_info(party):
        return []

    missing: list[MissingField] = []
    fiscal_info = snapshot.fiscal_info(party)
    # only listed fields are enforced; a required field that is not displayed is unreachable
    for field_id in config.fiscal_fields(party):
        if is_blank(fiscal_info.value_of(field_id)):
            missing.append(
                MissingField(party=party, field_id=field_id.value, label=fiscal_field_label(field_id, language))
            )

    global_fields = list(global_fields)
    custom_values = custom_values_with_defaults(global_fields, snapshot.custom_fiscal_values(party))
    for definition in merge_custom_fiscal_fields(global_fields, config.custom_fiscal_fields(party)):
        if is_blank(custom_values.get(definition.id)):
            missing.append(MissingField(party=party, field_id=definition.id, label=definition.label))
    return missing


def find_missing_fiscal_fields(
    snapshot: DocumentSnapshot,
    config: DocumentTypeConfig,
    global_business_fields: Iterable[GlobalCustomFiscalField] = (),
    global_client_fields: Iterable[GlobalCustomFiscalField] = (),
    language: Language | str = Language.EN,
) -> list[MissingField]:
    """List the mandatory fiscal fields left blank, issuer first then client.

    An empty list means the document may be saved and exported.
    """

    return _missing_for_party(
        snapshot, config, Party.BUSINESS, global_business_fields, language
    ) + _missing_for_party(snapshot, config, Party.CLIENT, global_client_fields, language)


def ensure_document_is_complete(
    snapshot: DocumentSnapshot,
    config: DocumentTypeConfig,
    global_business_fields: Iterable[GlobalCustomFiscalField] = (),
    global_client_fields: Iterable[GlobalCustomFiscalField] = (),
    language: Language | str = Language.EN,
) -> None:
    missing = find_missing_fiscal_fields(
        snapshot, config, global_business_fields, global_client_fields, language
    )
    if missing:
        logger.warning(
            "Blocked %s document: %d required fiscal field(s) missing",
            config.document_type_id,
            len(missing),
        )
        raise MissingFiscalFieldsError(missing)
