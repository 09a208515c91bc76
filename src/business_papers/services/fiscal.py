"""Resolution of fiscal identifiers shown for the issuer and the client."""
from __future__ import annotations

from typing import Iterable, Mapping

from ..i18n import fiscal_field_label
from ..models import Language, Party
from ..schemas import (
    CustomFiscalField,
    DocumentTypeConfig,
    FiscalEntry,
    FiscalInfo,
    GlobalCustomFiscalField,
)


def is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def merge_custom_fiscal_fields(
    global_fields: Iterable[GlobalCustomFiscalField],
    type_fields: Iterable[CustomFiscalField],
) -> list[CustomFiscalField]:
    """Merge business-wide definitions with the document type's own fields.

    A type-specific field replaces the global definition sharing its id and
    keeps the global position; new ids are appended. Only enabled fields are
    returned.
    """

    merged: dict[str, CustomFiscalField] = {}
    for definition in global_fields:
        merged[definition.id] = CustomFiscalField(id=definition.id, label=definition.label)
    for definition in type_fields:
        merged[definition.id] = definition
    return [definition for definition in merged.values() if definition.enabled]


def custom_values_with_defaults(
    global_fields: Iterable[GlobalCustomFiscalField],
    custom_values: Mapping[str, str],
) -> dict[str, str]:
    """Document values keyed by field id, falling back to the business-wide value.

    The fallback only applies when the document has no entry for the id.
    """

    values = {definition.id: definition.value for definition in global_fields}
    values.update(custom_values)
    return values


def resolve_fiscal_entries(
    config: DocumentTypeConfig,
    party: Party | str,
    fiscal_info: FiscalInfo,
    custom_values: Mapping[str, str],
    global_custom_fields: Iterable[GlobalCustomFiscalField] = (),
    language: Language | str = Language.EN,
) -> list[FiscalEntry]:
    """Return the ``{key, value}`` pairs to display for one party.

    Built-in identifiers come first, in the configured order, followed by the
    enabled custom fields. Entries with a blank value are dropped.
    """

    party = Party(party)
    entries: list[FiscalEntry] = []

    for field_id in config.fiscal_fields(party):
        entries.append(
            FiscalEntry(key=fiscal_field_label(field_id, language), value=fiscal_info.value_of(field_id))
        )

    global_custom_fields = list(global_custom_fields)
    values = custom_values_with_defaults(global_custom_fields, custom_values)
    for definition in merge_custom_fiscal_fields(global_custom_fields, config.custom_fiscal_fields(party)):
        entries.append(FiscalEntry(key=definition.label, value=values.get(definition.id, "")))

    return [entry for entry in entries if not is_blank(entry.value)]
