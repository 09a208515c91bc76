"""Localized labels used by the engine outputs."""
from __future__ import annotations

from .models import FiscalField, Language

FISCAL_FIELD_LABELS: dict[FiscalField, dict[Language, str]] = {
    FiscalField.NIF: {Language.FR: "NIF", Language.EN: "Tax ID"},
    FiscalField.NIC: {Language.FR: "NIC", Language.EN: "National ID"},
    FiscalField.AIT: {
        Language.FR: "Impôt sur l'activité professionnelle",
        Language.EN: "Professional Activity Tax",
    },
    FiscalField.RC: {Language.FR: "Numéro RC", Language.EN: "Commercial Register No."},
    FiscalField.ARTISAN: {Language.FR: "Numéro d'artisan", Language.EN: "Artisan Number"},
    FiscalField.ACTIVITY: {Language.FR: "Activité", Language.EN: "Activity"},
}

DEPOSIT_LABELS: dict[Language, str] = {
    Language.FR: "Acompte versé",
    Language.EN: "Deposit Paid",
}


def _language(value: Language | str) -> Language:
    return value if isinstance(value, Language) else Language(value)


def fiscal_field_label(field: FiscalField | str, language: Language | str = Language.EN) -> str:
    return FISCAL_FIELD_LABELS[FiscalField(field)][_language(language)]


def deposit_label(language: Language | str = Language.EN) -> str:
    return DEPOSIT_LABELS[_language(language)]
