"""End-to-end document pipeline: validation gate, totals and fiscal entries."""
from __future__ import annotations

import logging
from typing import Iterable

from ..models import Language, Party
from ..schemas import (
    DocumentSnapshot,
    DocumentTotals,
    DocumentTypeConfig,
    GlobalCustomFiscalField,
    PreparedDocument,
)
from .calculation_lines import compute_subtotal
from .fiscal import resolve_fiscal_entries
from .government_charges import calculate_government_charges
from .tax import calculate_with_custom_lines
from .validators import find_missing_fiscal_fields

logger = logging.getLogger(__name__)


def compute_document_totals(
    snapshot: DocumentSnapshot,
    config: DocumentTypeConfig,
    language: Language | str = Language.EN,
    default_tax_rate: float = 0.0,
) -> DocumentTotals:
    """Run the adjustment, tax/deposit and government charge stages.

    Government charges use the original subtotal as their base and are added
    to the balance due to give ``amount_payable``. ``default_tax_rate`` applies
    when the document carries no rate of its own.
    """

    tax_rate = default_tax_rate if snapshot.tax_rate is None else snapshot.tax_rate
    subtotal = compute_subtotal(snapshot.services)
    calculation = calculate_with_custom_lines(subtotal, tax_rate, snapshot.calculation_lines, language)
    charges = calculate_government_charges(config, subtotal)
    totals = DocumentTotals(
        **calculation.model_dump(),
        government_charges=charges,
        amount_payable=calculation.balance_due + charges.total,
    )
    logger.debug(
        "Computed %s totals: subtotal=%s balance_due=%s charges=%s",
        config.document_type_id,
        totals.subtotal,
        totals.balance_due,
        charges.total,
    )
    return totals


def prepare_document(
    snapshot: DocumentSnapshot,
    config: DocumentTypeConfig,
    global_business_fields: Iterable[GlobalCustomFiscalField] = (),
    global_client_fields: Iterable[GlobalCustomFiscalField] = (),
    language: Language | str = Language.EN,
    default_tax_rate: float = 0.0,
) -> PreparedDocument:
    """Check the document first and compute totals only when it may proceed."""

    business_fields = list(global_business_fields)
    client_fields = list(global_client_fields)
    missing = find_missing_fiscal_fields(snapshot, config, business_fields, client_fields, language)
    if missing:
        return PreparedDocument(missing_fields=missing)

    return PreparedDocument(
        missing_fields=[],
        totals=compute_document_totals(snapshot, config, language, default_tax_rate),
        business_entries=resolve_fiscal_entries(
            config,
            Party.BUSINESS,
            snapshot.business_fiscal,
            snapshot.business_custom_fiscal,
            business_fields,
            language,
        ),
        client_entries=resolve_fiscal_entries(
            config,
            Party.CLIENT,
            snapshot.client_fiscal,
            snapshot.client_custom_fiscal,
            client_fields,
            language,
        ),
    )
