from __future__ import annotations

import pytest

from business_papers.exceptions import MissingFiscalFieldsError
from business_papers.models import FiscalField, Language, Party
from business_papers.schemas import (
    CustomFiscalField,
    DocumentTypeConfig,
    FiscalInfo,
    GlobalCustomFiscalField,
)
from business_papers.services.fiscal import merge_custom_fiscal_fields, resolve_fiscal_entries
from business_papers.services.validators import ensure_document_is_complete, find_missing_fiscal_fields


def test_builtin_entries_follow_configured_order_and_skip_blanks():
    config = DocumentTypeConfig(
        document_type_id="invoice",
        business_fiscal_fields=[FiscalField.RC, FiscalField.NIF, FiscalField.NIC],
    )
    info = FiscalInfo(nif="000123456789", nic="   ", rc="16/00-1234567B")

    entries = resolve_fiscal_entries(config, Party.BUSINESS, info, {})

    assert [(entry.key, entry.value) for entry in entries] == [
        ("Commercial Register No.", "16/00-1234567B"),
        ("Tax ID", "000123456789"),
    ]


def test_french_labels():
    config = DocumentTypeConfig(document_type_id="invoice", client_fiscal_fields=[FiscalField.ARTISAN])

    entries = resolve_fiscal_entries(config, "client", FiscalInfo(artisan="A-77"), {}, language=Language.FR)

    assert entries[0].key == "Numéro d'artisan"


def test_type_specific_custom_fields_override_global_ones():
    global_fields = [
        GlobalCustomFiscalField(id="vat", label="VAT number"),
        GlobalCustomFiscalField(id="iban", label="IBAN"),
    ]
    type_fields = [
        CustomFiscalField(id="vat", label="Intra-community VAT"),
        CustomFiscalField(id="iban", label="IBAN", enabled=False),
        CustomFiscalField(id="siret", label="SIRET"),
    ]

    merged = merge_custom_fiscal_fields(global_fields, type_fields)

    assert [(field.id, field.label) for field in merged] == [("vat", "Intra-community VAT"), ("siret", "SIRET")]


def test_custom_values_are_resolved_by_field_id():
    config = DocumentTypeConfig(
        document_type_id="invoice",
        client_custom_fiscal_fields=[CustomFiscalField(id="siret", label="SIRET")],
    )

    entries = resolve_fiscal_entries(
        config,
        Party.CLIENT,
        FiscalInfo(),
        {"siret": "552 100 554 00025", "unused": "x"},
        [GlobalCustomFiscalField(id="po", label="PO reference")],
    )

    assert [(entry.key, entry.value) for entry in entries] == [("SIRET", "552 100 554 00025")]


def test_missing_client_nif_blocks_the_document(snapshot_factory):
    config = DocumentTypeConfig(
        document_type_id="invoice",
        requires_client_fiscal_info=True,
        client_fiscal_fields=[FiscalField.NIF],
    )
    snapshot = snapshot_factory(client_fiscal=FiscalInfo(nif=""))

    missing = find_missing_fiscal_fields(snapshot, config)

    assert len(missing) == 1
    assert missing[0].party == Party.CLIENT
    assert missing[0].field_id == "nif"
    assert missing[0].label == "Tax ID"
    with pytest.raises(MissingFiscalFieldsError) as excinfo:
        ensure_document_is_complete(snapshot, config)
    assert excinfo.value.missing == missing


def test_requirements_are_checked_per_party(snapshot_factory):
    config = DocumentTypeConfig(
        document_type_id="invoice",
        business_fiscal_fields=[FiscalField.NIF, FiscalField.RC],
        requires_business_fiscal_info=True,
        client_fiscal_fields=[FiscalField.NIF],
        requires_client_fiscal_info=False,
        business_custom_fiscal_fields=[CustomFiscalField(id="ait", label="AIT code")],
    )
    snapshot = snapshot_factory(business_fiscal=FiscalInfo(nif="123", rc=" "))

    missing = find_missing_fiscal_fields(snapshot, config)

    assert [(entry.party, entry.field_id) for entry in missing] == [
        (Party.BUSINESS, "rc"),
        (Party.BUSINESS, "ait"),
    ]


def test_global_custom_fields_are_enforced(snapshot_factory):
    config = DocumentTypeConfig(document_type_id="invoice", requires_client_fiscal_info=True)
    global_client = [GlobalCustomFiscalField(id="po", label="PO reference")]

    blank = snapshot_factory()
    filled = snapshot_factory(client_custom_fiscal={"po": "PO-42"})

    assert [entry.label for entry in find_missing_fiscal_fields(blank, config, (), global_client)] == ["PO reference"]
    assert find_missing_fiscal_fields(filled, config, (), global_client) == []


def test_disabled_custom_field_is_not_required(snapshot_factory):
    config = DocumentTypeConfig(
        document_type_id="invoice",
        requires_business_fiscal_info=True,
        business_custom_fiscal_fields=[CustomFiscalField(id="x", label="X", enabled=False)],
    )

    assert find_missing_fiscal_fields(snapshot_factory(), config) == []


def test_required_but_hidden_field_is_not_enforced(snapshot_factory):
    config = DocumentTypeConfig(
        document_type_id="invoice",
        requires_client_fiscal_info=True,
        client_fiscal_fields=[],
    )

    assert find_missing_fiscal_fields(snapshot_factory(client_fiscal=FiscalInfo(nif="")), config) == []


def test_nothing_required_means_nothing_missing(snapshot_factory):
    config = DocumentTypeConfig(
        document_type_id="invoice",
        business_fiscal_fields=[FiscalField.NIF],
        client_fiscal_fields=[FiscalField.NIF],
    )

    assert find_missing_fiscal_fields(snapshot_factory(), config) == []


def test_business_wide_value_fills_a_missing_custom_entry(snapshot_factory):
    config = DocumentTypeConfig(document_type_id="invoice", requires_business_fiscal_info=True)
    global_business = [GlobalCustomFiscalField(id="ai", label="AI number", value="AI-123")]
    snapshot = snapshot_factory()

    assert find_missing_fiscal_fields(snapshot, config, global_business) == []
    entries = resolve_fiscal_entries(config, Party.BUSINESS, FiscalInfo(), {}, global_business)
    assert [(entry.key, entry.value) for entry in entries] == [("AI number", "AI-123")]


def test_document_entry_overrides_the_business_wide_value(snapshot_factory):
    config = DocumentTypeConfig(document_type_id="invoice", requires_client_fiscal_info=True)
    global_client = [GlobalCustomFiscalField(id="po", label="PO reference", value="PO-DEFAULT")]

    cleared = snapshot_factory(client_custom_fiscal={"po": ""})
    entries = resolve_fiscal_entries(config, Party.CLIENT, FiscalInfo(), {"po": "PO-7"}, global_client)

    assert [entry.label for entry in find_missing_fiscal_fields(cleared, config, (), global_client)] == ["PO reference"]
    assert [entry.value for entry in entries] == ["PO-7"]
