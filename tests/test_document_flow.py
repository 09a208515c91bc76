from __future__ import annotations

import os
import tempfile

from fastapi.testclient import TestClient

from business_papers.app import app
from business_papers.config import get_settings
from business_papers.db import init_db, reset_engine
from business_papers.services import storage


def setup_module(module):
    tmpdir = tempfile.mkdtemp()
    os.environ["BUSINESS_PAPERS_DATABASE_URL"] = f"sqlite:///{tmpdir}/test.db"
    get_settings.cache_clear()
    reset_engine()
    init_db()


def teardown_module(module):
    reset_engine()
    os.environ.pop("BUSINESS_PAPERS_DATABASE_URL", None)
    get_settings.cache_clear()


def _submission(**document):
    payload = {
        "document_type_id": "invoice",
        "client_name": "Sarl Atlas",
        "tax_rate": 19,
        "services": [{"id": "s1", "description": "Logo design", "quantity": 2, "rate": 500}],
        "calculation_lines": [
            {"id": "l1", "type": "discount_percent", "label": "Discount", "value": 10, "order": 0},
            {"id": "l2", "type": "shipping", "label": "Shipping", "value": 50, "order": 1},
        ],
    }
    payload.update(document)
    return {"document": payload}


def test_health():
    client = TestClient(app)

    assert client.get("/health").json() == {"status": "ok"}


def test_calculate_document():
    client = TestClient(app)

    response = client.post("/documents/calculate", json=_submission())

    assert response.status_code == 200, response.text
    data = response.json()
    assert data["subtotal"] == 1000.0
    assert data["tax"] == 180.5
    assert data["balance_due"] == 1130.5
    assert data["amount_payable"] == 1130.5


def test_document_lifecycle_with_required_client_fiscal_info():
    client = TestClient(app)

    config = client.get("/document-types/invoice/config").json()
    config["requires_client_fiscal_info"] = True
    config["client_fiscal_fields"] = ["nif"]
    response = client.put("/document-types/invoice/config", json=config)
    assert response.status_code == 200, response.text

    report = client.post("/documents/validate", json=_submission()).json()
    assert report["valid"] is False
    assert [(entry["party"], entry["field_id"]) for entry in report["missing_fields"]] == [("client", "nif")]

    blocked = client.post("/documents", json=_submission())
    assert blocked.status_code == 422
    assert blocked.json()["detail"]["missing_fields"][0]["label"] == "Tax ID"
    assert client.get("/documents").json() == []

    saved = client.post("/documents", json=_submission(client_fiscal={"nif": "000216001234567"}))
    assert saved.status_code == 200, saved.text
    document = saved.json()
    assert document["total"] == 1130.5
    assert document["document_number"].startswith("FAC-")

    charge = client.post(
        "/document-types/invoice/government-charges",
        json={"name": "Stamp duty", "amount": 1, "percentage": True},
    )
    assert charge.status_code == 200, charge.text

    reloaded = client.get(f"/documents/{document['id']}").json()
    assert reloaded["total"] == 1130.5
    assert reloaded["snapshot"]["client_fiscal"]["nif"] == "000216001234567"

    totals = client.post(
        "/documents/calculate", json=_submission(client_fiscal={"nif": "000216001234567"})
    ).json()
    assert totals["government_charges"]["total"] == 10.0
    assert totals["amount_payable"] == 1140.5


def test_government_charge_management():
    client = TestClient(app)

    config = client.post(
        "/document-types/quote/government-charges",
        json={"name": "Filing fee", "amount": 25},
    ).json()
    charge_id = config["government_charges"][0]["id"]

    updated = client.patch(
        f"/document-types/quote/government-charges/{charge_id}", json={"is_enabled": False}
    ).json()
    assert updated["government_charges"][0]["is_enabled"] is False

    removed = client.delete(f"/document-types/quote/government-charges/{charge_id}").json()
    assert removed["government_charges"] == []

    missing = client.delete(f"/document-types/quote/government-charges/{charge_id}")
    assert missing.status_code == 404


def test_custom_document_types():
    client = TestClient(app)

    created = client.post(
        "/document-types",
        json={"name": "Reçu", "name_fr": "Reçu", "name_en": "Receipt", "prefix": "REC"},
    ).json()
    ids = [document_type["id"] for document_type in client.get("/document-types").json()]
    assert created["id"] in ids
    assert "invoice" in ids

    number = client.post(f"/document-types/{created['id']}/number").json()
    assert number["document_number"].startswith("REC-")

    assert client.delete("/document-types/invoice").status_code == 400
    assert client.delete(f"/document-types/{created['id']}").status_code == 204
    assert client.get(f"/document-types/{created['id']}/config").status_code == 404


def test_malformed_stored_config_resolves_to_default():
    from business_papers.db import get_session
    from business_papers.models import DocumentTypeConfigRecord

    with get_session() as session:
        session.add(DocumentTypeConfigRecord(document_type_id="proforma", payload='{"business_fiscal_fields": 3}'))

    config = storage.get_config("proforma")

    assert config.document_type_id == "proforma"
    assert config.business_fiscal_fields == ["nif", "nic"]


def test_update_document_type():
    client = TestClient(app)

    response = client.patch(
        "/document-types/delivery_note",
        json={"prefix": "LIV", "name_en": "Shipping Note", "is_default": True},
    )
    assert response.status_code == 200, response.text
    updated = response.json()
    assert updated["id"] == "delivery_note"
    assert updated["is_system"] is True
    assert updated["prefix"] == "LIV"

    types = client.get("/document-types").json()
    assert [entry["id"] for entry in types if entry["is_default"]] == ["delivery_note"]
    number = client.post("/document-types/delivery_note/number").json()
    assert number["document_number"].startswith("LIV-")

    assert client.patch("/document-types/missing", json={"prefix": "X"}).status_code == 404
    client.post("/document-types/invoice/default")


def test_list_configs_covers_every_type():
    client = TestClient(app)

    created = client.post(
        "/document-types",
        json={"name": "Bon de commande", "name_fr": "Bon de commande", "name_en": "Purchase Order", "prefix": "BC"},
    ).json()

    response = client.get("/document-types/configs")

    assert response.status_code == 200, response.text
    by_id = {config["document_type_id"]: config for config in response.json()}
    assert {"invoice", "quote", "delivery_note", "proforma", "credit_note", created["id"]} <= set(by_id)
    assert by_id[created["id"]]["business_fiscal_fields"] == []
    assert by_id["delivery_note"]["show_tax_calculation"] is False


def test_configured_default_tax_rate_applies_to_documents_without_one():
    client = TestClient(app)
    submission = _submission(calculation_lines=[])
    del submission["document"]["tax_rate"]

    os.environ["BUSINESS_PAPERS_DEFAULT_TAX_RATE"] = "9"
    get_settings.cache_clear()
    try:
        totals = client.post("/documents/calculate", json=submission).json()
        saved = client.post(
            "/documents", json=_submission(document_type_id="quote", calculation_lines=[], tax_rate=None)
        ).json()
    finally:
        os.environ.pop("BUSINESS_PAPERS_DEFAULT_TAX_RATE", None)
        get_settings.cache_clear()

    assert totals["tax"] == 90.0
    assert totals["balance_due"] == 1090.0
    assert saved["total"] == 1090.0
    assert saved["snapshot"]["tax_rate"] == 9.0
