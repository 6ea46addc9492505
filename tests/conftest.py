"""Shared pytest fixtures for invoicedesk tests."""

import copy
import json
from pathlib import Path

import pytest

from invoicedesk.models import Invoice, PatchResult
from invoicedesk.services.invoice_store import InvoiceStore

SAMPLE_INVOICE = {
    "id": "inv-1",
    "userIdentifier": "user-1",
    "name": "Weekly groceries",
    "description": "Saturday market run",
    "category": 100,
    "isImportant": False,
    "paymentInformation": {
        "transactionDate": "2025-03-14T18:30:00Z",
        "paymentType": 200,
        "currency": {"name": "Romanian Leu", "code": "RON", "symbol": "lei"},
        "totalCostAmount": 245.5,
        "totalTaxAmount": 19.6,
    },
    "merchantReference": "mer-1",
    "sharedWith": [],
    "additionalMetadata": {"store": "Mega Image"},
}

SAMPLE_MERCHANT = {"id": "mer-1", "name": "Mega Image", "address": "Str. Lunga 5"}


@pytest.fixture
def invoice_dict():
    """A fresh copy of the sample invoice document."""
    return copy.deepcopy(SAMPLE_INVOICE)


@pytest.fixture
def invoice(invoice_dict):
    return Invoice.from_dict(invoice_dict)


@pytest.fixture
def store_path(tmp_path, invoice_dict) -> Path:
    """A store file holding the sample invoice and merchant."""
    path = tmp_path / "invoices.json"
    path.write_text(json.dumps({"invoices": [invoice_dict], "merchants": [SAMPLE_MERCHANT]}))
    return path


@pytest.fixture
def store(store_path):
    return InvoiceStore(store_path)


class FakePersist:
    """Async persistence double recording every patch it receives."""

    def __init__(self, result=None, error=None):
        self.result = result
        self.error = error
        self.calls = []

    async def __call__(self, entity_id, patch):
        self.calls.append((entity_id, copy.deepcopy(patch)))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def fake_persist():
    return FakePersist(result=PatchResult.ok(Invoice(id="inv-1")))
