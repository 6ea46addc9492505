"""Tests for the JSON-file invoice store."""

import json

import pytest

from invoicedesk.exceptions import InvoiceNotFoundError, StoreReadError
from invoicedesk.models import Invoice, InvoiceCategory
from invoicedesk.services.invoice_store import InvoiceStore


def _stored(path, invoice_id="inv-1"):
    data = json.loads(path.read_text())
    return next(doc for doc in data["invoices"] if doc["id"] == invoice_id)


class TestQueries:
    def test_missing_file_is_empty(self, tmp_path):
        store = InvoiceStore(tmp_path / "nope.json")
        assert store.list_invoices() == []

    def test_list_and_get(self, store):
        invoices = store.list_invoices()
        assert [invoice.id for invoice in invoices] == ["inv-1"]
        assert store.get_invoice("inv-1").category is InvoiceCategory.GROCERY

    def test_get_missing_invoice_raises(self, store):
        with pytest.raises(InvoiceNotFoundError) as exc_info:
            store.get_invoice("inv-404")
        assert exc_info.value.context["invoice_id"] == "inv-404"

    def test_get_merchant(self, store):
        assert store.get_merchant("mer-1").name == "Mega Image"
        assert store.get_merchant("mer-2") is None

    def test_malformed_json_raises(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(StoreReadError, match="not valid JSON"):
            InvoiceStore(path).list_invoices()

    def test_non_object_document_raises(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[]")
        with pytest.raises(StoreReadError):
            InvoiceStore(path).list_invoices()


class TestMutations:
    def test_add_creates_file(self, tmp_path):
        path = tmp_path / "nested" / "invoices.json"
        store = InvoiceStore(path)
        store.add_invoice(Invoice(id="inv-2", name="Car wash"))

        assert _stored(path, "inv-2")["name"] == "Car wash"

    def test_add_replaces_same_id(self, store, store_path):
        store.add_invoice(Invoice(id="inv-1", name="Replaced"))
        assert len(store.list_invoices()) == 1
        assert _stored(store_path)["name"] == "Replaced"

    def test_delete(self, store):
        store.delete_invoice("inv-1")
        assert store.list_invoices() == []

    def test_delete_missing_raises(self, store):
        with pytest.raises(InvoiceNotFoundError):
            store.delete_invoice("inv-404")


class TestPatchInvoice:
    def test_only_given_keys_change(self, store, store_path):
        before = _stored(store_path)

        result = store.patch_invoice("inv-1", {"name": "Monthly groceries"})

        assert result.success is True
        assert result.invoice.name == "Monthly groceries"
        after = _stored(store_path)
        assert after["name"] == "Monthly groceries"
        assert {k: v for k, v in after.items() if k != "name"} == {
            k: v for k, v in before.items() if k != "name"
        }

    def test_payment_information_is_replaced(self, store, store_path, invoice):
        section = invoice.payment_information.to_dict()
        section["paymentType"] = 100

        store.patch_invoice("inv-1", {"paymentInformation": section})

        stored = _stored(store_path)["paymentInformation"]
        assert stored["paymentType"] == 100
        assert stored["transactionDate"] == "2025-03-14T18:30:00Z"

    def test_shared_with_is_replaced(self, store):
        store.patch_invoice("inv-1", {"sharedWith": ["ana", "dan"]})
        result = store.patch_invoice("inv-1", {"sharedWith": ["dan"]})
        assert result.invoice.shared_with == ["dan"]

    def test_metadata_merges_and_none_removes(self, store):
        result = store.patch_invoice("inv-1", {"additionalMetadata": {"receipt": "A12"}})
        assert result.invoice.additional_metadata == {"store": "Mega Image", "receipt": "A12"}

        result = store.patch_invoice("inv-1", {"additionalMetadata": {"store": None}})
        assert result.invoice.additional_metadata == {"receipt": "A12"}

    @pytest.mark.parametrize(
        "invoice_id, payload, message",
        [
            ("", {"name": "x"}, "Invoice ID is required"),
            ("   ", {"name": "x"}, "Invoice ID is required"),
            ("inv-1", {}, "Patch payload cannot be empty"),
            ("inv-1", {"id": "inv-9"}, "Unsupported patch fields: id"),
            ("inv-404", {"name": "x"}, "Invoice inv-404 was not found"),
        ],
    )
    def test_failures_are_reported_as_values(self, store, store_path, invoice_id, payload, message):
        before = store_path.read_text()

        result = store.patch_invoice(invoice_id, payload)

        assert result.success is False
        assert result.invoice is None
        assert result.error == message
        assert store_path.read_text() == before

    def test_unreadable_store_is_reported(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{oops")

        result = InvoiceStore(path).patch_invoice("inv-1", {"name": "x"})

        assert result.success is False
        assert result.error.startswith("Failed to update invoice:")

    @pytest.mark.asyncio
    async def test_async_patch(self, store, store_path):
        result = await store.apatch_invoice("inv-1", {"isImportant": True})

        assert result.success is True
        assert _stored(store_path)["isImportant"] is True
