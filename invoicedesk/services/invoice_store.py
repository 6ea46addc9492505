"""
Local invoice store backed by a JSON file.

The file holds ``{"invoices": [...], "merchants": [...]}`` using the same
camelCase documents the models serialize to. ``patch_invoice`` applies partial
updates with PATCH semantics and reports failures as ``PatchResult`` values
rather than raising, so edit sessions can keep their pending changes.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from invoicedesk.exceptions import (
    InvoiceNotFoundError,
    StoreError,
    StoreReadError,
    StoreWriteError,
)
from invoicedesk.models import Invoice, Merchant, PatchInvoicePayload, PatchResult

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = frozenset({
    "name",
    "description",
    "category",
    "paymentInformation",
    "merchantReference",
    "isImportant",
    "sharedWith",
    "additionalMetadata",
})


class InvoiceStore:
    """Read and patch invoices kept in a single JSON document."""

    def __init__(self, path: Path):
        self.path = Path(path)

    # ------------------------------------------------------------------
    # File access
    # ------------------------------------------------------------------

    def _load(self) -> Dict[str, List[Dict[str, Any]]]:
        if not self.path.exists():
            return {"invoices": [], "merchants": []}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise StoreReadError("Invoice store is not valid JSON", path=str(self.path)) from e
        except OSError as e:
            raise StoreReadError(path=str(self.path), reason=str(e)) from e

        if not isinstance(data, dict):
            raise StoreReadError("Invoice store must be a JSON object", path=str(self.path))
        data.setdefault("invoices", [])
        data.setdefault("merchants", [])
        return data

    def _save(self, data: Dict[str, List[Dict[str, Any]]]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise StoreWriteError(path=str(self.path), reason=str(e)) from e

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_invoices(self) -> List[Invoice]:
        return [Invoice.from_dict(doc) for doc in self._load()["invoices"]]

    def get_invoice(self, invoice_id: str) -> Invoice:
        for doc in self._load()["invoices"]:
            if str(doc.get("id")) == invoice_id:
                return Invoice.from_dict(doc)
        raise InvoiceNotFoundError(invoice_id=invoice_id)

    def get_merchant(self, merchant_id: str) -> Optional[Merchant]:
        for doc in self._load()["merchants"]:
            if str(doc.get("id")) == merchant_id:
                return Merchant.from_dict(doc)
        return None

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def add_invoice(self, invoice: Invoice) -> None:
        data = self._load()
        data["invoices"] = [d for d in data["invoices"] if str(d.get("id")) != invoice.id]
        data["invoices"].append(invoice.to_dict())
        self._save(data)

    def delete_invoice(self, invoice_id: str) -> None:
        data = self._load()
        remaining = [d for d in data["invoices"] if str(d.get("id")) != invoice_id]
        if len(remaining) == len(data["invoices"]):
            raise InvoiceNotFoundError(invoice_id=invoice_id)
        data["invoices"] = remaining
        self._save(data)
        logger.info(f"Deleted invoice {invoice_id}")

    def patch_invoice(self, invoice_id: str, payload: PatchInvoicePayload) -> PatchResult:
        """Apply a partial update to one invoice.

        Only keys present in ``payload`` change. ``sharedWith`` replaces the whole
        list, ``additionalMetadata`` merges into the existing entries (a ``None``
        value removes the key), and ``paymentInformation`` replaces the nested
        object.

        Returns:
            ``PatchResult.ok(updated_invoice)`` or ``PatchResult.failed(message)``.
        """
        if not invoice_id or not invoice_id.strip():
            return PatchResult.failed("Invoice ID is required")
        if not payload:
            return PatchResult.failed("Patch payload cannot be empty")

        unknown = sorted(set(payload) - PATCHABLE_FIELDS)
        if unknown:
            return PatchResult.failed(f"Unsupported patch fields: {', '.join(unknown)}")

        logger.debug(f"Patching invoice {invoice_id} with keys {sorted(payload)}")
        try:
            data = self._load()
            for index, doc in enumerate(data["invoices"]):
                if str(doc.get("id")) == invoice_id:
                    break
            else:
                return PatchResult.failed(f"Invoice {invoice_id} was not found")

            updated = _apply_patch(doc, payload)
            data["invoices"][index] = updated
            self._save(data)
        except StoreError as e:
            logger.error(f"Failed to patch invoice {invoice_id}: {e}")
            return PatchResult.failed(f"Failed to update invoice: {e.message}")

        logger.info(f"Patched invoice {invoice_id}")
        return PatchResult.ok(Invoice.from_dict(updated))

    async def apatch_invoice(self, invoice_id: str, payload: PatchInvoicePayload) -> PatchResult:
        """Async ``patch_invoice``; file I/O runs in a worker thread."""
        return await asyncio.to_thread(self.patch_invoice, invoice_id, payload)


def _apply_patch(doc: Dict[str, Any], payload: Mapping[str, Any]) -> Dict[str, Any]:
    updated = dict(doc)
    for key, value in payload.items():
        if key == "additionalMetadata":
            metadata = dict(updated.get("additionalMetadata") or {})
            for meta_key, meta_value in (value or {}).items():
                if meta_value is None:
                    metadata.pop(meta_key, None)
                else:
                    metadata[meta_key] = meta_value
            updated["additionalMetadata"] = metadata
        elif key == "sharedWith":
            updated["sharedWith"] = list(value or [])
        elif key == "paymentInformation":
            updated["paymentInformation"] = dict(value)
        else:
            updated[key] = value
    return updated
