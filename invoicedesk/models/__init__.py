"""Data models for invoicedesk."""

from .invoices import (
    Currency,
    Invoice,
    InvoiceCategory,
    Merchant,
    PatchResult,
    PaymentInformation,
    PaymentType,
)
from .types import PatchInvoicePayload, PaymentInformationDict

__all__ = [
    "Currency",
    "Invoice",
    "InvoiceCategory",
    "Merchant",
    "PatchInvoicePayload",
    "PatchResult",
    "PaymentInformation",
    "PaymentInformationDict",
    "PaymentType",
]
