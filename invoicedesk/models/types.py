"""TypedDict definitions for patch payloads sent to the store."""

from __future__ import annotations

from typing import Any, Dict, List, TypedDict


class CurrencyDict(TypedDict):
    name: str
    code: str
    symbol: str


class PaymentInformationDict(TypedDict, total=False):
    transactionDate: str
    paymentType: int
    currency: CurrencyDict
    totalCostAmount: float
    totalTaxAmount: float


class PatchInvoicePayload(TypedDict, total=False):
    """Partial invoice update. Only provided keys are applied."""

    name: str
    description: str
    category: int
    paymentInformation: PaymentInformationDict
    merchantReference: str
    isImportant: bool
    sharedWith: List[str]
    additionalMetadata: Dict[str, Any]
