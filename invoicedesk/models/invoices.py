"""Invoice domain models.

Dataclasses mirror the store's JSON documents. ``from_dict``/``to_dict`` convert
between the camelCase wire keys and Python attributes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import IntEnum
from typing import Any, Dict, List, Optional

from invoicedesk.utils.datetime_utils import parse_datetime, to_iso

from .types import PaymentInformationDict

_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class InvoiceCategory(IntEnum):
    NOT_DEFINED = 0
    GROCERY = 100
    FAST_FOOD = 200
    HOME_CLEANING = 300
    CAR_AUTO = 400
    OTHER = 9999


class PaymentType(IntEnum):
    UNKNOWN = 0
    CASH = 100
    CARD = 200
    TRANSFER = 300
    MOBILE_PAYMENT = 400
    VOUCHER = 500
    OTHER = 9999


def _coerce_enum(enum_type, value: Any, fallback):
    try:
        return enum_type(int(value))
    except (TypeError, ValueError):
        return fallback


@dataclass(frozen=True)
class Currency:
    name: str = "Romanian Leu"
    code: str = "RON"
    symbol: str = "lei"

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Currency":
        data = data or {}
        return cls(
            name=data.get("name", cls.name),
            code=data.get("code", cls.code),
            symbol=data.get("symbol", cls.symbol),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"name": self.name, "code": self.code, "symbol": self.symbol}


@dataclass(frozen=True)
class PaymentInformation:
    """Payment details nested under ``paymentInformation`` on the wire."""

    transaction_date: datetime = _EPOCH
    payment_type: PaymentType = PaymentType.UNKNOWN
    currency: Currency = field(default_factory=Currency)
    total_cost_amount: float = 0.0
    total_tax_amount: float = 0.0

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "PaymentInformation":
        data = data or {}
        return cls(
            transaction_date=parse_datetime(data.get("transactionDate"), default=_EPOCH, assume_utc=True),
            payment_type=_coerce_enum(PaymentType, data.get("paymentType"), PaymentType.UNKNOWN),
            currency=Currency.from_dict(data.get("currency")),
            total_cost_amount=float(data.get("totalCostAmount", 0.0)),
            total_tax_amount=float(data.get("totalTaxAmount", 0.0)),
        )

    def to_dict(self) -> PaymentInformationDict:
        return {
            "transactionDate": to_iso(self.transaction_date),
            "paymentType": int(self.payment_type),
            "currency": self.currency.to_dict(),
            "totalCostAmount": self.total_cost_amount,
            "totalTaxAmount": self.total_tax_amount,
        }


@dataclass(frozen=True)
class Invoice:
    """A stored invoice. Instances are immutable snapshots."""

    id: str
    user_identifier: str = ""
    name: str = ""
    description: str = ""
    category: InvoiceCategory = InvoiceCategory.NOT_DEFINED
    is_important: bool = False
    payment_information: PaymentInformation = field(default_factory=PaymentInformation)
    merchant_reference: str = ""
    shared_with: List[str] = field(default_factory=list)
    additional_metadata: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Invoice":
        return cls(
            id=str(data["id"]),
            user_identifier=data.get("userIdentifier", ""),
            name=data.get("name", ""),
            description=data.get("description", ""),
            category=_coerce_enum(InvoiceCategory, data.get("category"), InvoiceCategory.NOT_DEFINED),
            is_important=bool(data.get("isImportant", False)),
            payment_information=PaymentInformation.from_dict(data.get("paymentInformation")),
            merchant_reference=data.get("merchantReference", ""),
            shared_with=list(data.get("sharedWith") or []),
            additional_metadata=dict(data.get("additionalMetadata") or {}),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "userIdentifier": self.user_identifier,
            "name": self.name,
            "description": self.description,
            "category": int(self.category),
            "isImportant": self.is_important,
            "paymentInformation": self.payment_information.to_dict(),
            "merchantReference": self.merchant_reference,
            "sharedWith": list(self.shared_with),
            "additionalMetadata": dict(self.additional_metadata),
        }


@dataclass(frozen=True)
class Merchant:
    id: str
    name: str = ""
    address: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Merchant":
        return cls(id=str(data["id"]), name=data.get("name", ""), address=data.get("address", ""))

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "address": self.address}


@dataclass(frozen=True)
class PatchResult:
    """Outcome of a patch call. Failures carry a message fit for display."""

    success: bool
    invoice: Optional[Invoice] = None
    error: Optional[str] = None

    @classmethod
    def ok(cls, invoice: Invoice) -> "PatchResult":
        return cls(success=True, invoice=invoice)

    @classmethod
    def failed(cls, error: str) -> "PatchResult":
        return cls(success=False, error=error)
