"""Tests for invoice models and datetime helpers."""

from datetime import datetime, timedelta, timezone

from invoicedesk.models import Invoice, InvoiceCategory, PaymentInformation, PaymentType
from invoicedesk.utils.datetime_utils import parse_datetime, same_calendar_day, to_iso


class TestInvoice:
    def test_from_dict(self, invoice):
        assert invoice.id == "inv-1"
        assert invoice.category is InvoiceCategory.GROCERY
        assert invoice.payment_information.payment_type is PaymentType.CARD
        assert invoice.payment_information.transaction_date == datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)
        assert invoice.additional_metadata == {"store": "Mega Image"}

    def test_to_dict_matches_source(self, invoice, invoice_dict):
        assert invoice.to_dict() == invoice_dict

    def test_unknown_enum_values_fall_back(self):
        invoice = Invoice.from_dict({"id": 7, "category": 12345, "paymentInformation": {"paymentType": "card"}})
        assert invoice.id == "7"
        assert invoice.category is InvoiceCategory.NOT_DEFINED
        assert invoice.payment_information.payment_type is PaymentType.UNKNOWN

    def test_defaults(self):
        payment = PaymentInformation.from_dict(None)
        assert payment.currency.code == "RON"
        assert payment.total_cost_amount == 0.0
        assert payment.transaction_date.year == 1970


class TestDatetimeHelpers:
    def test_parse_z_suffix(self):
        assert parse_datetime("2025-03-14T18:30:00Z") == datetime(2025, 3, 14, 18, 30, tzinfo=timezone.utc)

    def test_parse_garbage_returns_default(self):
        assert parse_datetime("yesterday", default=None) is None

    def test_to_iso_normalizes_to_utc(self):
        local = datetime(2025, 3, 14, 20, 30, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso(local) == "2025-03-14T18:30:00Z"

    def test_same_calendar_day(self):
        morning = datetime(2025, 3, 14, 1, 0, tzinfo=timezone.utc)
        evening = datetime(2025, 3, 14, 23, 0, tzinfo=timezone.utc)
        assert same_calendar_day(morning, evening)
        assert not same_calendar_day(morning, morning + timedelta(days=1))

    def test_same_calendar_day_requires_datetimes(self):
        day = datetime(2025, 3, 14, tzinfo=timezone.utc)
        assert not same_calendar_day(day, "2025-03-14")
        assert not same_calendar_day(None, None)
