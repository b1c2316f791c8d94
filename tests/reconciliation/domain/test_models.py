"""Tests for Payment and Invoice records."""

from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from rentrecon.reconciliation.domain.enums import InvoiceStatus, PaymentStatus
from rentrecon.reconciliation.domain.models import coerce_whole_amount

pytestmark = pytest.mark.unit


class TestCoerceWholeAmount:
    """Tests for whole-unit amount coercion."""

    @pytest.mark.parametrize(
        "value,expected",
        [("45000", 45000), ("45000.00", 45000), ("45,000", 45000), (45000.0, 45000), (7, 7)],
    )
    def test_integral_values(self, value, expected):
        assert coerce_whole_amount(value) == expected

    @pytest.mark.parametrize("value", ["100.50", 99.9])
    def test_fractional_values_rejected(self, value):
        with pytest.raises(ValueError, match="whole currency unit"):
            coerce_whole_amount(value)

    def test_non_numeric_left_for_pydantic(self):
        assert coerce_whole_amount("abc") == "abc"


class TestPayment:
    """Tests for the Payment model."""

    def test_defaults(self, make_payment):
        payment = make_payment()

        assert payment.status == PaymentStatus.PENDING
        assert payment.account_reference is None

    def test_amount_string_accepted(self, make_payment):
        assert make_payment(amount="45000.00").amount == 45000

    def test_negative_amount_rejected(self, make_payment):
        with pytest.raises(ValidationError):
            make_payment(amount=-1)

    def test_fractional_amount_rejected(self, make_payment):
        with pytest.raises(ValidationError, match="whole currency unit"):
            make_payment(amount="100.50")

    def test_date_string_parsed(self, make_payment):
        payment = make_payment(transaction_date="2024-03-01T10:15:00")
        assert payment.transaction_date == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)

    def test_naive_date_taken_as_utc(self, make_payment):
        payment = make_payment(transaction_date=datetime(2024, 3, 1, 10, 15))
        assert payment.transaction_date.tzinfo is not None
        assert payment.transaction_date.utcoffset() == timedelta(0)

    def test_aware_date_converted_to_utc(self, make_payment):
        nairobi = timezone(timedelta(hours=3))
        payment = make_payment(transaction_date=datetime(2024, 3, 1, 13, 15, tzinfo=nairobi))
        assert payment.transaction_date == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)
        assert payment.transaction_date.utcoffset() == timedelta(0)

    def test_zulu_suffix_parsed(self, make_payment):
        payment = make_payment(transaction_date="2024-03-01T10:15:00Z")
        assert payment.transaction_date == datetime(2024, 3, 1, 10, 15, tzinfo=timezone.utc)

    def test_frozen(self, make_payment):
        payment = make_payment()
        with pytest.raises(ValidationError):
            payment.amount = 1

    def test_whitespace_stripped(self, make_payment):
        assert make_payment(account_reference="  A-204 ").account_reference == "A-204"


class TestInvoice:
    """Tests for the Invoice model."""

    def test_eligible_when_unpaid_with_balance(self, make_invoice):
        assert make_invoice().is_eligible

    @pytest.mark.parametrize(
        "overrides",
        [{"status": InvoiceStatus.PAID}, {"balance": 0}, {"balance": -10}],
    )
    def test_ineligible(self, make_invoice, overrides):
        assert not make_invoice(**overrides).is_eligible

    @pytest.mark.parametrize("status", [InvoiceStatus.PARTIAL, InvoiceStatus.OVERDUE])
    def test_partial_and_overdue_remain_eligible(self, make_invoice, status):
        assert make_invoice(status=status).is_eligible

    def test_amount_paid(self, make_invoice):
        assert make_invoice(amount=45000, balance=15000).amount_paid == 30000

    def test_status_from_string(self, make_invoice):
        assert make_invoice(status="overdue").status == InvoiceStatus.OVERDUE
