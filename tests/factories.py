"""Record builders shared by the test suite."""

from datetime import date, datetime
from typing import Any

from rentrecon.reconciliation.domain.models import Invoice, Payment

BASE_TIME = datetime(2024, 3, 1, 10, 15, 0)


def build_payment(**overrides: Any) -> Payment:
    """Build a Payment with neutral defaults that match nothing."""
    data: dict[str, Any] = {
        "id": "pay-1",
        "transaction_id": "QK12ABC001",
        "amount": 45000,
        "phone_number": "",
        "account_reference": None,
        "customer_name": None,
        "transaction_date": BASE_TIME,
    }
    data.update(overrides)
    return Payment(**data)


def build_invoice(**overrides: Any) -> Invoice:
    """Build an eligible Invoice with neutral defaults."""
    data: dict[str, Any] = {
        "id": "inv-1",
        "tenant_id": "tenant-1",
        "tenant_name": None,
        "tenant_phone": None,
        "unit_id": "unit-1",
        "unit_number": None,
        "property_id": "prop-1",
        "amount": 45000,
        "balance": 45000,
        "due_date": date(2024, 3, 5),
    }
    data.update(overrides)
    return Invoice(**data)
