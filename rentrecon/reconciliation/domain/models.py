"""Domain records consumed by the matcher.

Payments and invoices are read-only inputs supplied by upstream sources (a
mobile-money settlement feed, the billing subsystem). They are frozen
pydantic models: the matcher never mutates them.

Money is integer-denominated (whole KES units). Importers may hand over
strings such as ``"45000.00"``; integral values are accepted and fractional
ones rejected so no binary-float amounts enter a comparison.

Payment timestamps are stored as timezone-aware UTC so payments from
different sources can be compared.
"""

import re
from datetime import date, datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .enums import InvoiceStatus, PaymentStatus

LOCAL_PHONE_DIGITS = 9

_NON_DIGITS = re.compile(r"\D")


def normalize_phone(phone: Optional[str]) -> str:
    """Normalize a phone number to its last 9 digits.

    Separators and country-code prefixes are dropped, so ``+254 712 345 678``
    and ``0712-345-678`` both normalize to ``712345678``. Missing input
    normalizes to an empty string.
    """
    if not phone:
        return ""
    return _NON_DIGITS.sub("", phone)[-LOCAL_PHONE_DIGITS:]


def coerce_whole_amount(value: Any) -> Any:
    """Convert an integral string/Decimal/float amount to ``int``.

    Values that are already ``int`` (or not number-like) are returned
    unchanged so pydantic reports the type error itself.
    """
    if isinstance(value, bool) or isinstance(value, int):
        return value
    if isinstance(value, (str, float, Decimal)):
        text = str(value).strip().replace(",", "")
        try:
            amount = Decimal(text)
        except InvalidOperation:
            return value
        if not amount.is_finite():
            return value
        if amount != amount.to_integral_value():
            raise ValueError(f"amount must be a whole currency unit, got {value!r}")
        return int(amount)
    return value


class Payment(BaseModel):
    """An incoming mobile-money or bank payment."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    transaction_id: str = Field(..., description="Provider transaction id (e.g. M-Pesa receipt)")
    amount: int = Field(..., ge=0, description="Amount in whole currency units")
    phone_number: str = Field(
        default="", description="Originating phone number, free text (separators allowed)"
    )
    account_reference: Optional[str] = Field(
        default=None, description="Free-text account reference typed by the payer"
    )
    customer_name: Optional[str] = None
    transaction_date: datetime
    status: PaymentStatus = PaymentStatus.PENDING

    @field_validator("amount", mode="before")
    @classmethod
    def whole_amount(cls, value: Any) -> Any:
        return coerce_whole_amount(value)

    @field_validator("transaction_date")
    @classmethod
    def utc_transaction_date(cls, value: datetime) -> datetime:
        """Store timestamps as aware UTC; naive values are taken to be UTC."""
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    def __repr__(self) -> str:
        return f"<Payment(id='{self.id}', amount={self.amount}, status={self.status})>"


class Invoice(BaseModel):
    """An outstanding tenant invoice, read-only to the matcher."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    id: str = Field(..., min_length=1)
    tenant_id: str
    tenant_name: Optional[str] = None
    tenant_phone: Optional[str] = None
    unit_id: str
    unit_number: Optional[str] = None
    property_id: str
    amount: int = Field(..., ge=0, description="Invoice total")
    balance: int = Field(..., description="Remaining balance; may be below the total")
    due_date: date
    status: InvoiceStatus = InvoiceStatus.PENDING

    @field_validator("amount", "balance", mode="before")
    @classmethod
    def whole_amounts(cls, value: Any) -> Any:
        return coerce_whole_amount(value)

    @property
    def is_eligible(self) -> bool:
        """Whether the invoice can still receive a payment (unpaid, positive balance)."""
        return self.status != InvoiceStatus.PAID and self.balance > 0

    @property
    def amount_paid(self) -> int:
        """Amount already settled against the total."""
        return max(self.amount - self.balance, 0)

    def __repr__(self) -> str:
        return (
            f"<Invoice(id='{self.id}', tenant_id='{self.tenant_id}', "
            f"balance={self.balance}, status={self.status})>"
        )
