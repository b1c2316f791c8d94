"""Enumerations for the reconciliation domain."""

from enum import Enum


class MatchType(str, Enum):
    """Classification of a payment-to-invoice match by confidence band.

    - EXACT: confidence >= 0.95
    - FUZZY: fuzzy threshold <= confidence < 0.95
    - PARTIAL: 0.5 <= confidence < fuzzy threshold (needs review)
    - NONE: below 0.5, or no eligible invoice
    """

    EXACT = "exact"
    FUZZY = "fuzzy"
    PARTIAL = "partial"
    NONE = "none"

    @property
    def is_matched(self) -> bool:
        """Whether this band counts as a matched payment."""
        return self in (MatchType.EXACT, MatchType.FUZZY)

    def __str__(self) -> str:
        return self.value


class MatchField(str, Enum):
    """Payment fields compared against an invoice, in scoring order."""

    PHONE = "phone"
    AMOUNT = "amount"
    REFERENCE = "reference"
    NAME = "name"

    @property
    def label(self) -> str:
        """Capitalized label used in reason strings."""
        return self.value.capitalize()

    def __str__(self) -> str:
        return self.value


class AmountMatchKind(str, Enum):
    """How a payment amount relates to the invoice balance."""

    EXACT = "exact"
    PARTIAL = "partial"
    OVER = "over"
    NONE = "none"

    def __str__(self) -> str:
        return self.value


class PaymentStatus(str, Enum):
    """Payment status. Set by callers after reconciliation, never by the matcher."""

    PENDING = "pending"
    MATCHED = "matched"
    UNMATCHED = "unmatched"
    PARTIAL = "partial"

    def __str__(self) -> str:
        return self.value


class InvoiceStatus(str, Enum):
    """Invoice payment status."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    OVERDUE = "overdue"

    def __str__(self) -> str:
        return self.value
