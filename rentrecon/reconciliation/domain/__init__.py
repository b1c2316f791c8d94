"""Reconciliation domain: records, enums and value objects."""

from .enums import AmountMatchKind, InvoiceStatus, MatchField, MatchType, PaymentStatus
from .models import Invoice, Payment
from .value_objects import FieldMatch, MatchResult, ReconciliationSummary

__all__ = [
    "AmountMatchKind",
    "FieldMatch",
    "Invoice",
    "InvoiceStatus",
    "MatchField",
    "MatchResult",
    "MatchType",
    "Payment",
    "PaymentStatus",
    "ReconciliationSummary",
]
