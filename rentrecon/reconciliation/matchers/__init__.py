"""Payment matching strategies using Strategy pattern.

Each field comparator scores one kind of evidence linking a payment to an
invoice; the scorer combines them into a weighted confidence.

Available Strategies:
- PhoneMatcher: Payer phone vs tenant phone (confidence 0.9-1.0)
- AmountMatcher: Payment amount vs invoice balance (exact/partial/over)
- ReferenceMatcher: Account reference vs invoice id / unit number
- NameMatcher: Payer name vs tenant name (whole name or shared token)

Usage:
    >>> from rentrecon.reconciliation.matchers import PaymentMatcher
    >>> matcher = PaymentMatcher()
    >>> result = matcher.match_one(payment, invoices)
    >>> print(result.match_type, result.reasons)
"""

__all__ = [
    "IFieldMatcher",
    "PhoneMatcher",
    "AmountMatcher",
    "ReferenceMatcher",
    "NameMatcher",
    "ConfidenceScorer",
    "Matcher",
    "PaymentMatcher",
    "payment_matcher",
    "normalize_phone",
    "similarity",
    "edit_distance",
]

from .amount import AmountMatcher
from .base import IFieldMatcher, normalize_phone
from .name import NameMatcher
from .payment_matcher import Matcher, PaymentMatcher, payment_matcher
from .phone import PhoneMatcher
from .reference import ReferenceMatcher
from .scoring import ConfidenceScorer
from .similarity import edit_distance, similarity
