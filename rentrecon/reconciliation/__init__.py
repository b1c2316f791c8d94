"""Payment reconciliation for rental billing.

This module implements payment-to-invoice reconciliation with:
- Multi-factor fuzzy matching (phone, amount, reference, name)
- Confidence classification (exact / fuzzy / partial / none)
- Greedy batch reconciliation with invoice claiming
- Duplicate payment detection
- CSV/JSON/M-Pesa C2B importers
- Prometheus metrics monitoring

Architecture: Domain-Driven Design (DDD) + Hexagonal Architecture
"""

__all__ = [
    "Payment",
    "Invoice",
    "MatchResult",
    "ReconciliationSummary",
    "FieldMatch",
    "MatchType",
    "MatchField",
    "PaymentStatus",
    "InvoiceStatus",
    "MatcherConfig",
    "PaymentMatcher",
    "payment_matcher",
    # Metrics
    "start_metrics_server",
    "record_match",
    "record_import",
]

from .config import MatcherConfig
from .domain.enums import InvoiceStatus, MatchField, MatchType, PaymentStatus
from .domain.models import Invoice, Payment
from .domain.value_objects import FieldMatch, MatchResult, ReconciliationSummary
from .matchers.payment_matcher import PaymentMatcher, payment_matcher

# Import metrics (auto-starts server if PROMETHEUS_ENABLED=true)
from .metrics import record_import, record_match, start_metrics_server
