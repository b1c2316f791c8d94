"""Value objects produced by the matcher.

Immutable results: a matcher run creates new objects and never touches its
inputs.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from .enums import AmountMatchKind, MatchField, MatchType
from .models import Invoice, Payment


def format_percent(score: float) -> str:
    """Render a 0-1 score as a whole percentage, halves rounded up (0.625 -> 63%)."""
    percent = Decimal(score * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return f"{percent}%"


@dataclass(frozen=True)
class FieldMatch:
    """Judgment of a single field comparator for one payment/invoice pair.

    Attributes:
        field: Which comparator produced the judgment
        matched: Whether the comparator fired
        score: Evidence strength in [0.0, 1.0]
        amount_kind: Relationship of payment amount to balance (amount field only)
    """

    field: MatchField
    matched: bool
    score: float
    amount_kind: Optional[AmountMatchKind] = None

    @classmethod
    def no_match(cls, match_field: MatchField) -> "FieldMatch":
        """Judgment for a comparator that did not fire."""
        kind = AmountMatchKind.NONE if match_field == MatchField.AMOUNT else None
        return cls(field=match_field, matched=False, score=0.0, amount_kind=kind)

    @property
    def subtype(self) -> str:
        """Reason subtype: the amount kind for amounts, ``match`` otherwise."""
        if self.amount_kind is not None:
            return self.amount_kind.value
        return "match"

    @property
    def reason(self) -> str:
        """Human-readable reason, e.g. ``Phone match (90%)``."""
        return f"{self.field.label} {self.subtype} ({format_percent(self.score)})"


@dataclass(frozen=True)
class MatchResult:
    """Best invoice match for one payment.

    ``invoice`` is the best-scoring candidate, even for a NONE result; it is
    None only when no eligible invoice scored above zero. Whether the
    invoice is accepted is decided by ``match_type`` alone.
    """

    payment: Payment
    invoice: Optional[Invoice]
    confidence: float
    match_type: MatchType
    reasons: list[str] = field(default_factory=list)
    field_matches: tuple[FieldMatch, ...] = ()

    @property
    def is_matched(self) -> bool:
        """Whether the payment was matched (EXACT or FUZZY)."""
        return self.match_type.is_matched

    @property
    def needs_review(self) -> bool:
        """Whether staff should review this payment manually."""
        return self.match_type in (MatchType.PARTIAL, MatchType.NONE)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "payment_id": self.payment.id,
            "transaction_id": self.payment.transaction_id,
            "amount": self.payment.amount,
            "invoice_id": self.invoice.id if self.invoice else None,
            "confidence": round(self.confidence, 4),
            "match_type": self.match_type.value,
            "reasons": list(self.reasons),
        }

    def __str__(self) -> str:
        target = self.invoice.id if self.invoice else "-"
        return (
            f"MatchResult(payment={self.payment.id}, invoice={target}, "
            f"type={self.match_type.value}, confidence={self.confidence:.2f})"
        )


@dataclass
class ReconciliationSummary:
    """Outcome of reconciling a payment batch against an invoice batch.

    ``results`` are in processing order (amount descending), not input order.
    """

    total_payments: int = 0
    matched_payments: int = 0
    unmatched_payments: int = 0
    partial_matches: int = 0
    total_amount_received: int = 0
    total_amount_matched: int = 0
    results: list[MatchResult] = field(default_factory=list)
    duplicate_groups: list[list[Payment]] = field(default_factory=list)

    @property
    def match_rate(self) -> float:
        """Share of payments matched (0.0-1.0)."""
        if self.total_payments == 0:
            return 0.0
        return self.matched_payments / self.total_payments

    @property
    def review_queue(self) -> list[MatchResult]:
        """Partial and unmatched results that need manual review."""
        return [result for result in self.results if result.needs_review]

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "total_payments": self.total_payments,
            "matched_payments": self.matched_payments,
            "unmatched_payments": self.unmatched_payments,
            "partial_matches": self.partial_matches,
            "total_amount_received": self.total_amount_received,
            "total_amount_matched": self.total_amount_matched,
            "match_rate": round(self.match_rate, 4),
            "results": [result.to_dict() for result in self.results],
            "duplicate_groups": [
                [payment.id for payment in group] for group in self.duplicate_groups
            ],
        }

    def __str__(self) -> str:
        return (
            f"ReconciliationSummary(matched={self.matched_payments}/{self.total_payments}, "
            f"partial={self.partial_matches}, unmatched={self.unmatched_payments})"
        )
