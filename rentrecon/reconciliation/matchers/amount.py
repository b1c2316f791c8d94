"""Amount matcher.

Compares the payment amount with the invoice's remaining balance. The
tolerance window is a percentage of the *balance*, not of the payment, so a
large overpayment gets a smaller absolute window than an equally large
underpayment would.
"""

from typing import TYPE_CHECKING

from ..domain.enums import AmountMatchKind, MatchField
from ..domain.value_objects import FieldMatch
from .base import IFieldMatcher

if TYPE_CHECKING:
    from ..domain.models import Invoice, Payment

# Scale factors keep partial and over-payments below a full match.
PARTIAL_PAYMENT_SCALE = 0.8
OVERPAYMENT_SCALE = 0.7


class AmountMatcher(IFieldMatcher):
    """Match the payment amount against the invoice balance.

    Scoring:
    - Within tolerance → exact, 1.0
    - Below the balance → partial, ``amount / balance * 0.8``
    - Above the balance → over, ``balance / amount * 0.7``

    Attributes:
        tolerance_percent: Tolerance as a percentage of the balance (default 1%)
    """

    field = MatchField.AMOUNT

    def __init__(self, tolerance_percent: float = 1.0) -> None:
        if not 0 <= tolerance_percent <= 100:
            raise ValueError(
                f"tolerance_percent must be between 0-100, got {tolerance_percent}"
            )
        self.tolerance_percent = tolerance_percent

    def match(self, payment: "Payment", invoice: "Invoice") -> FieldMatch:
        payment_amount = payment.amount
        balance = invoice.balance

        # Ineligible invoices are filtered upstream; never divide by them.
        if balance <= 0:
            return FieldMatch.no_match(self.field)

        tolerance = balance * (self.tolerance_percent / 100)

        if abs(payment_amount - balance) <= tolerance:
            return self._judgment(AmountMatchKind.EXACT, 1.0)

        if payment_amount < balance:
            return self._judgment(
                AmountMatchKind.PARTIAL, (payment_amount / balance) * PARTIAL_PAYMENT_SCALE
            )

        return self._judgment(AmountMatchKind.OVER, (balance / payment_amount) * OVERPAYMENT_SCALE)

    def _judgment(self, kind: AmountMatchKind, score: float) -> FieldMatch:
        return FieldMatch(field=self.field, matched=True, score=score, amount_kind=kind)

    def __repr__(self) -> str:
        return f"<AmountMatcher(tolerance={self.tolerance_percent}%)>"
