"""Account reference matcher.

Payers type a free-text account reference (M-Pesa "BillRefNumber"), which
is usually the invoice number or the unit number, often with typos or extra
words around it.
"""

from typing import TYPE_CHECKING

from ..domain.enums import MatchField
from ..domain.value_objects import FieldMatch
from .base import IFieldMatcher
from .similarity import similarity

if TYPE_CHECKING:
    from ..domain.models import Invoice, Payment

INVOICE_ID_SCORE = 1.0
UNIT_NUMBER_SCORE = 0.9
MIN_REFERENCE_SIMILARITY = 0.8


class ReferenceMatcher(IFieldMatcher):
    """Match the payment reference against the invoice id and unit number.

    Scoring:
    - Reference equals the invoice id → 1.0
    - Reference contains the unit number → 0.9
    - Best similarity to invoice id / unit number above 0.8 → that similarity
    - Otherwise, or reference missing → no match
    """

    field = MatchField.REFERENCE

    def match(self, payment: "Payment", invoice: "Invoice") -> FieldMatch:
        reference = (payment.account_reference or "").lower().strip()
        if not reference:
            return FieldMatch.no_match(self.field)

        if reference == invoice.id.lower():
            return FieldMatch(field=self.field, matched=True, score=INVOICE_ID_SCORE)

        unit_number = invoice.unit_number
        if unit_number and unit_number.lower() in reference:
            return FieldMatch(field=self.field, matched=True, score=UNIT_NUMBER_SCORE)

        best = max(
            similarity(reference, invoice.id),
            similarity(reference, unit_number) if unit_number else 0.0,
        )
        if best > MIN_REFERENCE_SIMILARITY:
            return FieldMatch(field=self.field, matched=True, score=best)

        return FieldMatch.no_match(self.field)
