"""Phone number matcher.

Mobile-money payments always carry the payer's MSISDN, which is the
strongest link to a tenant. Numbers are compared in local 9-digit form so
country-code variants agree.
"""

from typing import TYPE_CHECKING

from ..domain.enums import MatchField
from ..domain.value_objects import FieldMatch
from .base import IFieldMatcher, normalize_phone

if TYPE_CHECKING:
    from ..domain.models import Invoice, Payment

EXACT_PHONE_SCORE = 1.0
NEAR_PHONE_SCORE = 0.9
NEAR_PHONE_DIGITS = 8


class PhoneMatcher(IFieldMatcher):
    """Match the payer phone number against the tenant phone number.

    Scoring:
    - Same 9-digit local number → 1.0
    - Same last 8 digits (one-digit tolerance) → 0.9
    - Otherwise, or either number missing → no match
    """

    field = MatchField.PHONE

    def match(self, payment: "Payment", invoice: "Invoice") -> FieldMatch:
        payment_phone = normalize_phone(payment.phone_number)
        invoice_phone = normalize_phone(invoice.tenant_phone)

        if not payment_phone or not invoice_phone:
            return FieldMatch.no_match(self.field)

        if payment_phone == invoice_phone:
            return FieldMatch(field=self.field, matched=True, score=EXACT_PHONE_SCORE)

        if payment_phone[-NEAR_PHONE_DIGITS:] == invoice_phone[-NEAR_PHONE_DIGITS:]:
            return FieldMatch(field=self.field, matched=True, score=NEAR_PHONE_SCORE)

        return FieldMatch.no_match(self.field)
