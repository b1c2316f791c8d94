"""Customer name matcher."""

from typing import TYPE_CHECKING

from ..domain.enums import MatchField
from ..domain.value_objects import FieldMatch
from .base import IFieldMatcher
from .similarity import similarity

if TYPE_CHECKING:
    from ..domain.models import Invoice, Payment

MIN_FULL_NAME_SIMILARITY = 0.7
MIN_TOKEN_SIMILARITY = 0.8
MIN_TOKEN_LENGTH = 3
# Single shared first/last name: weaker than a full-name hit.
TOKEN_MATCH_SCORE = 0.7


class NameMatcher(IFieldMatcher):
    """Match the payer name against the tenant name.

    Scoring:
    - Full-name similarity above 0.7 → that similarity
    - Any pair of name tokens (3+ chars) with similarity above 0.8 → 0.7
    - Otherwise, or either name missing → no match
    """

    field = MatchField.NAME

    def match(self, payment: "Payment", invoice: "Invoice") -> FieldMatch:
        customer_name = payment.customer_name
        tenant_name = invoice.tenant_name
        if not customer_name or not tenant_name:
            return FieldMatch.no_match(self.field)

        full = similarity(customer_name, tenant_name)
        if full > MIN_FULL_NAME_SIMILARITY:
            return FieldMatch(field=self.field, matched=True, score=full)

        payment_tokens = customer_name.lower().split()
        tenant_tokens = tenant_name.lower().split()

        for p_token in payment_tokens:
            if len(p_token) < MIN_TOKEN_LENGTH:
                continue
            for t_token in tenant_tokens:
                if len(t_token) < MIN_TOKEN_LENGTH:
                    continue
                if similarity(p_token, t_token) > MIN_TOKEN_SIMILARITY:
                    return FieldMatch(field=self.field, matched=True, score=TOKEN_MATCH_SCORE)

        return FieldMatch.no_match(self.field)
