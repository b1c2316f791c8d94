"""Confidence scoring and classification.

Final confidence = (phone * 0.35) + (amount * 0.35) + (reference * 0.20) + (name * 0.10)

with the weights taken from ``MatcherConfig``. Classification bands:

    confidence >= 0.95          → EXACT
    confidence >= fuzzy floor   → FUZZY  (default 0.70)
    confidence >= 0.5           → PARTIAL
    otherwise                   → NONE
"""

from collections.abc import Iterable

from ..config import EXACT_THRESHOLD, PARTIAL_THRESHOLD, MatcherConfig
from ..domain.enums import MatchField, MatchType
from ..domain.value_objects import FieldMatch

FIELD_ORDER: tuple[MatchField, ...] = (
    MatchField.PHONE,
    MatchField.AMOUNT,
    MatchField.REFERENCE,
    MatchField.NAME,
)


class ConfidenceScorer:
    """Combine field judgments into a confidence and a match type.

    Example:
        >>> scorer = ConfidenceScorer(MatcherConfig())
        >>> scorer.classify(0.88)
        <MatchType.FUZZY: 'fuzzy'>
    """

    def __init__(self, config: MatcherConfig) -> None:
        self.config = config
        self.weights: dict[MatchField, float] = {
            MatchField.PHONE: config.phone_match_weight,
            MatchField.AMOUNT: config.amount_match_weight,
            MatchField.REFERENCE: config.reference_match_weight,
            MatchField.NAME: config.name_match_weight,
        }

    @property
    def fuzzy_threshold(self) -> float:
        return self.config.fuzzy_threshold

    def score(self, field_matches: Iterable[FieldMatch]) -> float:
        """Weighted sum of field scores, clamped to [0.0, 1.0]."""
        confidence = sum(match.score * self.weights[match.field] for match in field_matches)
        return self._validate_confidence(confidence)

    def classify(self, confidence: float) -> MatchType:
        """Map a confidence to its band (bands checked from the top down)."""
        if confidence >= EXACT_THRESHOLD:
            return MatchType.EXACT
        if confidence >= self.fuzzy_threshold:
            return MatchType.FUZZY
        if confidence >= PARTIAL_THRESHOLD:
            return MatchType.PARTIAL
        return MatchType.NONE

    def settle(self, confidence: float) -> MatchType:
        """Classify the selected candidate of a payment.

        Anything below the fuzzy floor is never auto-accepted, even when the
        floor is configured above the EXACT band.
        """
        match_type = self.classify(confidence)
        if confidence < self.fuzzy_threshold:
            match_type = MatchType.PARTIAL if confidence >= PARTIAL_THRESHOLD else MatchType.NONE
        return match_type

    @staticmethod
    def reasons(field_matches: Iterable[FieldMatch]) -> list[str]:
        """Reason strings of the comparators that fired, in field order."""
        by_field = {match.field: match for match in field_matches}
        return [
            by_field[field].reason
            for field in FIELD_ORDER
            if field in by_field and by_field[field].matched
        ]

    @staticmethod
    def _validate_confidence(confidence: float) -> float:
        return max(0.0, min(1.0, confidence))

    def __repr__(self) -> str:
        return f"<ConfidenceScorer(fuzzy_threshold={self.fuzzy_threshold})>"
