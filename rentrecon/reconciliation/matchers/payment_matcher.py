"""Payment-to-invoice matcher and public facade.

``Matcher`` scores one payment against a list of candidate invoices and keeps
the best one. ``PaymentMatcher`` is the entry point used by callers: it
builds the configuration and also exposes batch reconciliation and duplicate
detection.

Usage:
    from rentrecon.reconciliation.matchers import payment_matcher

    result = payment_matcher.match_one(payment, invoices)
    summary = payment_matcher.reconcile(payments, invoices)
"""

from collections.abc import Sequence
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from ...exceptions import ConfigurationError
from ...utils.logging import get_logger, log_match_decision
from ..application.services.duplicate_detector import DuplicateDetector
from ..application.services.reconciliation_service import ReconciliationService
from ..config import MatcherConfig
from ..domain.enums import MatchType
from ..domain.models import Invoice, Payment
from ..domain.value_objects import FieldMatch, MatchResult, ReconciliationSummary
from ..metrics import record_match
from .amount import AmountMatcher
from .base import IFieldMatcher
from .name import NameMatcher
from .phone import PhoneMatcher
from .reference import ReferenceMatcher
from .scoring import ConfidenceScorer

logger = get_logger(__name__)


class Matcher:
    """Pick the best eligible invoice for a payment.

    Algorithm:
    1. Drop ineligible invoices (paid, or no balance left)
    2. For each remaining invoice, run the four field comparators and
       combine their scores into a confidence
    3. Keep the candidate with the strictly highest confidence; the first
       one wins a tie
    4. Classify the winner; a NONE result still names it as ``invoice``

    Attributes:
        config: Matcher configuration
        scorer: Confidence scorer built from the configuration
        field_matchers: Comparators in reason order (phone, amount, reference, name)
    """

    def __init__(self, config: MatcherConfig) -> None:
        self.config = config
        self.scorer = ConfidenceScorer(config)
        self.field_matchers: list[IFieldMatcher] = [
            PhoneMatcher(),
            AmountMatcher(tolerance_percent=config.amount_tolerance_percent),
            ReferenceMatcher(),
            NameMatcher(),
        ]

    def evaluate(self, payment: Payment, invoice: Invoice) -> tuple[FieldMatch, ...]:
        """Run every field comparator on one payment/invoice pair."""
        return tuple(matcher.match(payment, invoice) for matcher in self.field_matchers)

    def match_one(self, payment: Payment, invoices: Sequence[Invoice]) -> MatchResult:
        """Find the best invoice for a payment.

        Args:
            payment: Payment to attribute
            invoices: Candidate invoices (ineligible ones are skipped)

        Returns:
            MatchResult; ``invoice`` is None only when nothing scored above
            zero, a NONE result otherwise still names the best candidate
        """
        best_invoice: Invoice | None = None
        best_confidence = 0.0
        best_matches: tuple[FieldMatch, ...] = ()

        for invoice in invoices:
            if not invoice.is_eligible:
                continue

            field_matches = self.evaluate(payment, invoice)
            confidence = self.scorer.score(field_matches)

            if confidence > best_confidence:
                best_invoice = invoice
                best_confidence = confidence
                best_matches = field_matches

        if best_invoice is None:
            result = MatchResult(
                payment=payment,
                invoice=None,
                confidence=0.0,
                match_type=MatchType.NONE,
            )
        else:
            match_type = self.scorer.settle(best_confidence)
            result = MatchResult(
                payment=payment,
                invoice=best_invoice,
                confidence=best_confidence,
                match_type=match_type,
                reasons=self.scorer.reasons(best_matches),
                field_matches=best_matches,
            )

        log_match_decision(
            logger,
            payment_id=payment.id,
            invoice_id=result.invoice.id if result.invoice else None,
            match_type=result.match_type.value,
            confidence=result.confidence,
            reasons=result.reasons,
        )
        record_match(result.match_type.value, result.confidence)

        return result

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(fuzzy_threshold={self.config.fuzzy_threshold})>"


class PaymentMatcher(Matcher):
    """Public facade over matching, reconciliation and duplicate detection.

    Args:
        config: Base configuration (defaults, plus environment overrides)
        **overrides: Individual settings replacing those of ``config``

    Raises:
        ConfigurationError: If the resulting configuration is invalid

    Example:
        >>> matcher = PaymentMatcher(fuzzy_threshold=0.8)
        >>> summary = matcher.reconcile(payments, invoices)
        >>> summary.match_rate
        0.75
    """

    def __init__(self, config: MatcherConfig | None = None, **overrides: Any) -> None:
        super().__init__(self._build_config(config, overrides))
        self.duplicate_detector = DuplicateDetector()
        self.reconciliation_service = ReconciliationService(self, self.duplicate_detector)

    @staticmethod
    def _build_config(config: MatcherConfig | None, overrides: dict[str, Any]) -> MatcherConfig:
        try:
            if config is None:
                return MatcherConfig(**overrides)
            if overrides:
                return MatcherConfig(**{**config.model_dump(), **overrides})
            return config
        except PydanticValidationError as e:
            errors = e.errors()
            setting = ".".join(str(part) for part in errors[0]["loc"]) if errors else None
            logger.error("matcher_config_invalid", error=str(e), setting=setting)
            raise ConfigurationError(
                f"Invalid matcher configuration: {errors[0]['msg'] if errors else e}",
                setting=setting or None,
                context={"overrides": sorted(overrides)},
                original_error=e,
            ) from e

    def reconcile(
        self, payments: Sequence[Payment], invoices: Sequence[Invoice]
    ) -> ReconciliationSummary:
        """Reconcile a payment batch against an invoice batch."""
        return self.reconciliation_service.reconcile(payments, invoices)

    def find_duplicates(self, payments: Sequence[Payment]) -> list[list[Payment]]:
        """Group suspected duplicate payments."""
        return self.duplicate_detector.find_duplicates(payments)


# Default instance
payment_matcher = PaymentMatcher()
