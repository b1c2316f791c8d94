"""Batch reconciliation service.

Assigns a batch of payments to a batch of invoices with a single greedy
pass: payments are processed largest first, and an invoice claimed by one
payment is no longer offered to the ones after it. The assignment is not
globally optimal; a later, better-fitting payment can lose its invoice to an
earlier, larger one.
"""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from ....utils.logging import LogPerformance, get_logger
from ...domain.enums import MatchType
from ...domain.models import Invoice, Payment
from ...domain.value_objects import ReconciliationSummary
from ...metrics import track_reconciliation_duration, update_review_queue_size
from .duplicate_detector import DuplicateDetector

if TYPE_CHECKING:
    from ...matchers.payment_matcher import Matcher

logger = get_logger(__name__)


class ReconciliationService:
    """Reconcile payments against invoices.

    Args:
        matcher: Matcher that picks the best invoice for one payment
        duplicate_detector: Detector run over the same payment batch

    Example:
        >>> service = ReconciliationService(Matcher(MatcherConfig()))
        >>> summary = service.reconcile(payments, invoices)
        >>> print(f"Matched {summary.matched_payments}/{summary.total_payments}")
    """

    def __init__(
        self,
        matcher: "Matcher",
        duplicate_detector: DuplicateDetector | None = None,
    ) -> None:
        self.matcher = matcher
        self.duplicate_detector = duplicate_detector or DuplicateDetector()

    def reconcile(
        self, payments: Sequence[Payment], invoices: Sequence[Invoice]
    ) -> ReconciliationSummary:
        """Match every payment to at most one invoice.

        Args:
            payments: Payment batch (any order)
            invoices: Invoice batch; ineligible invoices are ignored

        Returns:
            ReconciliationSummary with results in processing order
            (amount descending, ties in input order)
        """
        summary = ReconciliationSummary(total_payments=len(payments))

        with track_reconciliation_duration(), LogPerformance("reconciliation", logger):
            # sorted() is stable, so equal amounts keep their input order
            ordered = sorted(payments, key=lambda p: p.amount, reverse=True)
            claimed: set[str] = set()

            for payment in ordered:
                available = [invoice for invoice in invoices if invoice.id not in claimed]
                result = self.matcher.match_one(payment, available)
                summary.results.append(result)
                summary.total_amount_received += payment.amount

                if result.invoice is not None and result.match_type != MatchType.NONE:
                    claimed.add(result.invoice.id)

                if result.is_matched:
                    summary.matched_payments += 1
                    summary.total_amount_matched += payment.amount
                elif result.match_type == MatchType.PARTIAL:
                    summary.partial_matches += 1
                else:
                    summary.unmatched_payments += 1

            summary.duplicate_groups = self.duplicate_detector.find_duplicates(payments)

        update_review_queue_size(MatchType.PARTIAL.value, summary.partial_matches)
        update_review_queue_size(MatchType.NONE.value, summary.unmatched_payments)

        logger.info(
            "reconciliation_summary",
            total_payments=summary.total_payments,
            matched=summary.matched_payments,
            partial=summary.partial_matches,
            unmatched=summary.unmatched_payments,
            duplicate_groups=len(summary.duplicate_groups),
            total_amount_received=summary.total_amount_received,
            total_amount_matched=summary.total_amount_matched,
        )

        return summary
