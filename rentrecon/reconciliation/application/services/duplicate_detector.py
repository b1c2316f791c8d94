"""Duplicate payment detection.

Flags payments that look like the same money sent twice: same amount, same
phone number and less than 24 hours apart. Typical causes are a payer
retrying after a delayed confirmation or a settlement feed replaying a
transaction.
"""

from collections.abc import Sequence
from datetime import timedelta

from ....utils.logging import get_logger, log_duplicate_group
from ...domain.models import Payment, normalize_phone
from ...metrics import record_duplicate_groups

logger = get_logger(__name__)

DUPLICATE_WINDOW = timedelta(hours=24)


class DuplicateDetector:
    """Group suspected duplicate payments.

    The scan is quadratic in the number of payments and walks them in input
    order. Each payment belongs to at most one group: the first payment of a
    group is its seed, and later payments join the first seed they match.

    Example:
        >>> detector = DuplicateDetector()
        >>> groups = detector.find_duplicates(payments)
        >>> [[p.id for p in group] for group in groups]
        [['p1', 'p2']]
    """

    def __init__(self, window: timedelta = DUPLICATE_WINDOW) -> None:
        self.window = window

    def find_duplicates(self, payments: Sequence[Payment]) -> list[list[Payment]]:
        """Return groups of two or more suspected duplicates, seeds first."""
        groups: list[list[Payment]] = []
        checked: set[str] = set()

        for index, seed in enumerate(payments):
            if seed.id in checked:
                continue

            group = [seed]
            for other in payments[index + 1 :]:
                if other.id in checked:
                    continue
                if self.is_duplicate(seed, other):
                    group.append(other)
                    checked.add(other.id)

            if len(group) > 1:
                checked.add(seed.id)
                groups.append(group)
                log_duplicate_group(logger, [p.id for p in group], seed.amount)

        record_duplicate_groups(len(groups))
        return groups

    def is_duplicate(self, first: Payment, second: Payment) -> bool:
        """Whether two payments share amount and phone within the time window.

        Two payments without a usable phone number compare as the same
        phone.
        """
        if first.amount != second.amount:
            return False
        if normalize_phone(first.phone_number) != normalize_phone(second.phone_number):
            return False
        return abs(first.transaction_date - second.transaction_date) < self.window
