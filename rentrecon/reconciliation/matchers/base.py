"""Base interface for field matching strategies.

Implements the Strategy pattern: each field comparator turns a
(payment, invoice) pair into a ``FieldMatch`` judgment, and the payment
matcher combines the four judgments into one confidence.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from ..domain.models import normalize_phone

if TYPE_CHECKING:
    from ..domain.enums import MatchField
    from ..domain.models import Invoice, Payment
    from ..domain.value_objects import FieldMatch

__all__ = ["IFieldMatcher", "normalize_phone"]


class IFieldMatcher(ABC):
    """Abstract base class for field comparators.

    Comparators are total: missing data yields a non-matching judgment with
    score 0.0, never an exception.

    Implementing a new comparator:
        1. Inherit from IFieldMatcher
        2. Set the ``field`` class attribute
        3. Implement match() returning a FieldMatch with score in [0.0, 1.0]
    """

    field: "MatchField"

    @abstractmethod
    def match(self, payment: "Payment", invoice: "Invoice") -> "FieldMatch":
        """Compare one payment field against an invoice.

        Args:
            payment: Incoming payment
            invoice: Candidate invoice

        Returns:
            FieldMatch with ``matched`` flag and score (0.0-1.0)
        """
        pass

    def __repr__(self) -> str:
        """Human-readable string representation."""
        return f"<{self.__class__.__name__}>"
