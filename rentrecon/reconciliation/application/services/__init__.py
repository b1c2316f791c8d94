"""Business logic services for payment reconciliation."""

__all__ = [
    "DuplicateDetector",
    "ReconciliationService",
]

from .duplicate_detector import DuplicateDetector
from .reconciliation_service import ReconciliationService
