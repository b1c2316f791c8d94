"""Prometheus metrics instrumentation for payment reconciliation.

Provides metrics collection for monitoring match quality, batch volumes,
duplicate payments and importer health.
"""

import os
from typing import Any

from prometheus_client import Counter, Gauge, Histogram, start_http_server

from ..utils.logging import get_logger

logger = get_logger(__name__)

# ============================================================================
# Metric Definitions
# ============================================================================

# Counter: Payment match decisions
reconciliations_performed_total = Counter(
    "rentrecon_reconciliations_performed_total",
    "Total number of payment match decisions",
    ["match_type"],  # labels: exact/fuzzy/partial/none
)

# Histogram: Matching confidence scores
matching_confidence_scores = Histogram(
    "rentrecon_matching_confidence_scores",
    "Distribution of best-candidate confidence scores",
    ["match_type"],
    buckets=(0.0, 0.25, 0.5, 0.6, 0.7, 0.8, 0.85, 0.9, 0.95, 1.0),
)

# Counter: Duplicate payment groups detected
duplicate_groups_detected_total = Counter(
    "rentrecon_duplicate_groups_detected_total",
    "Total number of suspected duplicate payment groups",
)

# Gauge: Review queue size after the last run
review_queue_size = Gauge(
    "rentrecon_review_queue_size",
    "Payments left for manual review by the last reconciliation run",
    ["match_type"],  # labels: partial/none
)

# Histogram: Batch reconciliation duration
reconciliation_duration_seconds = Histogram(
    "rentrecon_reconciliation_duration_seconds",
    "Time taken to reconcile one payment batch",
    buckets=(0.001, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)

# Counter: Imported records
records_imported_total = Counter(
    "rentrecon_records_imported_total",
    "Total number of payment/invoice records imported",
    ["source", "status"],  # labels: csv/json/mpesa, success/error
)

# Counter: CLI command executions
cli_command_executions_total = Counter(
    "rentrecon_cli_command_executions_total",
    "Total number of CLI command executions",
    ["command", "status"],
)


# ============================================================================
# Metrics Server
# ============================================================================


def start_metrics_server(port: int = 8000) -> None:
    """Start Prometheus metrics HTTP server.

    Only starts when PROMETHEUS_ENABLED=true.

    Args:
        port: Port to expose metrics on (default: 8000)
    """
    if os.getenv("PROMETHEUS_ENABLED", "false").lower() == "true":
        try:
            start_http_server(port)
        except OSError as e:
            # Port already in use, skip
            logger.warning("metrics_server_not_started", port=port, error=str(e))


# ============================================================================
# Convenience Functions
# ============================================================================


def record_match(match_type: str, confidence: float) -> None:
    """Record one payment match decision.

    Args:
        match_type: exact, fuzzy, partial or none
        confidence: Confidence of the best candidate (0.0-1.0)
    """
    reconciliations_performed_total.labels(match_type=match_type).inc()
    matching_confidence_scores.labels(match_type=match_type).observe(confidence)


def record_duplicate_groups(count: int) -> None:
    """Record suspected duplicate payment groups."""
    if count > 0:
        duplicate_groups_detected_total.inc(count)


def update_review_queue_size(match_type: str, count: int) -> None:
    """Update review queue size gauge.

    Args:
        match_type: partial or none
        count: Payments in that band after the last run
    """
    review_queue_size.labels(match_type=match_type).set(count)


def record_import(source: str, status: str, count: int = 1) -> None:
    """Record imported records.

    Args:
        source: Importer source (csv, json, mpesa)
        status: success or error
        count: Number of records
    """
    if count > 0:
        records_imported_total.labels(source=source or "unknown", status=status).inc(count)


def record_cli_command(command: str, status: str = "success") -> None:
    """Record CLI command execution."""
    cli_command_executions_total.labels(command=command, status=status).inc()


# ============================================================================
# Context Managers for Duration Tracking
# ============================================================================


class track_reconciliation_duration:
    """Context manager to track batch reconciliation duration."""

    def __init__(self) -> None:
        self.timer: Any = None

    def __enter__(self) -> "track_reconciliation_duration":
        self.timer = reconciliation_duration_seconds.time()
        self.timer.__enter__()
        return self

    def __exit__(self, *args: Any) -> None:
        if self.timer:
            self.timer.__exit__(*args)


# ============================================================================
# Auto-start metrics server on import (if enabled)
# ============================================================================

if os.getenv("PROMETHEUS_ENABLED", "false").lower() == "true":
    start_metrics_server(int(os.getenv("METRICS_PORT", "8000")))
