"""
Structured logging configuration using structlog.

- JSON logging for production
- Correlation IDs for tracking one reconciliation run
- Sensitive data filtering (credentials, payer phone numbers)
- Performance metrics
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any, cast

import structlog
from structlog.types import EventDict, Processor

# Context variable for tracking correlation IDs across async boundaries
_correlation_id_var: ContextVar[str | None] = ContextVar("correlation_id", default=None)

_SECRET_KEYS = {
    "password",
    "api_key",
    "secret",
    "token",
    "consumer_secret",
    "passkey",
}

# Payer phone numbers are personal data; only the last digits are kept.
_PHONE_KEYS = {"phone_number", "tenant_phone", "msisdn"}


def set_correlation_id(correlation_id: str | None = None) -> str:
    """
    Set correlation ID for the current context.

    Args:
        correlation_id: Custom correlation ID. If None, generates a new UUID.

    Returns:
        The correlation ID that was set.
    """
    if correlation_id is None:
        correlation_id = str(uuid.uuid4())
    _correlation_id_var.set(correlation_id)
    return correlation_id


def get_correlation_id() -> str | None:
    """Get the current correlation ID from context."""
    return _correlation_id_var.get()


def clear_correlation_id() -> None:
    """Clear the correlation ID from context."""
    _correlation_id_var.set(None)


def add_correlation_id(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add correlation ID to all log entries."""
    correlation_id = get_correlation_id()
    if "correlation_id" not in event_dict:
        event_dict["correlation_id"] = correlation_id
    return event_dict


def mask_phone(value: Any) -> str:
    """Mask a phone number, keeping only the last three digits."""
    digits = "".join(ch for ch in str(value) if ch.isdigit())
    if len(digits) <= 3:
        return "***"
    return f"***{digits[-3:]}"


def filter_sensitive_data(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """
    Filter sensitive data from logs (credentials, payer phone numbers).
    """
    for key in _SECRET_KEYS:
        if key in event_dict:
            event_dict[key] = "***REDACTED***"

    for key in _PHONE_KEYS:
        if key in event_dict and event_dict[key]:
            event_dict[key] = mask_phone(event_dict[key])

    # Also check nested event dict
    if "event" in event_dict and isinstance(event_dict["event"], dict):
        for key in _SECRET_KEYS:
            if key in event_dict["event"]:
                event_dict["event"][key] = "***REDACTED***"

    return event_dict


def add_app_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Add application context to every log entry."""
    from rentrecon import __version__

    event_dict["app"] = "rentrecon"
    event_dict["version"] = __version__
    return event_dict


def configure_logging(
    log_level: str = "INFO",
    json_logs: bool = False,
    dev_mode: bool = True,
) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        json_logs: Whether to output JSON logs (recommended for production)
        dev_mode: Whether to use development-friendly output
    """
    shared_processors: list[Processor] = [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        add_correlation_id,
        add_app_context,
        filter_sensitive_data,
    ]

    if dev_mode:
        processors = shared_processors + [structlog.dev.ConsoleRenderer(colors=True)]
    elif json_logs:
        processors = shared_processors + [
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.KeyValueRenderer(key_order=["timestamp", "level", "event"]),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # Log to stderr so CLI output on stdout stays machine-readable
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=getattr(logging, log_level.upper()),
    )
    logging.getLogger().setLevel(getattr(logging, log_level.upper()))


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Usage:
        logger = get_logger(__name__)
        logger.info("reconciliation_completed", matched=12, unmatched=3)
    """
    return cast(structlog.stdlib.BoundLogger, structlog.get_logger(name))


class LogPerformance:
    """
    Context manager for logging performance metrics.

    Usage:
        with LogPerformance("reconciliation", logger) as perf:
            ...
        perf.duration_seconds
    """

    def __init__(self, operation: str, logger: structlog.stdlib.BoundLogger):
        self.operation = operation
        self.logger = logger
        self.start_time: float = 0
        self.duration_seconds: float = 0

    def __enter__(self) -> "LogPerformance":
        import time

        self.start_time = time.perf_counter()
        self.logger.debug(f"{self.operation}_started")
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        import time

        self.duration_seconds = time.perf_counter() - self.start_time

        if exc_type is None:
            self.logger.info(
                f"{self.operation}_completed",
                duration_ms=round(self.duration_seconds * 1000, 2),
                operation=self.operation,
            )
        else:
            self.logger.error(
                f"{self.operation}_failed",
                duration_ms=round(self.duration_seconds * 1000, 2),
                operation=self.operation,
                error=str(exc_val),
                error_type=exc_type.__name__ if exc_type else None,
            )


# Audit logging helpers
def log_match_decision(
    logger: structlog.stdlib.BoundLogger,
    payment_id: str,
    invoice_id: str | None,
    match_type: str,
    confidence: float,
    reasons: list[str],
) -> None:
    """Log a single payment-to-invoice decision for the audit trail."""
    logger.info(
        "payment_match_decision",
        action="match",
        resource="payment",
        payment_id=payment_id,
        invoice_id=invoice_id,
        match_type=match_type,
        confidence=round(confidence, 4),
        reasons=reasons,
    )


def log_duplicate_group(
    logger: structlog.stdlib.BoundLogger,
    payment_ids: list[str],
    amount: int,
) -> None:
    """Log a suspected duplicate payment group for the audit trail."""
    logger.warning(
        "duplicate_payments_detected",
        action="flag",
        resource="payment",
        payment_ids=payment_ids,
        amount=amount,
        group_size=len(payment_ids),
    )


# Initialize logging on module import
configure_logging()
