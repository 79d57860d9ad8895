"""
Structured Logging

Every mutation of the books emits one structured event so a session can be
traced from the console or a log file:
- plan_created / plan_deleted
- payment_added / payment_rejected / payment_deleted
- transaction_added / transaction_deleted
- customer_saved
- advisory_failed

This is local logging only. The treasury transactions are the permanent
record of what happened to the money; nothing here is persisted alongside them.

Money values are logged as strings so Decimal precision survives the
JSON renderer.
"""

import logging
import sys
from typing import Optional
from uuid import UUID, uuid4

import structlog


_PROCESSORS = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
    structlog.processors.JSONRenderer(ensure_ascii=False),
]


# Configure structlog for local logging
structlog.configure(
    processors=_PROCESSORS,
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """
    Route structured events to stderr at the given level.

    Safe to call more than once; the last call wins.
    """
    root = logging.getLogger()
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.setLevel(level.upper())


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
    """Get a structured logger, optionally named after its module."""
    return structlog.get_logger(name)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., entering a new plan)
    and bind it to the logger for every subsequent step.
    """
    return uuid4()
