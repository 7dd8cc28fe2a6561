"""Logging infrastructure.

Provides structured logging with:
- JSONL format for log aggregation
- QueueHandler + QueueListener for non-blocking I/O
- Per-handler log levels (console vs file)
- OpenTelemetry trace correlation

Basic usage:
    from push_service.infra.logging import setup_logging
    import logging

    setup_logging()  # reads LOG_* settings once
    logger = logging.getLogger(__name__)
    logger.info("Multicast finished", extra={"success": 3, "failure": 1})
"""

from push_service.infra.logging.config import (
    configure_logging,
    setup_logging,
    shutdown,
)
from push_service.infra.logging.formatters import JSONFormatter

__all__ = [
    "JSONFormatter",
    "configure_logging",
    "setup_logging",
    "shutdown",
]
