"""
Monitoring for the AutoProof registry.

Components:
    StructuredLogger - JSON structured logging

Example:
    from autoproof.monitoring import configure_logging

    logger = configure_logging("debug", json_format=False)
    logger.info("registry_started", admin="ST1PQ...")
"""

from autoproof.monitoring.logging import (
    StructuredLogger,
    LogLevel,
    LogRecord,
    configure_logging,
    get_logger,
)

__all__ = [
    "StructuredLogger",
    "LogLevel",
    "LogRecord",
    "configure_logging",
    "get_logger",
]
