"""Logging Audit module.

This module provides the leveled logging facade used by the EUDR API Client.
"""

from .formatters import CredentialRedactingFormatter
from .logger import (
    LOG_LEVELS,
    ConsoleLogger,
    EudrLogger,
    LoggerSettings,
    StructuredLogger,
    configure_logging,
    create_child_logger,
    create_default_logger,
    create_logger,
    normalize_level,
    should_log,
)

__all__ = [
    "LOG_LEVELS",
    "ConsoleLogger",
    "CredentialRedactingFormatter",
    "EudrLogger",
    "LoggerSettings",
    "StructuredLogger",
    "configure_logging",
    "create_child_logger",
    "create_default_logger",
    "create_logger",
    "normalize_level",
    "should_log",
]
