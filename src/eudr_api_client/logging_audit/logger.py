"""Leveled logging facade for the EUDR API Client.

The client logs through its own logger instances instead of the root logger so
that it does not interfere with parent applications. Two backends implement
the same leveled interface (see ``EudrLogger``):

- ``StructuredLogger`` renders one JSON object per line through structlog
- ``ConsoleLogger`` writes plain lines through the standard logging module
  and is used when structured output is disabled or structlog is unavailable

The backend is chosen once when the logger is created. The default logger's
level comes from the EUDR_LOG_LEVEL environment variable, read once at import.
"""

import importlib.util
import logging
import os
import sys
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, replace
from types import MappingProxyType
from typing import Any, Optional, Protocol, TextIO

from .formatters import CredentialRedactingFormatter

# Log level hierarchy for filtering
LOG_LEVELS: Mapping[str, int] = MappingProxyType({
    "trace": 0,
    "debug": 1,
    "info": 2,
    "warn": 3,
    "error": 4,
    "fatal": 5,
})

DEFAULT_LEVEL = "warn"
DEFAULT_LOGGER_NAME = "eudr-api-client"
LOG_LEVEL_ENV_VAR = "EUDR_LOG_LEVEL"

CONSOLE_LOG_FORMAT = "[%(asctime)s] %(levelname)s (%(name)s): %(message)s"
CONSOLE_DATE_FORMAT = "%H:%M:%S"

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

# Facade levels expressed as standard logging levels
STDLIB_LEVELS: Mapping[str, int] = MappingProxyType({
    "trace": TRACE,
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "error": logging.ERROR,
    "fatal": logging.CRITICAL,
})

# Keys masked by the structured backend
SENSITIVE_KEYS = frozenset({"password", "password_digest", "nonce"})

_logging_configured = False


def should_log(current_level: str, message_level: str) -> bool:
    """Check if a message should be emitted at the current logger level.

    Unknown current levels count as ``warn``; unknown message levels count
    as ``info``.

    Args:
        current_level: Current logger level
        message_level: Level of the message to log

    Returns:
        Whether the message should be logged
    """
    current = LOG_LEVELS.get(current_level, LOG_LEVELS[DEFAULT_LEVEL])
    message = LOG_LEVELS.get(message_level, LOG_LEVELS["info"])
    return message >= current


def normalize_level(level: Optional[str]) -> Optional[str]:
    """Return the lower-cased level name, or None if it is not a known level."""
    if not level or not isinstance(level, str):
        return None
    level = level.strip().lower()
    return level if level in LOG_LEVELS else None


def structlog_available() -> bool:
    """Return True if the structlog package can be imported."""
    return importlib.util.find_spec("structlog") is not None


@dataclass(frozen=True)
class LoggerSettings:
    """Construction settings for a logger.

    Attributes:
        name: Logger name included in every record
        level: Initial level (trace, debug, info, warn, error, fatal)
        structured: Prefer the structured JSON backend
        redact_credentials: Mask passwords and nonces in output
    """

    name: str = DEFAULT_LOGGER_NAME
    level: str = DEFAULT_LEVEL
    structured: bool = True
    redact_credentials: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LoggerSettings":
        """Build settings from the environment.

        Only EUDR_LOG_LEVEL is read, case-insensitively. Absent or
        unrecognised values keep the default level.

        Args:
            environ: Environment mapping, defaults to os.environ

        Returns:
            LoggerSettings instance
        """
        env = os.environ if environ is None else environ
        level = normalize_level(env.get(LOG_LEVEL_ENV_VAR))
        if level is not None:
            return cls(level=level)
        return cls()


class EudrLogger(Protocol):
    """Leveled logging interface shared by all backends."""

    name: str
    is_structured: bool

    @property
    def level(self) -> str: ...

    @level.setter
    def level(self, value: str) -> None: ...

    def trace(self, message: Any = None, **fields: Any) -> None: ...

    def debug(self, message: Any = None, **fields: Any) -> None: ...

    def info(self, message: Any = None, **fields: Any) -> None: ...

    def warn(self, message: Any = None, **fields: Any) -> None: ...

    def error(self, message: Any = None, **fields: Any) -> None: ...

    def fatal(self, message: Any = None, **fields: Any) -> None: ...

    def child(self, **bindings: Any) -> "EudrLogger": ...


class _LeveledLogger(ABC):
    """Level handling shared by both backends."""

    is_structured = False

    def __init__(self, settings: LoggerSettings, bindings: Mapping[str, Any]) -> None:
        self.name = settings.name
        self._settings = settings
        self._bindings = dict(bindings)
        self._level = DEFAULT_LEVEL
        self.level = settings.level

    @property
    def level(self) -> str:
        return self._level

    @level.setter
    def level(self, value: str) -> None:
        # Unknown level names fall back to the default instead of raising
        self._level = normalize_level(value) or DEFAULT_LEVEL

    @property
    def bindings(self) -> dict[str, Any]:
        return dict(self._bindings)

    def is_level_enabled(self, level: str) -> bool:
        return should_log(self._level, level)

    def trace(self, message: Any = None, **fields: Any) -> None:
        self._log("trace", message, fields)

    def debug(self, message: Any = None, **fields: Any) -> None:
        self._log("debug", message, fields)

    def info(self, message: Any = None, **fields: Any) -> None:
        self._log("info", message, fields)

    def warn(self, message: Any = None, **fields: Any) -> None:
        self._log("warn", message, fields)

    def error(self, message: Any = None, **fields: Any) -> None:
        self._log("error", message, fields)

    def fatal(self, message: Any = None, **fields: Any) -> None:
        self._log("fatal", message, fields)

    def _log(self, level: str, message: Any, fields: Mapping[str, Any]) -> None:
        if not should_log(self._level, level):
            return
        self._emit(level, message, {**self._bindings, **fields})

    def _child_settings(self) -> LoggerSettings:
        # Children start at the parent's current level
        return replace(self._settings, level=self._level)

    @abstractmethod
    def _emit(self, level: str, message: Any, fields: dict[str, Any]) -> None:
        """Write one record that already passed level filtering."""

    @abstractmethod
    def child(self, **bindings: Any) -> "_LeveledLogger":
        """Create a child logger with additional bound fields."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, level={self._level!r})"


def _redact_sensitive_fields(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor masking credential fields."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = "[REDACTED]"
    return event_dict


class StructuredLogger(_LeveledLogger):
    """Logger rendering JSON lines through structlog.

    Example:
        >>> log = StructuredLogger(LoggerSettings(level="info"))
        >>> log.info("Submitting DDS", service="submission")
        {"service": "submission", "level": "INFO", "name": "eudr-api-client", "message": "Submitting DDS", "time": "10:42:07"}
    """

    is_structured = True

    def __init__(
        self,
        settings: LoggerSettings,
        stream: Optional[TextIO] = None,
        bindings: Optional[Mapping[str, Any]] = None,
        _bound: Any = None,
    ) -> None:
        super().__init__(settings, bindings or {})
        if _bound is None:
            import structlog

            processors: list[Any] = []
            if settings.redact_credentials:
                processors.append(_redact_sensitive_fields)
            processors += [
                structlog.processors.TimeStamper(fmt=CONSOLE_DATE_FORMAT, utc=False, key="time"),
                structlog.processors.JSONRenderer(default=str),
            ]
            # Generic BoundLogger: events are keyword-only, level filtering is ours
            _bound = structlog.wrap_logger(
                structlog.PrintLogger(file=stream),
                wrapper_class=structlog.BoundLogger,
                processors=processors,
                context_class=dict,
            )
        self._bound = _bound

    def _emit(self, level: str, message: Any, fields: dict[str, Any]) -> None:
        event = {**fields, "level": level.upper(), "name": self.name, "message": message}
        self._bound.msg(**event)

    def child(self, **bindings: Any) -> "StructuredLogger":
        """Create a child logger with additional bound fields."""
        return StructuredLogger(
            self._child_settings(),
            bindings={**self._bindings, **bindings},
            _bound=self._bound,
        )


class ConsoleLogger(_LeveledLogger):
    """Logger writing plain text lines through the standard logging module.

    Records go to a private, non-propagating ``logging.Logger`` so that the
    host application's logging configuration is left untouched.
    """

    def __init__(
        self,
        settings: LoggerSettings,
        stream: Optional[TextIO] = None,
        bindings: Optional[Mapping[str, Any]] = None,
        _logger: Optional[logging.Logger] = None,
    ) -> None:
        super().__init__(settings, bindings or {})
        if _logger is None:
            _logger = logging.Logger(settings.name, level=TRACE)
            _logger.propagate = False
            handler = logging.StreamHandler(stream)
            handler.setFormatter(
                CredentialRedactingFormatter(
                    fmt=CONSOLE_LOG_FORMAT,
                    datefmt=CONSOLE_DATE_FORMAT,
                    redact_credentials=settings.redact_credentials,
                )
            )
            _logger.addHandler(handler)
        self._logger = _logger

    def _emit(self, level: str, message: Any, fields: dict[str, Any]) -> None:
        parts = ["" if message is None else str(message)]
        parts += [f"{key}={value}" for key, value in sorted(fields.items())]
        self._logger.log(STDLIB_LEVELS[level], " ".join(p for p in parts if p))

    def child(self, **bindings: Any) -> "ConsoleLogger":
        """Create a child logger with additional bound fields."""
        return ConsoleLogger(
            self._child_settings(),
            bindings={**self._bindings, **bindings},
            _logger=self._logger,
        )


def create_logger(
    level: Optional[str] = None,
    name: Optional[str] = None,
    structured: Optional[bool] = None,
    redact_credentials: Optional[bool] = None,
    stream: Optional[TextIO] = None,
    settings: Optional[LoggerSettings] = None,
) -> EudrLogger:
    """Create a logger instance.

    Explicit arguments override ``settings``; unset values use the defaults
    (level ``warn``, structured output when structlog is installed).

    Args:
        level: Log level (trace, debug, info, warn, error, fatal)
        name: Logger name
        structured: Prefer the structlog backend
        redact_credentials: Mask passwords and nonces in output
        stream: Output stream (stdout for structured, stderr for console)
        settings: Base settings to start from

    Returns:
        StructuredLogger or ConsoleLogger

    Example:
        >>> log = create_logger(level="debug", name="submission")
        >>> log.debug("Built envelope", size=2048)
    """
    overrides = {
        key: value
        for key, value in {
            "level": level,
            "name": name,
            "structured": structured,
            "redact_credentials": redact_credentials,
        }.items()
        if value is not None
    }
    resolved = replace(settings or LoggerSettings(), **overrides)

    if resolved.structured and structlog_available():
        return StructuredLogger(resolved, stream=stream)
    return ConsoleLogger(resolved, stream=stream)


def create_default_logger(environ: Optional[Mapping[str, str]] = None) -> EudrLogger:
    """Create a logger configured from EUDR_LOG_LEVEL.

    Args:
        environ: Environment mapping, defaults to os.environ

    Returns:
        Logger at the environment's level, or ``warn``
    """
    return create_logger(settings=LoggerSettings.from_env(environ))


DEFAULT_SETTINGS = LoggerSettings.from_env()

# Default logger instance for the EUDR API Client
logger = create_logger(settings=DEFAULT_SETTINGS)


def create_child_logger(**bindings: Any) -> EudrLogger:
    """Create a child of the default logger with additional context.

    Example:
        >>> log = create_child_logger(service="echo", request_id="42")
        >>> log.warn("Slow response", elapsed_ms=5400)
    """
    return logger.child(**bindings)


def configure_logging(level: str = DEFAULT_LEVEL, redact_credentials: bool = True) -> None:
    """Configure standard logging for the ``eudr_api_client`` package.

    Library modules log through ``logging.getLogger(__name__)``; this attaches
    a stderr handler to the package logger. It can be called repeatedly, each
    call replacing the previous handler.

    Args:
        level: Facade log level (trace, debug, info, warn, error, fatal)
        redact_credentials: Mask passwords and nonces in output

    Raises:
        ValueError: If invalid log level is provided
    """
    global _logging_configured

    if level not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(LOG_LEVELS)}"
        )

    package_logger = logging.getLogger("eudr_api_client")
    if _logging_configured:
        package_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        CredentialRedactingFormatter(
            fmt=CONSOLE_LOG_FORMAT,
            datefmt=CONSOLE_DATE_FORMAT,
            redact_credentials=redact_credentials,
        )
    )
    package_logger.addHandler(handler)
    package_logger.setLevel(STDLIB_LEVELS[level])

    _logging_configured = True
