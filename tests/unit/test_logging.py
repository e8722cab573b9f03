"""Unit tests for the logging_audit module."""

import importlib
import io
import json
import logging

import pytest

from eudr_api_client.logging_audit import (
    LOG_LEVELS,
    ConsoleLogger,
    CredentialRedactingFormatter,
    LoggerSettings,
    StructuredLogger,
    configure_logging,
    create_child_logger,
    create_default_logger,
    create_logger,
    normalize_level,
    should_log,
)

logger_module = importlib.import_module("eudr_api_client.logging_audit.logger")

LEVEL_NAMES = ["trace", "debug", "info", "warn", "error", "fatal"]


def _lines(stream: io.StringIO) -> list[str]:
    return [line for line in stream.getvalue().splitlines() if line]


class TestShouldLog:
    """Test level filtering rules."""

    def test_levels_ordered(self) -> None:
        """Test level hierarchy order."""
        assert sorted(LOG_LEVELS, key=LOG_LEVELS.get) == LEVEL_NAMES

    def test_message_at_or_above_current_level(self) -> None:
        assert should_log("warn", "warn") is True
        assert should_log("warn", "error") is True
        assert should_log("warn", "info") is False

    def test_unknown_current_level_counts_as_warn(self) -> None:
        assert should_log("verbose", "warn") is True
        assert should_log("verbose", "info") is False

    def test_unknown_message_level_counts_as_info(self) -> None:
        assert should_log("info", "notice") is True
        assert should_log("warn", "notice") is False


class TestLoggerSettings:
    """Test settings construction from the environment."""

    def test_defaults(self) -> None:
        settings = LoggerSettings()

        assert settings.name == "eudr-api-client"
        assert settings.level == "warn"
        assert settings.structured is True

    @pytest.mark.parametrize("level", LEVEL_NAMES)
    def test_from_env_reads_level(self, level: str) -> None:
        """Test EUDR_LOG_LEVEL selects the level."""
        assert LoggerSettings.from_env({"EUDR_LOG_LEVEL": level}).level == level

    def test_from_env_missing_level(self) -> None:
        assert LoggerSettings.from_env({}).level == "warn"

    def test_from_env_invalid_level(self) -> None:
        assert LoggerSettings.from_env({"EUDR_LOG_LEVEL": "loud"}).level == "warn"

    @pytest.mark.parametrize("value,expected", [("DEBUG", "debug"), (" Error ", "error")])
    def test_from_env_ignores_case(self, value: str, expected: str) -> None:
        assert LoggerSettings.from_env({"EUDR_LOG_LEVEL": value}).level == expected
        assert create_default_logger({"EUDR_LOG_LEVEL": value}).level == expected

    @pytest.mark.parametrize(
        "value,expected",
        [("info", "info"), ("FATAL", "fatal"), ("verbose", None), ("", None), (None, None), (3, None)],
    )
    def test_normalize_level(self, value, expected) -> None:
        assert normalize_level(value) == expected

    def test_from_env_defaults_to_os_environ(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("EUDR_LOG_LEVEL", "error")

        assert LoggerSettings.from_env().level == "error"


class TestDefaultLogger:
    """Test the default logger instance."""

    def test_default_logger_interface(self) -> None:
        """Test default logger exposes the leveled interface."""
        from eudr_api_client import logger

        for method in LEVEL_NAMES + ["child"]:
            assert callable(getattr(logger, method))
        assert logger.level in LOG_LEVELS

    def test_default_level_without_environment(self) -> None:
        """Test default logger level is warn with no override."""
        assert create_default_logger({}).level == "warn"

    @pytest.mark.parametrize("level", LEVEL_NAMES)
    def test_environment_override(self, level: str) -> None:
        """Test EUDR_LOG_LEVEL sets the default logger level."""
        assert create_default_logger({"EUDR_LOG_LEVEL": level}).level == level

    def test_default_logger_built_from_import_time_settings(self) -> None:
        """Test the module-level logger uses the settings read at import."""
        assert logger_module.logger.level == logger_module.DEFAULT_SETTINGS.level

    def test_create_child_logger(self) -> None:
        """Test child of default logger has the leveled interface."""
        child = create_child_logger(service="test-service", request_id="test-123")

        for method in LEVEL_NAMES:
            assert callable(getattr(child, method))
        assert child.bindings == {"service": "test-service", "request_id": "test-123"}

    def test_create_child_logger_without_bindings(self) -> None:
        child = create_child_logger()

        assert child.bindings == {}


class TestCreateLogger:
    """Test logger factory and backend selection."""

    def test_custom_options(self) -> None:
        log = create_logger(level="debug", name="custom-test-logger")

        assert log.level == "debug"
        assert log.name == "custom-test-logger"

    def test_empty_options(self) -> None:
        assert create_logger().level == "warn"

    def test_structured_backend_when_available(self) -> None:
        log = create_logger(level="info")

        assert isinstance(log, StructuredLogger)
        assert log.is_structured is True

    def test_console_backend_when_disabled(self) -> None:
        log = create_logger(structured=False)

        assert isinstance(log, ConsoleLogger)
        assert log.is_structured is False

    def test_console_fallback_without_structlog(self, mocker) -> None:
        """Test fallback when structlog is not installed."""
        mocker.patch.object(logger_module, "structlog_available", return_value=False)

        log = logger_module.create_logger(level="trace")

        assert isinstance(log, ConsoleLogger)
        assert log.level == "trace"

    def test_arguments_override_settings(self) -> None:
        settings = LoggerSettings(name="base", level="error")

        log = create_logger(level="info", settings=settings)

        assert log.level == "info"
        assert log.name == "base"


@pytest.fixture(params=[True, False], ids=["structured", "console"])
def structured(request) -> bool:
    return request.param


class TestLevelFiltering:
    """Test filtering behaviour shared by both backends."""

    @pytest.mark.parametrize("level", LEVEL_NAMES)
    def test_logs_every_level_at_trace(self, structured: bool, log_stream, level: str) -> None:
        log = create_logger(level="trace", structured=structured, stream=log_stream)

        getattr(log, level)(f"Test {level} message")

        lines = _lines(log_stream)
        assert len(lines) == 1
        assert f"Test {level} message" in lines[0]

    def test_filters_below_debug(self, structured: bool, log_stream) -> None:
        log = create_logger(level="debug", structured=structured, stream=log_stream)

        log.trace("This should not appear")
        log.debug("This should appear")
        log.info("This should appear")

        lines = _lines(log_stream)
        assert len(lines) == 2
        assert all("This should appear" in line for line in lines)

    def test_filters_below_warn(self, structured: bool, log_stream) -> None:
        log = create_logger(level="warn", structured=structured, stream=log_stream)

        log.debug("This should not appear")
        log.info("This should not appear")
        log.warn("This should appear")
        log.error("This should appear")

        assert len(_lines(log_stream)) == 2

    def test_filters_below_error(self, structured: bool, log_stream) -> None:
        log = create_logger(level="error", structured=structured, stream=log_stream)

        log.debug("This should not appear")
        log.info("This should not appear")
        log.warn("This should not appear")
        log.error("This should appear")

        lines = _lines(log_stream)
        assert len(lines) == 1
        assert "This should appear" in lines[0]

    def test_null_and_empty_messages(self, structured: bool, log_stream) -> None:
        """Test None and empty messages do not raise."""
        log = create_logger(level="trace", structured=structured, stream=log_stream)

        log.info(None)
        log.info()
        log.info("")

        assert len(_lines(log_stream)) >= 2

    def test_level_change_applies_to_later_calls(self, structured: bool, log_stream) -> None:
        log = create_logger(level="error", structured=structured, stream=log_stream)

        log.info("hidden")
        log.level = "info"
        log.info("shown")

        lines = _lines(log_stream)
        assert len(lines) == 1
        assert "shown" in lines[0]


class TestLevelSetting:
    """Test level property behaviour."""

    def test_set_and_get_level(self, structured: bool) -> None:
        log = create_logger(level="info", structured=structured)

        log.level = "debug"
        assert log.level == "debug"

        log.level = "trace"
        assert log.level == "trace"

    def test_invalid_level_falls_back_to_warn(self, structured: bool) -> None:
        log = create_logger(level="debug", structured=structured)

        log.level = "invalid-level"

        assert log.level == "warn"

    def test_invalid_level_at_construction(self, structured: bool) -> None:
        assert create_logger(level="loud", structured=structured).level == "warn"

    def test_level_name_case_insensitive(self, structured: bool) -> None:
        log = create_logger(structured=structured)

        log.level = "INFO"

        assert log.level == "info"


class TestBackendBase:
    """Test the shared backend base class."""

    def test_base_cannot_be_instantiated(self) -> None:
        """Test backends must provide record emission and child creation."""
        with pytest.raises(TypeError):
            logger_module._LeveledLogger(LoggerSettings(), {})

    def test_subclass_missing_emit_rejected(self) -> None:
        class NoEmit(logger_module._LeveledLogger):
            def child(self, **bindings):
                return self

        with pytest.raises(TypeError, match="_emit"):
            NoEmit(LoggerSettings(), {})

    @pytest.mark.parametrize("backend", [StructuredLogger, ConsoleLogger])
    def test_backends_are_leveled_loggers(self, backend) -> None:
        assert issubclass(backend, logger_module._LeveledLogger)


class TestChildLoggers:
    """Test child logger creation."""

    def test_child_inherits_level(self, structured: bool) -> None:
        parent = create_logger(level="debug", structured=structured)

        assert parent.child(service="test").level == "debug"

    def test_child_level_independent_of_parent(self, structured: bool) -> None:
        parent = create_logger(level="debug", structured=structured)
        child = parent.child(service="test")

        child.level = "error"

        assert parent.level == "debug"

    def test_child_bindings_in_output(self, structured: bool, log_stream) -> None:
        parent = create_logger(level="info", structured=structured, stream=log_stream)
        child = parent.child(service="echo").child(request_id="abc-123")

        child.info("Calling service")

        line = _lines(log_stream)[0]
        assert "echo" in line
        assert "abc-123" in line


class TestStructuredOutput:
    """Test JSON rendering of the structured backend."""

    def test_json_line(self, log_stream) -> None:
        log = create_logger(level="info", name="submission", stream=log_stream)

        log.warn("Slow response", elapsed_ms=5400)

        record = json.loads(_lines(log_stream)[0])
        assert record["message"] == "Slow response"
        assert record["level"] == "WARN"
        assert record["name"] == "submission"
        assert record["elapsed_ms"] == 5400
        assert "time" in record

    def test_password_field_redacted(self, log_stream) -> None:
        log = create_logger(level="info", stream=log_stream)

        log.info("Authenticating", username="user", password="secret")

        record = json.loads(_lines(log_stream)[0])
        assert record["password"] == "[REDACTED]"
        assert record["username"] == "user"

    def test_redaction_disabled(self, log_stream) -> None:
        log = create_logger(level="info", redact_credentials=False, stream=log_stream)

        log.info("Authenticating", password="secret")

        assert json.loads(_lines(log_stream)[0])["password"] == "secret"


class TestConsoleOutput:
    """Test plain text rendering of the console backend."""

    def test_line_format(self, log_stream) -> None:
        log = create_logger(level="info", structured=False, name="echo", stream=log_stream)

        log.error("Connection failed", status=503)

        line = _lines(log_stream)[0]
        assert "ERROR (echo): Connection failed status=503" in line

    def test_trace_and_fatal_level_names(self, log_stream) -> None:
        log = create_logger(level="trace", structured=False, stream=log_stream)

        log.trace("t")
        log.fatal("f")

        lines = _lines(log_stream)
        assert "TRACE" in lines[0]
        assert "CRITICAL" in lines[1]

    def test_does_not_touch_root_logger(self, log_stream) -> None:
        root_handlers = list(logging.getLogger().handlers)

        create_logger(level="info", structured=False, stream=log_stream).info("isolated")

        assert logging.getLogger().handlers == root_handlers

    def test_password_redacted(self, log_stream) -> None:
        log = create_logger(level="info", structured=False, stream=log_stream)

        log.info("Config loaded", password="secret")

        line = _lines(log_stream)[0]
        assert "secret" not in line
        assert "password=[REDACTED]" in line


class TestCredentialRedactingFormatter:
    """Test credential redaction."""

    def _format(self, message: str, redact: bool = True) -> str:
        formatter = CredentialRedactingFormatter(fmt="%(message)s", redact_credentials=redact)
        record = logging.LogRecord("test", logging.INFO, __file__, 1, message, None, None)
        return formatter.format(record)

    def test_wsse_password_redacted(self) -> None:
        xml = '<wsse:Password Type="#PasswordDigest">c2VjcmV0</wsse:Password>'

        assert self._format(xml) == '<wsse:Password Type="#PasswordDigest">[REDACTED]</wsse:Password>'

    def test_wsse_nonce_redacted(self) -> None:
        xml = '<wsse:Nonce EncodingType="#Base64Binary">bm9uY2U=</wsse:Nonce>'

        assert "bm9uY2U=" not in self._format(xml)

    def test_key_value_password_redacted(self) -> None:
        assert self._format("password=hunter2 user=bob") == "password=[REDACTED] user=bob"

    def test_redaction_disabled(self) -> None:
        assert self._format("password=hunter2", redact=False) == "password=hunter2"


class TestConfigureLogging:
    """Test standard logging configuration for library modules."""

    def test_sets_package_level(self) -> None:
        configure_logging(level="debug")

        assert logging.getLogger("eudr_api_client").level == logging.DEBUG

    def test_idempotent(self) -> None:
        configure_logging(level="info")
        configure_logging(level="error")

        package_logger = logging.getLogger("eudr_api_client")
        assert len(package_logger.handlers) == 1
        assert package_logger.level == logging.ERROR

    def test_invalid_level_raises(self) -> None:
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="verbose")
