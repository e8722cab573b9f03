"""Configuration manager for loading and managing configuration.

This module provides the main configuration loading functionality, including
support for JSON configuration files, environment variable overrides, and
configuration validation.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv
from pydantic import ValidationError

from eudr_api_client.config.defaults import DEFAULT_CONFIG, DEFAULT_CONFIG_PATH
from eudr_api_client.config.endpoints import validate_and_generate_endpoint
from eudr_api_client.config.schema import ClientConfig, Config, LoggingConfig
from eudr_api_client.logging_audit.logger import LOG_LEVELS, normalize_level
from eudr_api_client.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Environment variable prefix for all configuration overrides
ENV_PREFIX = "EUDR_"


def load_config(config_path: Optional[Path] = None) -> Config:
    """Load configuration from file and environment variables.

    Configuration is loaded with the following precedence (highest to lowest):
    1. CLI arguments (handled by caller)
    2. Environment variables (EUDR_* prefix)
    3. Configuration file (JSON)
    4. Default values

    Args:
        config_path: Path to configuration file. If None, uses ./config/eudr.json

    Returns:
        Validated Config instance

    Raises:
        ConfigurationError: If configuration is invalid or malformed

    Example:
        >>> config = load_config(Path("custom/eudr.json"))
        >>> client_id = config.client.web_service_client_id
    """
    # Load .env file if present in project root
    load_dotenv()

    if config_path is None:
        config_path = Path(DEFAULT_CONFIG_PATH)

    config_dict = _load_config_file(config_path)
    config_dict = _apply_env_overrides(config_dict)
    _check_sensitive_values(config_dict)

    try:
        return Config(**config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed:\n{e}\n\n"
            f"Fix: Check your configuration file at {config_path} and ensure all "
            f"values match the expected format."
        ) from e


def _load_config_file(config_path: Path) -> dict[str, Any]:
    """Load configuration file or return defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        ConfigurationError: If JSON is malformed, the file is unreadable, or
            the file or one of its sections is not a JSON object
    """
    if config_path.exists():
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                config_dict = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check JSON syntax at line {e.lineno}, column {e.colno}"
            ) from e
        except OSError as e:
            raise ConfigurationError(
                f"Failed to read config file: {config_path}\n"
                f"Error: {e}\n"
                f"Fix: Check file permissions and path"
            ) from e

        _check_structure(config_dict, config_path)
        logger.info(f"Loaded configuration from {config_path}")
        return config_dict

    logger.info(f"Config file not found: {config_path}. Using default configuration.")
    # Deep copy so callers cannot mutate the defaults
    return json.loads(json.dumps(DEFAULT_CONFIG))


def _check_structure(config_dict: Any, config_path: Path) -> None:
    """Ensure the file and its sections are JSON objects.

    A ``null`` section is replaced by an empty one in place.
    """
    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Invalid config file: {config_path}\n"
            f"Error: top-level value is {type(config_dict).__name__}, expected an object\n"
            f'Fix: Use {{"client": {{...}}, "logging": {{...}}}}'
        )

    for section in ("client", "logging"):
        if config_dict.get(section) is None:
            config_dict[section] = {}
        elif not isinstance(config_dict[section], dict):
            raise ConfigurationError(
                f"Invalid config file: {config_path}\n"
                f'Error: "{section}" is {type(config_dict[section]).__name__}, expected an object\n'
                f'Fix: Use "{section}": {{...}}'
            )


def _apply_env_overrides(config_dict: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides with EUDR_ prefix.

    For example: EUDR_WEB_SERVICE_CLIENT_ID, EUDR_LOG_LEVEL

    Args:
        config_dict: Configuration dictionary to update

    Returns:
        Updated configuration dictionary with environment overrides applied

    Raises:
        ConfigurationError: If EUDR_TIMEOUT is not an integer
    """
    client = config_dict.setdefault("client", {})

    if endpoint := os.getenv(f"{ENV_PREFIX}ENDPOINT"):
        client["endpoint"] = endpoint
        logger.debug("Override: endpoint from environment")

    if client_id := os.getenv(f"{ENV_PREFIX}WEB_SERVICE_CLIENT_ID"):
        client.pop("web_service_client_id", None)
        client["webServiceClientId"] = client_id
        logger.debug("Override: webServiceClientId from environment")

    if username := os.getenv(f"{ENV_PREFIX}USERNAME"):
        client["username"] = username
        logger.debug("Override: username from environment")

    if password := os.getenv(f"{ENV_PREFIX}PASSWORD"):
        client["password"] = password
        logger.debug("Override: password from environment")

    if timeout := os.getenv(f"{ENV_PREFIX}TIMEOUT"):
        try:
            client["timeout"] = int(timeout)
        except ValueError as e:
            raise ConfigurationError(
                f"Invalid {ENV_PREFIX}TIMEOUT: {timeout}. "
                f"Fix: Use a whole number of milliseconds"
            ) from e
        logger.debug("Override: timeout from environment")

    if ssl := os.getenv(f"{ENV_PREFIX}SSL"):
        client["ssl"] = _parse_bool(ssl)
        logger.debug("Override: ssl from environment")

    if log_level := os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
        # Same reading as the logging facade: unknown names are ignored
        level = normalize_level(log_level)
        if level is None:
            logger.warning(
                f"Ignoring invalid {ENV_PREFIX}LOG_LEVEL: {log_level}. "
                f"Must be one of: {', '.join(LOG_LEVELS)}"
            )
        else:
            config_dict.setdefault("logging", {})["level"] = level
            logger.debug("Override: log_level from environment")

    return config_dict


def _parse_bool(value: str) -> bool:
    """Parse boolean value from string (case-insensitive)."""
    return value.lower() in ("true", "1", "yes", "on")


def _check_sensitive_values(config_dict: dict[str, Any]) -> None:
    """Warn when the password is stored in the configuration file.

    Args:
        config_dict: Configuration dictionary to check
    """
    if config_dict.get("client", {}).get("password") and not os.getenv(
        f"{ENV_PREFIX}PASSWORD"
    ):
        logger.warning(
            "WARNING: Password found in configuration file! "
            "Passwords should be stored in environment variables, not config files. "
            f"Use {ENV_PREFIX}PASSWORD environment variable instead."
        )


def get_client_config(config: Config) -> ClientConfig:
    """Get client configuration."""
    return config.client


def get_logging_config(config: Config) -> LoggingConfig:
    """Get logging configuration."""
    return config.logging


def resolve_client_config(config: Config, service: str, version: str) -> ClientConfig:
    """Resolve the client configuration for one service call.

    Args:
        config: Configuration instance
        service: Service name (echo, retrieval, submission)
        version: API version (v1, v2)

    Returns:
        ClientConfig with ``endpoint`` populated

    Raises:
        ConfigurationError: If no endpoint can be determined

    Example:
        >>> config = load_config()
        >>> client = resolve_client_config(config, "echo", "v1")
        >>> client.endpoint
        'https://acceptance.eudr.webcloud.ec.europa.eu/tracesnt/ws/EudrEchoService'
    """
    return validate_and_generate_endpoint(config.client, service, version)
