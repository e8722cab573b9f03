"""Configuration schema models using pydantic.

This module defines the client configuration structure and validation rules.
Field aliases keep the camelCase keys used by EUDR configuration files
(``webServiceClientId``, ``timestampValidity``) working alongside the Python
field names.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from eudr_api_client.logging_audit.logger import LOG_LEVELS, normalize_level


class ClientConfig(BaseModel):
    """Connection settings for one EUDR web service client.

    Only ``endpoint`` and ``web_service_client_id`` are examined by endpoint
    resolution; the remaining fields belong to the SOAP transport layer.
    Unknown keys are kept so callers can carry their own settings along.

    Attributes:
        endpoint: Explicit service endpoint URL (overrides generation)
        web_service_client_id: Client id, "eudr", "eudr-test" or custom
        username: Authentication username
        password: Authentication password (hidden from repr)
        timestamp_validity: WS-Security timestamp validity in seconds
        timeout: Request timeout in milliseconds
        ssl: Whether TLS certificates are verified
    """

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    endpoint: Optional[str] = None
    web_service_client_id: Optional[str] = Field(
        default=None,
        alias="webServiceClientId",
        description="EUDR webServiceClientId",
    )
    username: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    timestamp_validity: int = Field(
        default=60,
        ge=1,
        alias="timestampValidity",
        description="Timestamp validity in seconds",
    )
    timeout: int = Field(
        default=10000,
        ge=1,
        description="Request timeout in milliseconds",
    )
    ssl: bool = False


class LoggingConfig(BaseModel):
    """Configuration for the logging facade.

    Attributes:
        level: Log level (trace, debug, info, warn, error, fatal)
        structured: Use the structured (JSON) backend when available
        redact_credentials: Mask passwords and nonces in console output
    """

    level: str = Field(
        default="warn",
        description="Log level: trace, debug, info, warn, error, fatal",
    )
    structured: bool = True
    redact_credentials: bool = True

    @field_validator("level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level.

        Args:
            v: Log level string

        Returns:
            Validated log level (lowercase)

        Raises:
            ValueError: If log level is not valid
        """
        level = normalize_level(v)
        if level is None:
            raise ValueError(
                f"Invalid log level: {v}. Must be one of: {', '.join(LOG_LEVELS)}"
            )
        return level


class Config(BaseModel):
    """Root configuration model.

    Example:
        >>> config = Config(client={"webServiceClientId": "eudr-test"})
        >>> config.logging.level
        'warn'
    """

    client: ClientConfig = Field(default_factory=ClientConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
