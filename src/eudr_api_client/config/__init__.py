"""Config module.

This module provides client configuration and endpoint resolution.
"""

from eudr_api_client.config.endpoints import (
    BASE_URLS,
    SERVICE_PATHS,
    SOAP_ACTIONS,
    STANDARD_CLIENT_IDS,
    generate_endpoint,
    get_base_url,
    get_service_path,
    get_soap_action,
    get_supported_client_ids,
    get_supported_services,
    get_supported_versions,
    is_standard_client_id,
    validate_and_generate_endpoint,
)
from eudr_api_client.config.manager import (
    get_client_config,
    get_logging_config,
    load_config,
    resolve_client_config,
)
from eudr_api_client.config.schema import ClientConfig, Config, LoggingConfig

__all__ = [
    # Configuration loading
    "load_config",
    "get_client_config",
    "get_logging_config",
    "resolve_client_config",
    # Endpoint resolution
    "is_standard_client_id",
    "get_base_url",
    "get_service_path",
    "get_soap_action",
    "generate_endpoint",
    "validate_and_generate_endpoint",
    "get_supported_client_ids",
    "get_supported_services",
    "get_supported_versions",
    "STANDARD_CLIENT_IDS",
    "BASE_URLS",
    "SERVICE_PATHS",
    "SOAP_ACTIONS",
    # Configuration models
    "Config",
    "ClientConfig",
    "LoggingConfig",
]
