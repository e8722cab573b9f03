"""EUDR API Client.

Endpoint resolution, configuration, logging and SOAP fault handling for the
EU Deforestation Regulation (EUDR) TRACES web services.
"""

__version__ = "1.0.0"

from eudr_api_client.config import (
    ClientConfig,
    generate_endpoint,
    get_soap_action,
    load_config,
    validate_and_generate_endpoint,
)
from eudr_api_client.logging_audit.logger import (
    create_child_logger,
    create_logger,
    logger,
)
from eudr_api_client.soap import handle_error, parse_soap_fault
from eudr_api_client.utils.exceptions import (
    ConfigurationError,
    EudrApiError,
    EudrClientError,
)
from eudr_api_client.validation import validate_units_of_measure

__all__ = [
    "__version__",
    "ClientConfig",
    "ConfigurationError",
    "EudrApiError",
    "EudrClientError",
    "create_child_logger",
    "create_logger",
    "generate_endpoint",
    "get_soap_action",
    "handle_error",
    "load_config",
    "logger",
    "parse_soap_fault",
    "validate_and_generate_endpoint",
    "validate_units_of_measure",
]
