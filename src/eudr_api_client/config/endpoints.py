"""Endpoint resolution for the EUDR TRACES web services.

Maps a webServiceClientId and a service/version pair to the SOAP endpoint
URL (and SOAP action) to invoke. Explicit endpoints always take precedence
over generated ones, so custom client ids remain usable.

All lookup tables are read-only and built once at import time.
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Union

from pydantic import ValidationError

from eudr_api_client.config.schema import ClientConfig
from eudr_api_client.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# Fixed infix between the base URL and the service path
WS_PATH_PREFIX = "/tracesnt/ws"

# webServiceClientId values that support automatic endpoint generation
STANDARD_CLIENT_IDS: tuple[str, ...] = ("eudr", "eudr-test")

BASE_URLS: Mapping[str, str] = MappingProxyType({
    "eudr": "https://eudr.webcloud.ec.europa.eu",
    "eudr-test": "https://acceptance.eudr.webcloud.ec.europa.eu",
})

# Echo and retrieval resolve to the same path for v1 and v2
SERVICE_PATHS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "echo": MappingProxyType({
        "v1": "/EudrEchoService",
        "v2": "/EudrEchoService",
    }),
    "retrieval": MappingProxyType({
        "v1": "/EUDRRetrievalServiceV1",
        "v2": "/EUDRRetrievalServiceV1",
    }),
    "submission": MappingProxyType({
        "v1": "/EUDRSubmissionServiceV1",
        "v2": "/EUDRSubmissionServiceV2",
    }),
})

SOAP_ACTIONS: Mapping[str, Mapping[str, str]] = MappingProxyType({
    "echo": MappingProxyType({
        "v1": "http://ec.europa.eu/tracesnt/eudr/echo",
        "v2": "http://ec.europa.eu/tracesnt/eudr/echo",
    }),
    "retrieval": MappingProxyType({
        "v1": "http://ec.europa.eu/tracesnt/eudr/retrieval/v1",
        "v2": "http://ec.europa.eu/tracesnt/eudr/retrieval/v2",
    }),
    "submission": MappingProxyType({
        "v1": "http://ec.europa.eu/tracesnt/certificate/eudr/submission/v1",
        "v2": "http://ec.europa.eu/tracesnt/certificate/eudr/submission/v2",
    }),
})


def is_standard_client_id(web_service_client_id: str) -> bool:
    """Check if the webServiceClientId supports automatic endpoint generation.

    Args:
        web_service_client_id: The webServiceClientId to check

    Returns:
        True if the id is one of STANDARD_CLIENT_IDS
    """
    return web_service_client_id in STANDARD_CLIENT_IDS


def get_base_url(web_service_client_id: str) -> str:
    """Get the base URL (scheme and host) for a standard webServiceClientId.

    Args:
        web_service_client_id: The webServiceClientId

    Returns:
        Base URL of the environment

    Raises:
        ConfigurationError: If the id does not support automatic endpoint generation

    Example:
        >>> get_base_url("eudr-test")
        'https://acceptance.eudr.webcloud.ec.europa.eu'
    """
    if not is_standard_client_id(web_service_client_id):
        raise ConfigurationError(
            f"Automatic endpoint generation not supported for webServiceClientId: "
            f"{web_service_client_id}. Please provide endpoint manually."
        )
    return BASE_URLS[web_service_client_id]


def _lookup_versioned(
    table: Mapping[str, Mapping[str, str]], service: str, version: str
) -> str:
    # Service validity is checked before version validity
    versions = table.get(service)
    if versions is None:
        raise ConfigurationError(
            f"Unknown service: {service}. "
            f"Supported services: {', '.join(table.keys())}"
        )

    value = versions.get(version)
    if value is None:
        raise ConfigurationError(
            f"Version {version} not supported for service {service}. "
            f"Supported versions: {', '.join(versions.keys())}"
        )
    return value


def get_service_path(service: str, version: str) -> str:
    """Get the service path for the given service and version.

    Args:
        service: Service name (echo, retrieval, submission)
        version: API version (v1, v2)

    Returns:
        Path suffix of the service, e.g. "/EUDRSubmissionServiceV2"

    Raises:
        ConfigurationError: If the service is unknown or the version unsupported
    """
    return _lookup_versioned(SERVICE_PATHS, service, version)


def get_soap_action(service: str, version: str) -> str:
    """Get the SOAP action URI for the given service and version.

    Raises:
        ConfigurationError: If the service is unknown or the version unsupported
    """
    return _lookup_versioned(SOAP_ACTIONS, service, version)


def generate_endpoint(service: str, version: str, web_service_client_id: str) -> str:
    """Generate the complete endpoint URL.

    Args:
        service: Service name (echo, retrieval, submission)
        version: API version (v1, v2)
        web_service_client_id: Standard webServiceClientId

    Returns:
        Fully qualified endpoint URL

    Raises:
        ConfigurationError: If any parameter is invalid

    Example:
        >>> generate_endpoint("echo", "v1", "eudr")
        'https://eudr.webcloud.ec.europa.eu/tracesnt/ws/EudrEchoService'
    """
    base_url = get_base_url(web_service_client_id)
    service_path = get_service_path(service, version)
    return f"{base_url}{WS_PATH_PREFIX}{service_path}"


def validate_and_generate_endpoint(
    config: Union[ClientConfig, Mapping[str, Any]],
    service: str,
    version: str,
) -> ClientConfig:
    """Validate client configuration and generate the endpoint if needed.

    An explicit, non-empty ``endpoint`` is returned unchanged without being
    checked against the service or version. Otherwise the endpoint is
    generated from ``web_service_client_id``.

    Args:
        config: ClientConfig or a mapping accepted by ClientConfig
        service: Service name (echo, retrieval, submission)
        version: API version (v1, v2)

    Returns:
        Copy of the configuration with ``endpoint`` populated

    Raises:
        ConfigurationError: If the configuration cannot produce an endpoint,
            or a mapping holds values ClientConfig rejects

    Example:
        >>> cfg = validate_and_generate_endpoint(
        ...     {"username": "u", "password": "p", "webServiceClientId": "eudr-test"},
        ...     "submission",
        ...     "v2",
        ... )
        >>> cfg.endpoint
        'https://acceptance.eudr.webcloud.ec.europa.eu/tracesnt/ws/EUDRSubmissionServiceV2'
    """
    if not isinstance(config, ClientConfig):
        try:
            config = ClientConfig.model_validate(dict(config))
        except ValidationError as e:
            raise ConfigurationError(
                f"Invalid client configuration:\n{e}\n\n"
                f"Fix: Check the client settings passed for {service} {version}"
            ) from e

    if config.endpoint:
        logger.debug(f"Using explicit endpoint for {service} {version}")
        return config.model_copy()

    client_id = config.web_service_client_id
    if not client_id:
        raise ConfigurationError(
            "webServiceClientId is required when endpoint is not provided"
        )

    if not is_standard_client_id(client_id):
        raise ConfigurationError(
            f'webServiceClientId "{client_id}" does not support automatic endpoint '
            f"generation. Please provide endpoint manually or use one of: "
            f"{', '.join(STANDARD_CLIENT_IDS)}"
        )

    endpoint = generate_endpoint(service, version, client_id)
    logger.debug(f"Generated endpoint for {service} {version} ({client_id}): {endpoint}")
    return config.model_copy(update={"endpoint": endpoint})


def get_supported_client_ids() -> list[str]:
    """Get all webServiceClientId values supporting automatic endpoints."""
    return list(STANDARD_CLIENT_IDS)


def get_supported_services() -> list[str]:
    """Get all supported service names."""
    return list(SERVICE_PATHS.keys())


def get_supported_versions(service: str) -> list[str]:
    """Get the supported versions of a service.

    Returns an empty list for an unknown service.
    """
    versions = SERVICE_PATHS.get(service)
    return list(versions.keys()) if versions is not None else []
