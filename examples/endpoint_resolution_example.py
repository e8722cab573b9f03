"""Endpoint resolution examples for the EUDR web services.

This module demonstrates how to resolve service endpoints from a client
configuration, both for the standard TRACES environments and for custom
client ids that need an explicit endpoint.
"""

from eudr_api_client import ConfigurationError, create_logger, validate_and_generate_endpoint
from eudr_api_client.config import (
    get_soap_action,
    get_supported_services,
    get_supported_versions,
    load_config,
    resolve_client_config,
)

logger = create_logger(level="info", name="endpoint-example", structured=False)


def example_1_standard_environments():
    """Example 1: Generate endpoints for production and acceptance."""
    print("=" * 80)
    print("EXAMPLE 1: Standard Environments")
    print("=" * 80)
    print()

    for client_id in ("eudr", "eudr-test"):
        config = {"webServiceClientId": client_id, "username": "operator", "password": "secret"}
        resolved = validate_and_generate_endpoint(config, "submission", "v2")
        print(f"{client_id:<10} {resolved.endpoint}")
    print()


def example_2_custom_client_id():
    """Example 2: Custom client ids must provide the endpoint themselves."""
    print("=" * 80)
    print("EXAMPLE 2: Custom Client Id")
    print("=" * 80)
    print()

    config = {"webServiceClientId": "my-company", "username": "operator", "password": "secret"}

    try:
        validate_and_generate_endpoint(config, "echo", "v1")
    except ConfigurationError as e:
        logger.warn("Endpoint generation refused", client_id="my-company")
        print(f"Refused: {e}")

    config["endpoint"] = "https://gateway.my-company.example/eudr/echo"
    resolved = validate_and_generate_endpoint(config, "echo", "v1")
    print(f"Explicit endpoint used: {resolved.endpoint}")
    print()


def example_3_from_configuration_file():
    """Example 3: Resolve every service from config/eudr.json and EUDR_* variables."""
    print("=" * 80)
    print("EXAMPLE 3: Configuration File")
    print("=" * 80)
    print()

    config = load_config()
    for service in get_supported_services():
        for version in get_supported_versions(service):
            client = resolve_client_config(config, service, version)
            print(f"{service:<11} {version}  {client.endpoint}")
            print(f"{'':<15}{get_soap_action(service, version)}")
    print()


if __name__ == "__main__":
    example_1_standard_environments()
    example_2_custom_client_id()
    example_3_from_configuration_file()
