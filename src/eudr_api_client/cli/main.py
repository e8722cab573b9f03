"""Main CLI entry point for the EUDR API Client.

This module provides the Click command group for the eudr-client CLI.
"""

import json
from pathlib import Path
from typing import Optional

import click

from eudr_api_client import __version__
from eudr_api_client.config import (
    BASE_URLS,
    SERVICE_PATHS,
    get_soap_action,
    get_supported_client_ids,
    get_supported_services,
    get_supported_versions,
    load_config,
    validate_and_generate_endpoint,
)
from eudr_api_client.logging_audit import configure_logging
from eudr_api_client.soap import parse_soap_fault
from eudr_api_client.utils.exceptions import ConfigurationError, EudrApiError
from eudr_api_client.validation import validate_units_of_measure


def _fail(message: str) -> None:
    click.echo(click.style("✗", fg="red", bold=True) + f" {message}", err=True)
    raise click.exceptions.Exit(1)


@click.group()
@click.version_option(version=__version__, prog_name="eudr-client")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    default=None,
    help="Path to configuration file (default: ./config/eudr.json)",
)
@click.option("--verbose", is_flag=True, help="Enable verbose logging (debug level)")
@click.pass_context
def cli(ctx: click.Context, config: Optional[Path], verbose: bool) -> None:
    """EUDR API Client - endpoint and fault tooling for the EUDR web services.

    Common usage:

        # Show the acceptance endpoint of the V2 submission service
        eudr-client endpoint submission v2 --client-id eudr-test

        # List services and their versions
        eudr-client services

        # Explain a SOAP fault saved from a failed call
        eudr-client parse-fault fault.xml
    """
    ctx.ensure_object(dict)

    try:
        config_obj = load_config(config)
    except ConfigurationError as e:
        click.echo(f"Error loading configuration: {e}", err=True)
        ctx.exit(1)

    ctx.obj["config"] = config_obj
    ctx.obj["verbose"] = verbose

    # CLI flags > config file > defaults
    log_level = "debug" if verbose else config_obj.logging.level
    configure_logging(
        level=log_level,
        redact_credentials=config_obj.logging.redact_credentials,
    )


@cli.command(name="endpoint")
@click.argument("service")
@click.argument("version")
@click.option("--client-id", default=None, help="webServiceClientId (eudr, eudr-test)")
@click.option("--endpoint", "endpoint_url", default=None, help="Explicit endpoint URL")
@click.pass_context
def endpoint_command(
    ctx: click.Context,
    service: str,
    version: str,
    client_id: Optional[str],
    endpoint_url: Optional[str],
) -> None:
    """Resolve the endpoint URL and SOAP action of a service.

    Example:
        eudr-client endpoint echo v1 --client-id eudr
    """
    client = ctx.obj["config"].client
    if client_id:
        client = client.model_copy(
            update={"web_service_client_id": client_id, "endpoint": endpoint_url}
        )
    elif endpoint_url:
        client = client.model_copy(update={"endpoint": endpoint_url})

    try:
        resolved = validate_and_generate_endpoint(client, service, version)
        soap_action = get_soap_action(service, version)
    except ConfigurationError as e:
        _fail(str(e))

    click.echo(f"Endpoint:    {resolved.endpoint}")
    click.echo(f"SOAP action: {soap_action}")


@cli.command()
def services() -> None:
    """List supported services, versions and paths."""
    for service in get_supported_services():
        click.echo(f"{service}:")
        for version in get_supported_versions(service):
            click.echo(f"  {version}  {SERVICE_PATHS[service][version]}")


@cli.command(name="client-ids")
def client_ids() -> None:
    """List webServiceClientIds with automatic endpoint generation."""
    for client_id in get_supported_client_ids():
        click.echo(f"{client_id:<10} {BASE_URLS[client_id]}")


@cli.command(name="parse-fault")
@click.argument("fault_file", type=click.Path(exists=True, path_type=Path))
def parse_fault(fault_file: Path) -> None:
    """Parse a SOAP fault response and print it as JSON.

    Example:
        eudr-client parse-fault responses/submit-fault.xml
    """
    fault = parse_soap_fault(fault_file.read_text(encoding="utf-8"))
    if fault is None:
        _fail(f"No SOAP fault found in {fault_file}")

    click.echo(json.dumps(fault.to_dict(), indent=2))


@cli.command(name="validate-units")
@click.argument("statement_file", type=click.Path(exists=True, path_type=Path))
def validate_units(statement_file: Path) -> None:
    """Check the units of measure of a DDS statement (JSON).

    Example:
        eudr-client validate-units statements/import-pulp.json
    """
    try:
        statement = json.loads(statement_file.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        _fail(f"Invalid JSON in {statement_file}: {e}")

    if not isinstance(statement, dict):
        _fail(f"Statement in {statement_file} must be a JSON object")

    try:
        validate_units_of_measure(statement)
    except EudrApiError as e:
        _fail(f"{e.eudr_error_code}: {e.message}")

    click.echo(click.style("✓", fg="green", bold=True) + " Units of measure valid")


@cli.command()
def version() -> None:
    """Display version information."""
    click.echo(f"eudr-client version {__version__}")


if __name__ == "__main__":
    cli()
