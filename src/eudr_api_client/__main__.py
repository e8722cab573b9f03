"""Entry point for running eudr_api_client as a module.

This allows the package to be executed as:
    python -m eudr_api_client
"""

from eudr_api_client.cli.main import cli

if __name__ == "__main__":
    cli()
