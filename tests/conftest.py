"""
Shared pytest configuration and fixtures.

This module provides fixtures and configuration used across all test suites
(unit and integration tests).
"""

import io
from pathlib import Path

import pytest

EUDR_ENV_VARS = (
    "EUDR_ENDPOINT",
    "EUDR_WEB_SERVICE_CLIENT_ID",
    "EUDR_USERNAME",
    "EUDR_PASSWORD",
    "EUDR_TIMEOUT",
    "EUDR_SSL",
    "EUDR_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_eudr_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove EUDR_* variables so the host environment cannot leak into tests."""
    for name in EUDR_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fixtures_dir() -> Path:
    """
    Return the test fixtures directory path.

    Returns:
        Path: Absolute path to the test fixtures directory.
    """
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def log_stream() -> io.StringIO:
    """Return an in-memory stream to capture logger output."""
    return io.StringIO()


@pytest.fixture
def client_credentials() -> dict:
    """
    Return client configuration without endpoint or client id.

    Returns:
        dict: Credentials only.
    """
    return {"username": "user", "password": "pass"}
