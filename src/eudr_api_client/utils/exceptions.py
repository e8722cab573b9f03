"""Custom exception classes for the EUDR API Client.

All exceptions inherit from EudrClientError to allow catching all custom exceptions.
"""

from typing import Any, Optional


class EudrClientError(Exception):
    """Base exception for all EUDR API Client custom exceptions."""

    pass


class ConfigurationError(EudrClientError):
    """Raised when client configuration is invalid.

    Always caused by caller input and never retryable; the caller must fix
    the configuration and call again.

    Examples:
        - Unknown service name or unsupported API version
        - webServiceClientId without automatic endpoint support
        - Malformed configuration file
    """

    pass


class SoapFaultParseError(EudrClientError):
    """Raised when a response cannot be read as a SOAP document at all."""

    pass


class EudrApiError(EudrClientError):
    """Raised when a call to the EUDR web service failed.

    Produced by ``eudr_api_client.soap.faults.handle_error`` from the
    underlying ``requests`` exception.

    Attributes:
        http_status: HTTP status to report to callers (500 when unknown)
        details: Raw response status, text and parsed SOAP fault
        eudr_specific: Whether the fault carried EUDR business errors
        well_known_error: Whether the business errors are documented codes
        eudr_errors: List of dicts with ``code``, ``message`` and ``field``
        eudr_error_code: Code of the first business error, if any
        eudr_error_message: Message of the first business error, if any
    """

    def __init__(
        self,
        message: str,
        http_status: int = 500,
        details: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.http_status = http_status
        self.details: dict[str, Any] = details if details is not None else {
            "status": None,
            "status_text": None,
            "raw_data": None,
            "soap_fault": None,
        }
        self.eudr_specific = False
        self.well_known_error = False
        self.eudr_errors: list[dict[str, Any]] = []
        self.eudr_error_code: Optional[str] = None
        self.eudr_error_message: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Convert error to a JSON-serialisable dictionary."""
        return {
            "error": True,
            "message": self.message,
            "http_status": self.http_status,
            "eudr_specific": self.eudr_specific,
            "well_known_error": self.well_known_error,
            "eudr_errors": self.eudr_errors,
            "eudr_error_code": self.eudr_error_code,
            "eudr_error_message": self.eudr_error_message,
        }
