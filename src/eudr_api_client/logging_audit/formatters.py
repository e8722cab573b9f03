"""Custom log formatters for the EUDR API Client.

This module provides specialized formatters for logging, including credential
redaction for WS-Security material that may end up in debug output.
"""

import logging
import re
from typing import List, Optional, Tuple


class CredentialRedactingFormatter(logging.Formatter):
    """Formatter that masks credentials in log messages.

    Debug logging of SOAP traffic can carry WS-Security passwords, password
    digests and nonces. This formatter applies regex-based replacement to
    remove them before records are written.

    Attributes:
        redact_credentials: Whether to enable redaction
        patterns: List of (regex_pattern, replacement_text) tuples

    Example:
        >>> formatter = CredentialRedactingFormatter(
        ...     fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        ...     redact_credentials=True
        ... )
        >>> handler = logging.StreamHandler()
        >>> handler.setFormatter(formatter)
    """

    def __init__(
        self,
        fmt: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt: Optional[str] = None,
        redact_credentials: bool = True,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt)
        self.redact_credentials = redact_credentials

        self.patterns: List[Tuple[re.Pattern[str], str]] = [
            # <wsse:Password Type="...#PasswordDigest">abc=</wsse:Password>
            (
                re.compile(r"(<(?:\w+:)?Password\b[^>]*>)[^<]*(</(?:\w+:)?Password>)"),
                r"\1[REDACTED]\2",
            ),
            # <wsse:Nonce EncodingType="...">abc=</wsse:Nonce>
            (
                re.compile(r"(<(?:\w+:)?Nonce\b[^>]*>)[^<]*(</(?:\w+:)?Nonce>)"),
                r"\1[REDACTED]\2",
            ),
            # password=secret, password: 'secret'
            (
                re.compile(r"(password[\"']?\s*[=:]\s*)[\"']?[^\s,\"'}]+[\"']?", re.IGNORECASE),
                r"\1[REDACTED]",
            ),
        ]

    def format(self, record: logging.LogRecord) -> str:
        """Format the log record with optional credential redaction.

        Args:
            record: Log record to format

        Returns:
            Formatted log message with credentials masked if enabled
        """
        formatted = super().format(record)

        if self.redact_credentials:
            for pattern, replacement in self.patterns:
                formatted = pattern.sub(replacement, formatted)

        return formatted
