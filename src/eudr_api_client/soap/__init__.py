"""SOAP module.

This module provides SOAP fault parsing and EUDR error handling.
"""

from .faults import (
    EUDR_ERROR_CODES,
    ERROR_CODE_MAPPINGS,
    FaultErrorDetail,
    SoapFault,
    data_type_error_message,
    debug_xml_response,
    handle_error,
    map_error_code,
    parse_soap_fault,
)

__all__ = [
    "EUDR_ERROR_CODES",
    "ERROR_CODE_MAPPINGS",
    "FaultErrorDetail",
    "SoapFault",
    "data_type_error_message",
    "debug_xml_response",
    "handle_error",
    "map_error_code",
    "parse_soap_fault",
]
