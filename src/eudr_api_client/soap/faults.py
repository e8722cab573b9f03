"""SOAP fault parsing and error handling for the EUDR web services.

Turns SOAP faults returned by the TRACES EUDR services into structured
business errors, and converts failed ``requests`` calls into a single
``EudrApiError`` carrying an HTTP status suitable for API consumers.
"""

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional, Union

import requests
from lxml import etree

from eudr_api_client.logging_audit.logger import create_child_logger
from eudr_api_client.utils.exceptions import EudrApiError

log = create_child_logger(component="soap-faults")

# Documented EUDR business error codes and their standard messages
EUDR_ERROR_CODES: Mapping[str, str] = MappingProxyType({
    # Authentication and API schema errors
    "EUDR_WEBSERVICE_USER_NOT_EUDR_OPERATOR": "The user is not registered in the EUDR domain as operator.",
    "EUDR_WEBSERVICE_USER_FROM_MANY_OPERATOR": "The user belongs to more than one operator.",
    "EUDR_WEBSERVICE_USER_ACTIVITY_NOT_ALLOWED": "The user is requesting to use an EUDR role that is not valid for the operator profile.",
    # Operator
    "EUDR_OPERATOR_EORI_FOR_ACTIVITY_MISSING": "The operator must have an EU EORI if the activity is IMPORT or EXPORT",
    "EUDR_BEHALF_OPERATOR_NOT_PROVIDED": "For authorized representative role only: The on-behalf-of (represented) operator must be provided.",
    "EUDR_BEHALF_OPERATOR_CITY_POSTALCODE_EMPTY_OR_INVALID": "For authorized representative role only: The city and postal code of the on-behalf-of (represented) operator must be provided and valid.",
    "EUDR_ACTIVITY_TYPE_NOT_COMPATIBLE": "The selected activity is not allowed for the operator.",
    "EUDR_ACTIVITY_TYPE_NOT_ALLOWED_FOR_NON_EU_OPERATOR": "Non-EU operators must select Import activity.",
    # Commodities
    "EUDR_COMMODITIES_HS_CODE_INVALID": "The HS-Code of a commodity is invalid",
    "EUDR_COMMODITIES_DESCRIPTOR_NET_MASS_EMPTY": "Net Mass is mandatory for IMPORT or EXPORT activity.",
    "EUDR_COMMODITIES_DESCRIPTOR_QUANTITY_MISSING": "At least one unit of measure quantity must be provided.",
    "EUDR_COMMODITITY_PRODUCER_COUNTRY_CODE_INVALID": "The ISO 2 country code provided for the producer is invalid.",
    # Geolocation
    "EUDR_COMMODITIES_PRODUCERS_EMPTY": "No producers were provided.",
    "EUDR_COMMODITIES_PRODUCER_GEO_EMPTY": "No geolocation was provided and there is no referenced DDS.",
    "EUDR_COMMODITIES_PRODUCER_GEO_INVALID": "An invalid GEOjson file was provided for geolocation.",
    "EUDR_COMMODITIES_PRODUCER_GEO_LATITUDE_INVALID": "Latitude of points or vertices must be between -90 and +90.",
    "EUDR_COMMODITIES_PRODUCER_GEO_LONGITUDE_INVALID": "Longitude of points or vertices must be between -180 and +180.",
    "EUDR_COMMODITIES_PRODUCER_GEO_POLYGON_INVALID": "Each polygon must have at least 4 non-aligned points and cannot have intersections between sides.",
    "EUDR_COMMODITIES_PRODUCER_GEO_INVALID_GEOMETRY": "Each polygon must have at least 4 non-aligned points and cannot have intersections between sides.",
    "EUDR_COMMODITIES_PRODUCER_GEO_AREA_INVALID": "An area for a point must be a number and, for non-cattle commodities, it should be between 0,0001 and 4",
    "EUDR_MAXIMUM_GEO_SIZE_REACHED": "The maximum DDS file size has been exceeded",
    # Referenced DDS
    "EUDR_REFERENCED_STATEMENT_NOT_FOUND": "At least one referenced DDS is invalid (Referenced Number or Verification Number) or does not exist.",
    "EUDR_MAXIMUM_REFERENCED_DDS_REACHED": "The maximum number of referenced DDS is exceeded.",
    # Supplementary units
    "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_MISSING": "Supplementary units are provided but the supplementary unit qualifier is missing.",
    "EUDR_COMMODITIES_DESCRIPTOR_NUMBER_OF_UNITS_MISSING": "A supplementary unit qualifier is provided but the supplementary units are missing.",
    "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_NOT_ALLOWED": "Supplementary Unit not allowed for import and export where the supplementary unit is not applicable.",
    "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_QUALIFIER_INVALID": "Invalid Supplementary Unit type.",
    "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_QUALIFIER_NOT_COMPATIBLE": "Supplementary Unit type not applicable.",
    "EUDR_COMMODITIES_DESCRIPTOR_PERCENTAGE_ESTIMATION_MISSING": "Net Mass Percentage estimate or deviation is mandatory for Domestic or Trade activities.",
    "EUDR_COMMODITIES_DESCRIPTOR_PERCENTAGE_ESTIMATION_NOT_ALLOWED": "Percentage estimate or deviation not allowed for Import/Export.",
    "EUDR_COMMODITIES_DESCRIPTOR_PERCENTAGE_ESTIMATION_INVALID": "Percentage estimate or deviation lower than 0 or higher than 50.",
    # Species information
    "EUDR_COMMODITIES_SPECIES_INFORMATION_COMMON_NAME_EMPTY": "The common name is mandatory if the commodity contains Annex I wood (timber) products.",
    "EUDR_COMMODITIES_SPECIES_INFORMATION_SCIENTIFIC_NAME_EMPTY": "The scientific name is mandatory if the commodity contains Annex I wood (timber) products.",
    # Amend / withdraw
    "EUDR_API_AMEND_ACTIVITY_TYPE_CHANGE_NOT_ALLOWED": "The existing DDS activity cannot be modified.",
    "EUDR_API_AMEND_OR_WITHDRAW_DDS_NOT_POSSIBLE": "The user cannot amend a DDS if it is referenced in another DDS or if the amend cutoff date has expired.",
    "EUDR_API_AMEND_NOT_ALLOWED_FOR_STATUS": "The user can only amend when the DDS is in status Available.",
    "EUDR_API_AMEND_OR_WITHDRAW_NOT_ALLOWED_FOR_STATUS": "The user can only retract a DDS in status SUBMITTED or AVAILABLE.",
    "EUDR_API_NO_DDS": "No DDS corresponding to the provided UUID.",
    # Data validation
    "EUDR_DATA_TYPE_VALIDATION_ERROR": "Data type validation error - the provided value does not match the expected format.",
})

# Codes reported by the service that share a documented code
ERROR_CODE_MAPPINGS: Mapping[str, str] = MappingProxyType({
    "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_QUALIFIER_MISSING": "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_MISSING",
})

DATA_TYPE_ERROR_CODE = "EUDR_DATA_TYPE_VALIDATION_ERROR"
XML_VALIDATION_ERROR_CODE = "XML_VALIDATION_ERROR"

AUTHORIZATION_ERROR_CODES = frozenset({
    "EUDR_WEBSERVICE_USER_ACTIVITY_NOT_ALLOWED",
    "EUDR_WEBSERVICE_USER_NOT_EUDR_OPERATOR",
    "EUDR_WEBSERVICE_USER_FROM_MANY_OPERATOR",
})
AUTHORIZATION_MARKERS = ("not authorized", "not allowed", "permission", "role")

_DATA_TYPE_PATTERN = re.compile(
    r"cvc-datatype-valid\.1\.2\.1:\s*'([^']+)'\s*is not a valid value for\s*'([^']+)'"
)
_SAX_PATTERN = re.compile(
    r"(?:SAXParseException[^;]*;\s*org\.xml\.sax\.SAXException:\s*"
    r"(?:org\.xml\.sax\.SAXParseException;\s*)?|^)(cvc-.*?)(?:\n|$)"
)
_ELEMENT_PATTERN = re.compile(r"element '(?:[^:]+:)?(\w+)'")
_NAMESPACE_PATTERN = re.compile(r'\{"([^"]+)":(\w+)\}')


@dataclass
class FaultErrorDetail:
    """One error reported inside a SOAP fault.

    Attributes:
        error_code: EUDR error code with dashes normalised to underscores
        message: Message reported by the service
        field: Offending field path, when reported
        standard_message: Documented message for well-known codes
        type: "DataTypeValidation" or "SAXParseException" for schema errors
        invalid_value: Rejected value (data type errors only)
        expected_type: Expected XML schema type (data type errors only)
        user_friendly_message: Readable explanation (data type errors only)
        missing_element: Element named in a schema validation error
        namespace: Namespace named in a schema validation error
    """

    error_code: str
    message: Optional[str] = None
    field: Optional[str] = None
    standard_message: Optional[str] = None
    type: Optional[str] = None
    invalid_value: Optional[str] = None
    expected_type: Optional[str] = None
    user_friendly_message: Optional[str] = None
    missing_element: Optional[str] = None
    namespace: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {key: value for key, value in self.__dict__.items() if value is not None}


@dataclass
class SoapFault:
    """Parsed SOAP fault.

    Attributes:
        fault_code: SOAP fault code (e.g. "S:Client")
        fault_string: Human-readable fault message
        error_details: Errors reported in the fault detail, in document order
    """

    fault_code: Optional[str] = None
    fault_string: Optional[str] = None
    error_details: list[FaultErrorDetail] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "fault_code": self.fault_code,
            "fault_string": self.fault_string,
            "error_details": [detail.to_dict() for detail in self.error_details],
        }


def map_error_code(error_code: str) -> str:
    """Map a reported error code onto its documented equivalent."""
    return ERROR_CODE_MAPPINGS.get(error_code, error_code)


def _parse_xml(xml_response: str) -> Optional[etree._Element]:
    parser = etree.XMLParser(recover=True, resolve_entities=False, no_network=True)
    try:
        return etree.fromstring(xml_response.encode("utf-8"), parser=parser)
    except etree.XMLSyntaxError:
        return None


def _first_text(root: etree._Element, *local_names: str) -> Optional[str]:
    """Text of the first descendant matching the local-name path."""
    path = "/".join(f"*[local-name()='{name}']" for name in local_names)
    matches = root.xpath(f".//{path}")
    if matches and matches[0].text is not None:
        return matches[0].text.strip()
    return None


def _child_text(element: etree._Element, local_name: str) -> Optional[str]:
    for child in element:
        if isinstance(child.tag, str) and etree.QName(child).localname == local_name:
            return (child.text or "").strip()
    return None


def _parse_schema_validation_fault(fault_string: str) -> Optional[FaultErrorDetail]:
    """Parse XML schema (cvc-*) validation errors reported in the faultstring."""
    data_type_match = _DATA_TYPE_PATTERN.search(fault_string)
    if data_type_match:
        invalid_value, expected_type = data_type_match.groups()
        return FaultErrorDetail(
            error_code=DATA_TYPE_ERROR_CODE,
            message=f"Value '{invalid_value}' is not valid for type '{expected_type}'",
            type="DataTypeValidation",
            invalid_value=invalid_value,
            expected_type=expected_type,
            user_friendly_message=data_type_error_message(invalid_value, expected_type),
        )

    sax_match = _SAX_PATTERN.search(fault_string)
    if sax_match:
        error_message = sax_match.group(1).strip()
        detail = FaultErrorDetail(
            error_code=XML_VALIDATION_ERROR_CODE,
            message=error_message,
            type="SAXParseException",
        )
        element_match = _ELEMENT_PATTERN.search(error_message)
        namespace_match = _NAMESPACE_PATTERN.search(error_message)
        if element_match:
            detail.missing_element = element_match.group(1)
        if namespace_match:
            detail.namespace = namespace_match.group(1)
            if detail.missing_element is None:
                detail.missing_element = namespace_match.group(2)
        return detail

    return None


def _parse_business_errors(root: etree._Element) -> list[FaultErrorDetail]:
    details = []
    for error_elem in root.xpath(".//*[local-name()='Error']"):
        error_id = _child_text(error_elem, "ID")
        message = _child_text(error_elem, "Message")
        if error_id is None or message is None:
            continue

        detail = FaultErrorDetail(
            error_code=error_id.replace("-", "_"),
            message=message,
            field=_child_text(error_elem, "Field"),
        )
        standard_message = EUDR_ERROR_CODES.get(map_error_code(detail.error_code))
        if standard_message:
            detail.standard_message = standard_message
        details.append(detail)
    return details


def parse_soap_fault(xml_response: Union[str, bytes, None]) -> Optional[SoapFault]:
    """Parse a SOAP fault from an EUDR response body.

    Recognises, in order:

    1. XML schema validation faults (``cvc-*`` in the faultstring); data type
       errors become ``EUDR_DATA_TYPE_VALIDATION_ERROR``
    2. Business rule errors (``Error`` elements with ``ID`` and ``Message``)
    3. Any documented EUDR error code appearing in the raw text

    Malformed XML is tolerated; only the text scan applies to it.

    Args:
        xml_response: Response body

    Returns:
        SoapFault, or None if the response contains no fault information

    Example:
        >>> fault = parse_soap_fault(response.text)
        >>> if fault:
        ...     print([d.error_code for d in fault.error_details])
    """
    if not xml_response:
        return None
    if isinstance(xml_response, bytes):
        xml_response = xml_response.decode("utf-8", errors="replace")

    result = SoapFault()
    root = _parse_xml(xml_response)

    if root is not None:
        # SOAP 1.1 first, then SOAP 1.2
        result.fault_code = _first_text(root, "faultcode") or _first_text(root, "Code", "Value")
        result.fault_string = _first_text(root, "faultstring") or _first_text(root, "Reason", "Text")

        if result.fault_code and result.fault_string and (
            "SAXParseException" in result.fault_string or "cvc-" in result.fault_string
        ):
            schema_detail = _parse_schema_validation_fault(result.fault_string)
            if schema_detail is not None:
                result.error_details.append(schema_detail)
                return result

        business_errors = _parse_business_errors(root)
        if business_errors:
            result.error_details.extend(business_errors)
            return result

    for error_code, standard_message in EUDR_ERROR_CODES.items():
        if error_code in xml_response:
            result.error_details.append(
                FaultErrorDetail(error_code=error_code, standard_message=standard_message)
            )
            return result

    if result.fault_code or result.fault_string:
        return result

    return None


def data_type_error_message(invalid_value: str, expected_type: str) -> str:
    """Generate a readable message for an XML schema data type error.

    Args:
        invalid_value: The rejected value
        expected_type: The expected XML schema type

    Returns:
        User-friendly error message
    """
    kind = expected_type.lower()
    if kind == "integer":
        if "." in invalid_value:
            return (
                f"The value '{invalid_value}' contains decimal places but must be a "
                f"whole number (integer). Please remove decimal places or check if the "
                f"field should accept decimal values."
            )
        return f"The value '{invalid_value}' is not a valid integer. Please provide a whole number."
    if kind == "decimal":
        return f"The value '{invalid_value}' is not a valid decimal number. Please check the format."
    if kind == "boolean":
        return f"The value '{invalid_value}' is not a valid boolean. Please use 'true' or 'false'."
    if kind == "date":
        return (
            f"The value '{invalid_value}' is not a valid date format. "
            f"Please use ISO 8601 format (YYYY-MM-DD)."
        )
    if kind == "datetime":
        return (
            f"The value '{invalid_value}' is not a valid datetime format. "
            f"Please use ISO 8601 format (YYYY-MM-DDTHH:mm:ss)."
        )
    return (
        f"The value '{invalid_value}' is not valid for the expected type "
        f"'{expected_type}'. Please check the data format requirements."
    )


def _is_authorization_text(text: Optional[str]) -> bool:
    return bool(text) and any(marker in text for marker in AUTHORIZATION_MARKERS)


def _apply_soap_fault(api_error: EudrApiError, soap_fault: SoapFault) -> None:
    api_error.details["soap_fault"] = soap_fault

    if _is_authorization_text(soap_fault.fault_string):
        # Authenticated but not authorized
        api_error.http_status = 403
    elif soap_fault.fault_code == "S:Client" and soap_fault.fault_string:
        api_error.http_status = 400

    if not soap_fault.error_details:
        return

    all_known = True
    for detail in soap_fault.error_details:
        if detail.error_code in AUTHORIZATION_ERROR_CODES or _is_authorization_text(detail.message):
            api_error.http_status = 403

        if detail.error_code == DATA_TYPE_ERROR_CODE:
            api_error.http_status = 400
            api_error.eudr_errors.append({
                "code": detail.error_code,
                "message": detail.user_friendly_message or detail.message,
                "technical_message": detail.message,
                "invalid_value": detail.invalid_value,
                "expected_type": detail.expected_type,
                "field": detail.field,
            })
            continue

        mapped_code = map_error_code(detail.error_code)
        if mapped_code in EUDR_ERROR_CODES:
            api_error.eudr_errors.append({
                "code": mapped_code,
                "message": EUDR_ERROR_CODES[mapped_code],
                "field": detail.field,
            })
        else:
            all_known = False

    api_error.eudr_specific = True
    if not all_known:
        # Undocumented codes: report every error as the service sent it
        api_error.eudr_errors = [
            {"code": d.error_code, "message": d.message, "field": d.field}
            for d in soap_fault.error_details
        ]
    api_error.well_known_error = all_known

    first = api_error.eudr_errors[0]
    api_error.eudr_error_code = first["code"]
    api_error.eudr_error_message = first["message"]


def handle_error(error: BaseException) -> EudrApiError:
    """Convert a failed EUDR call into an EudrApiError.

    HTTP status mapping:

    - 401 responses stay 401, with a synthetic UnauthenticatedException fault
      when the body carried none
    - authorization faults and codes become 403
    - ``S:Client`` faults and data type validation errors become 400
    - everything else is 500

    Args:
        error: Exception raised while calling the service, usually a
            ``requests.RequestException``

    Returns:
        EudrApiError describing the failure

    Example:
        >>> try:
        ...     response = session.post(endpoint, data=envelope, timeout=10)
        ...     response.raise_for_status()
        ... except requests.RequestException as e:
        ...     raise handle_error(e) from e
    """
    message = str(error) or "Unknown error"
    log.trace("Handling EUDR error", error=message)

    api_error = EudrApiError(message)
    response = getattr(error, "response", None)
    request = getattr(error, "request", None)

    if response is not None:
        api_error.details["status"] = response.status_code
        api_error.details["status_text"] = response.reason
        api_error.details["raw_data"] = response.text

        soap_fault = parse_soap_fault(response.text)
        if soap_fault is not None:
            _apply_soap_fault(api_error, soap_fault)

        if response.status_code == 401:
            api_error.http_status = 401
            if api_error.details["soap_fault"] is None:
                api_error.details["soap_fault"] = SoapFault(
                    fault_code="env:Client",
                    fault_string="UnauthenticatedException",
                )
    elif request is not None:
        api_error.details["request"] = "Request sent but no response received"
    else:
        api_error.details["setup_error"] = message

    if isinstance(error, EudrApiError) and error.eudr_specific:
        api_error.eudr_specific = True
        api_error.eudr_error_code = error.eudr_error_code
        api_error.eudr_error_message = error.eudr_error_message

    if isinstance(error, requests.Timeout):
        log.warn("EUDR request timed out", error=message)
    elif api_error.eudr_specific:
        log.debug(
            "EUDR business error",
            http_status=api_error.http_status,
            code=api_error.eudr_error_code,
        )

    return api_error


def debug_xml_response(xml_response: Optional[str], limit: int = 500) -> None:
    """Trace-log the start of a raw XML response."""
    if not xml_response:
        log.trace("No XML response to debug")
        return

    suffix = "..." if len(xml_response) > limit else ""
    log.trace("XML response", xml=xml_response[:limit] + suffix)
