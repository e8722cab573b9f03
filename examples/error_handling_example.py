"""Error handling examples for EUDR service calls.

This module demonstrates how a failed call is turned into an EudrApiError,
and how business errors from a SOAP fault are reported to the caller.
"""

import json

import requests

from eudr_api_client import EudrApiError, handle_error, parse_soap_fault
from eudr_api_client.logging_audit import create_logger

logger = create_logger(level="debug", name="error-example")

REJECTED_SUBMISSION = """<S:Envelope xmlns:S="http://schemas.xmlsoap.org/soap/envelope/">
  <S:Body>
    <S:Fault>
      <faultcode>S:Client</faultcode>
      <faultstring>BusinessRulesValidationException</faultstring>
      <detail>
        <ns4:BusinessRulesValidationException xmlns:ns4="http://ec.europa.eu/sanco/tracesnt/error/v01">
          <ns4:Error>
            <ns4:ID>EUDR-COMMODITIES-PRODUCER-GEO-LATITUDE-INVALID</ns4:ID>
            <ns4:Message>Latitude 95.1 out of range</ns4:Message>
            <ns4:Field>commodities[0].producers[0].geometryGeojson</ns4:Field>
          </ns4:Error>
        </ns4:BusinessRulesValidationException>
      </detail>
    </S:Fault>
  </S:Body>
</S:Envelope>"""


def example_1_parse_fault():
    """Example 1: Parse a SOAP fault saved from a failed submission."""
    print("=" * 80)
    print("EXAMPLE 1: Parsing a SOAP Fault")
    print("=" * 80)
    print()

    fault = parse_soap_fault(REJECTED_SUBMISSION)
    print(json.dumps(fault.to_dict(), indent=2))
    print()


def example_2_handle_failed_call():
    """Example 2: Convert an HTTP error into an EudrApiError."""
    print("=" * 80)
    print("EXAMPLE 2: Handling a Failed Call")
    print("=" * 80)
    print()

    response = requests.Response()
    response.status_code = 500
    response.reason = "Internal Server Error"
    response._content = REJECTED_SUBMISSION.encode("utf-8")

    try:
        try:
            response.raise_for_status()
        except requests.RequestException as e:
            raise handle_error(e) from e
    except EudrApiError as api_error:
        logger.error(
            "Submission rejected",
            http_status=api_error.http_status,
            code=api_error.eudr_error_code,
        )
        print(json.dumps(api_error.to_dict(), indent=2))
    print()


if __name__ == "__main__":
    example_1_parse_fault()
    example_2_handle_failed_call()
