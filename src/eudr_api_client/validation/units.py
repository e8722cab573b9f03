"""Units of measure validation for due diligence statements.

Checks the ``goodsMeasure`` of every commodity in a statement before it is
submitted, so that the common unit errors are reported locally with the same
EUDR error codes the submission service would return.

Rules depend on the statement's ``activityType``:

- IMPORT / EXPORT: net mass is mandatory, percentage estimates are not
  allowed, and a supplementary unit is required exactly for the HS headings
  listed in ``HS_CODES_WITH_SUPPLEMENTARY_UNITS`` (with the listed type)
- DOMESTIC / TRADE: percentage estimate within 0-25, supplementary unit and
  qualifier provided together with a known qualifier, and at least one of
  net mass or supplementary unit
"""

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Optional

from eudr_api_client.utils.exceptions import EudrApiError

logger = logging.getLogger(__name__)

# HS headings (first 4 digits) that require a supplementary unit of a given type
HS_CODES_WITH_SUPPLEMENTARY_UNITS: Mapping[str, str] = MappingProxyType({
    "4011": "NAR",
    "4013": "NAR",
    "4104": "NAR",
    "4403": "MTQ",
    "4406": "MTQ",
    "4408": "MTQ",
    "4410": "MTQ",
    "4411": "MTQ",
    "4412": "MTQ",
    "4413": "MTQ",
    "4701": "KSD",
    "4702": "KSD",
    "4704": "KSD",
    "4705": "KSD",
})

# Supplementary unit qualifiers accepted for Domestic/Trade activities
VALID_SUPPLEMENTARY_UNIT_TYPES: tuple[str, ...] = ("KSD", "MTK", "MTQ", "MTR", "NAR", "NPR")

IMPORT_EXPORT_ACTIVITIES = frozenset({"IMPORT", "EXPORT"})
DOMESTIC_TRADE_ACTIVITIES = frozenset({"DOMESTIC", "TRADE"})

MAX_DOMESTIC_PERCENTAGE = 25


def _units_error(error_code: str, message: str) -> EudrApiError:
    """Build the EudrApiError raised for a units of measure rule violation."""
    error = EudrApiError(message, http_status=400)
    error.eudr_specific = True
    error.well_known_error = True
    error.eudr_error_code = error_code
    error.eudr_error_message = message
    error.eudr_errors = [{"code": error_code, "message": message, "field": None}]
    return error


def get_required_supplementary_unit(hs_heading: Optional[str]) -> Optional[str]:
    """Get the supplementary unit type required for an HS heading.

    Args:
        hs_heading: HS heading or code (4 digits or more)

    Returns:
        Required unit type (e.g. "KSD"), or None if no supplementary unit applies

    Example:
        >>> get_required_supplementary_unit("470329")
        'KSD'
    """
    if not hs_heading:
        return None

    hs_heading = str(hs_heading)
    if hs_heading in HS_CODES_WITH_SUPPLEMENTARY_UNITS:
        return HS_CODES_WITH_SUPPLEMENTARY_UNITS[hs_heading]
    if len(hs_heading) >= 4:
        return HS_CODES_WITH_SUPPLEMENTARY_UNITS.get(hs_heading[:4])
    return None


def validate_import_export_units(measure: Mapping[str, Any], hs_heading: Optional[str]) -> None:
    """Validate the goods measure of an IMPORT or EXPORT commodity.

    Args:
        measure: ``goodsMeasure`` mapping
        hs_heading: HS heading of the commodity

    Raises:
        EudrApiError: If a rule is violated, with ``eudr_error_code`` set
    """
    if measure.get("percentageEstimationOrDeviation") is not None:
        raise _units_error(
            "EUDR_COMMODITIES_DESCRIPTOR_PERCENTAGE_ESTIMATION_NOT_ALLOWED",
            "Percentage estimate or deviation not allowed for Import/Export activities.",
        )

    if not measure.get("netWeight"):
        raise _units_error(
            "EUDR_COMMODITIES_DESCRIPTOR_NET_MASS_EMPTY",
            "Net Mass is mandatory for IMPORT or EXPORT activity.",
        )

    if not hs_heading:
        return

    supplementary_unit = measure.get("supplementaryUnit")
    qualifier = measure.get("supplementaryUnitQualifier")
    required_unit = get_required_supplementary_unit(hs_heading)

    if required_unit:
        if not supplementary_unit or not qualifier:
            raise _units_error(
                "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_MISSING",
                f"Supplementary unit is mandatory for HS code {hs_heading}. "
                f"Required type: {required_unit}",
            )
        if qualifier != required_unit:
            raise _units_error(
                "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_QUALIFIER_NOT_COMPATIBLE",
                f"Invalid supplementary unit type for HS code {hs_heading}. "
                f"Expected: {required_unit}, got: {qualifier}",
            )
    elif supplementary_unit or qualifier:
        raise _units_error(
            "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_NOT_ALLOWED",
            f"Supplementary unit not allowed for HS code {hs_heading} in Import/Export activities.",
        )


def validate_domestic_trade_units(measure: Mapping[str, Any]) -> None:
    """Validate the goods measure of a DOMESTIC or TRADE commodity.

    Args:
        measure: ``goodsMeasure`` mapping

    Raises:
        EudrApiError: If a rule is violated, with ``eudr_error_code`` set
    """
    percentage = measure.get("percentageEstimationOrDeviation")
    if percentage is not None:
        try:
            value = float(percentage)
        except (TypeError, ValueError):
            value = None
        # NaN fails the range comparison too
        if value is None or not 0 <= value <= MAX_DOMESTIC_PERCENTAGE:
            raise _units_error(
                "EUDR_COMMODITIES_DESCRIPTOR_PERCENTAGE_ESTIMATION_INVALID",
                f"Percentage estimate or deviation must be between 0 and "
                f"{MAX_DOMESTIC_PERCENTAGE} for Domestic/Trade activities.",
            )

    supplementary_unit = measure.get("supplementaryUnit")
    qualifier = measure.get("supplementaryUnitQualifier")

    if qualifier:
        if qualifier not in VALID_SUPPLEMENTARY_UNIT_TYPES:
            raise _units_error(
                "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_QUALIFIER_INVALID",
                f"Invalid supplementary unit type: {qualifier}. "
                f"Valid types: {', '.join(VALID_SUPPLEMENTARY_UNIT_TYPES)}",
            )
        if not supplementary_unit:
            raise _units_error(
                "EUDR_COMMODITIES_DESCRIPTOR_NUMBER_OF_UNITS_MISSING",
                "Supplementary unit quantity is required when supplementary unit "
                "qualifier is provided.",
            )

    if supplementary_unit and not qualifier:
        raise _units_error(
            "EUDR_COMMODITIES_DESCRIPTOR_SUPPLEMENTARY_UNIT_MISSING",
            "Supplementary unit qualifier is required when supplementary unit "
            "quantity is provided.",
        )

    if not measure.get("netWeight") and not supplementary_unit:
        raise _units_error(
            "EUDR_COMMODITIES_DESCRIPTOR_QUANTITY_MISSING",
            "At least one unit of measure quantity must be provided for "
            "Domestic/Trade activities.",
        )


def validate_units_of_measure(statement: Mapping[str, Any]) -> None:
    """Validate the units of measure of every commodity in a statement.

    Commodities without a ``descriptors.goodsMeasure`` are skipped, as are
    statements whose activity type has no unit rules.

    Args:
        statement: Statement mapping with ``activityType`` and ``commodities``
            (a list or a single commodity)

    Raises:
        EudrApiError: On the first rule violation, with ``eudr_error_code``
            and ``eudr_specific`` set

    Example:
        >>> validate_units_of_measure({
        ...     "activityType": "IMPORT",
        ...     "commodities": [{
        ...         "hsHeading": "4701",
        ...         "descriptors": {"goodsMeasure": {
        ...             "netWeight": 1000,
        ...             "supplementaryUnit": 50,
        ...             "supplementaryUnitQualifier": "KSD",
        ...         }},
        ...     }],
        ... })
    """
    commodities = statement.get("commodities")
    if not commodities:
        return
    if isinstance(commodities, Mapping):
        commodities = [commodities]

    activity_type = statement.get("activityType")

    for commodity in commodities:
        descriptors = commodity.get("descriptors") or {}
        measure = descriptors.get("goodsMeasure")
        if not measure:
            continue

        if activity_type in IMPORT_EXPORT_ACTIVITIES:
            validate_import_export_units(measure, commodity.get("hsHeading"))
        elif activity_type in DOMESTIC_TRADE_ACTIVITIES:
            validate_domestic_trade_units(measure)

    logger.debug(f"Units of measure valid for {len(commodities)} commodities ({activity_type})")
