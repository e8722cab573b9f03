"""Validation module.

This module provides local business-rule checks run before submission.
"""

from .units import (
    HS_CODES_WITH_SUPPLEMENTARY_UNITS,
    VALID_SUPPLEMENTARY_UNIT_TYPES,
    get_required_supplementary_unit,
    validate_domestic_trade_units,
    validate_import_export_units,
    validate_units_of_measure,
)

__all__ = [
    "HS_CODES_WITH_SUPPLEMENTARY_UNITS",
    "VALID_SUPPLEMENTARY_UNIT_TYPES",
    "get_required_supplementary_unit",
    "validate_domestic_trade_units",
    "validate_import_export_units",
    "validate_units_of_measure",
]
