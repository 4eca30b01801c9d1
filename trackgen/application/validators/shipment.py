"""
Field-level validation of shipment attributes.

Collects every problem in a request instead of stopping at the first one, so a
caller gets one combined message.
"""

from __future__ import annotations

import re
from decimal import Decimal
from typing import List, Optional

from trackgen.core.exceptions import ShipmentValidationError
from trackgen.core.pyd_schemas import ShipmentAttributes, TrackingNumberRequest

ISO_COUNTRY_CODE_PATTERN = re.compile(r"^[A-Z]{2}$")
KEBAB_CASE_PATTERN = re.compile(r"^[a-z0-9-]+$")
MIN_WEIGHT = Decimal("0.001")
MAX_WEIGHT = Decimal("999999.999")


def collect_validation_errors(request: TrackingNumberRequest) -> List[str]:
    errors: List[str] = []
    _check_country(request.origin_country_id, "Origin", errors)
    _check_country(request.destination_country_id, "Destination", errors)
    _check_weight(request.weight, errors)
    if request.customer_id is None:
        errors.append("Customer ID is required")
    _check_customer_name(request.customer_name, errors)
    _check_customer_slug(request.customer_slug, errors)
    return errors


def is_valid(request: TrackingNumberRequest) -> bool:
    return not collect_validation_errors(request)


def validate(request: TrackingNumberRequest) -> ShipmentAttributes:
    """Return validated attributes or raise ShipmentValidationError with all errors."""
    errors = collect_validation_errors(request)
    if errors:
        raise ShipmentValidationError(errors)
    return ShipmentAttributes(
        origin_country_id=request.origin_country_id,
        destination_country_id=request.destination_country_id,
        weight=request.weight,
        customer_id=request.customer_id,
        customer_name=request.customer_name,
        customer_slug=request.customer_slug,
    )


def _check_country(value: Optional[str], label: str, errors: List[str]) -> None:
    if not value:
        errors.append(f"{label} country ID is required")
    elif not ISO_COUNTRY_CODE_PATTERN.match(value):
        errors.append(
            f"{label} country ID must be ISO 3166-1 alpha-2 format (e.g., 'US', 'GB')"
        )


def _check_weight(weight: Optional[Decimal], errors: List[str]) -> None:
    if weight is None:
        errors.append("Weight is required")
        return
    if weight < MIN_WEIGHT:
        errors.append(f"Weight must be at least {MIN_WEIGHT} kg")
    if weight > MAX_WEIGHT:
        errors.append(f"Weight must not exceed {MAX_WEIGHT} kg (1 million kg limit)")


def _check_customer_name(value: Optional[str], errors: List[str]) -> None:
    if not value:
        errors.append("Customer name is required")
    elif not value.strip():
        errors.append("Customer name cannot be blank")


def _check_customer_slug(value: Optional[str], errors: List[str]) -> None:
    if not value:
        errors.append("Customer slug is required")
    elif not KEBAB_CASE_PATTERN.match(value):
        errors.append(
            "Customer slug must be in kebab-case format "
            "(lowercase letters, numbers, and hyphens only)"
        )
