from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict


class TrackingNumberRequest(BaseModel):
    """Raw shipment attributes as received from a caller.

    Every field is optional here so that all problems can be reported at once
    by the request validator instead of failing on the first one.
    """

    origin_country_id: Optional[str] = None
    destination_country_id: Optional[str] = None
    weight: Optional[Decimal] = None
    customer_id: Optional[UUID] = None
    customer_name: Optional[str] = None
    customer_slug: Optional[str] = None

    def normalized(self) -> "TrackingNumberRequest":
        """Upper-case country codes and lower-case the slug."""
        return self.model_copy(
            update={
                "origin_country_id": _upper(self.origin_country_id),
                "destination_country_id": _upper(self.destination_country_id),
                "customer_slug": _lower(self.customer_slug),
            }
        )


class ShipmentAttributes(BaseModel):
    """Validated shipment attributes persisted alongside a tracking number."""

    origin_country_id: str
    destination_country_id: str
    weight: Decimal
    customer_id: UUID
    customer_name: str
    customer_slug: str

    model_config = ConfigDict(frozen=True)


class TrackingNumberRecord(BaseModel):
    """A persisted tracking number with its shipment attributes."""

    tracking_number: str
    attributes: ShipmentAttributes
    created_at: datetime

    model_config = ConfigDict(frozen=True)


def _upper(value: Optional[str]) -> Optional[str]:
    return value.upper() if value is not None else None


def _lower(value: Optional[str]) -> Optional[str]:
    return value.lower() if value is not None else None
