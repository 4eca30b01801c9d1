import pytest
from pydantic import ValidationError

from trackgen.presentation.api.v1.schemas.tracking import TrackingNumberResponse

from conftest import FIXED_NOW


def test_accepts_well_formed_tracking_number():
    resp = TrackingNumberResponse(tracking_number="A1B2C3D4E5F6G7H8", created_at=FIXED_NOW)
    assert resp.tracking_number == "A1B2C3D4E5F6G7H8"


@pytest.mark.parametrize(
    "value",
    ["A1B2C3D4E5F6G7H", "a1b2c3d4e5f6g7h8", "A1B2C3D4E5F6G7H8\n", "A1B2-3D4E5F6G7H8"],
)
def test_rejects_malformed_tracking_number(value):
    with pytest.raises(ValidationError):
        TrackingNumberResponse(tracking_number=value, created_at=FIXED_NOW)
