from datetime import datetime

from pydantic import BaseModel, field_validator

from trackgen.application.generation.candidate import is_valid_tracking_number


class TrackingNumberResponse(BaseModel):
    tracking_number: str
    created_at: datetime

    @field_validator("tracking_number")
    @classmethod
    def validate_tracking_number(cls, v):
        if not is_valid_tracking_number(v):
            raise ValueError("tracking_number must be 16 characters from A-Z and 0-9")
        return v


class ServiceInfo(BaseModel):
    service: str
    version: str
    description: str
