"""
Device telemetry Pydantic schemas
"""

from pydantic import Field, field_validator
from typing import Any, List, Optional
from datetime import datetime

from pathfinder.core.clock import as_utc
from pathfinder.schemas.base import ApiModel

class DataSubmission(ApiModel):
    """A single reading; the server stamps the time"""
    data_type: str = Field(..., min_length=1, max_length=100, description="Reading tag, e.g. temperature")
    value: Any = Field(..., description="Numeric, string or nested JSON value")
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)

    @field_validator("value")
    @classmethod
    def value_required(cls, v):
        if v is None:
            raise ValueError("value is required")
        return v

class BatchEntry(DataSubmission):
    """A reading inside a batch, optionally carrying its own timestamp"""
    timestamp: Optional[datetime] = None

    @field_validator("timestamp")
    @classmethod
    def timestamp_utc(cls, v):
        return as_utc(v) if v is not None else v

class BatchSubmission(ApiModel):
    data_entries: Optional[List[BatchEntry]] = None

class SubmitResponse(ApiModel):
    message: str
    data_id: int

class BatchSubmitResponse(ApiModel):
    message: str
    count: int

class DeviceDataResponse(ApiModel):
    """Schema for a stored reading"""
    id: int
    device_id: int
    timestamp: datetime
    data_type: str
    value: Any
    latitude: Optional[float] = None
    longitude: Optional[float] = None
