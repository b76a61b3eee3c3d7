"""
Device Pydantic schemas
"""

from pydantic import Field
from typing import Optional
from datetime import datetime

from pathfinder.schemas.base import ApiModel

class DeviceRegister(ApiModel):
    """Schema for registering a device"""
    device_id: str = Field(..., min_length=1, max_length=255, description="Unique device identifier")
    name: str = Field(..., min_length=1, max_length=255, description="Device name")
    device_type: str = Field(..., min_length=1, max_length=100, alias="type", description="Type of device")

class DeviceUpdate(ApiModel):
    """Schema for updating a device; only name and type are mutable"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    device_type: Optional[str] = Field(None, min_length=1, max_length=100, alias="type")

class DeviceResponse(ApiModel):
    """Schema for device response; never carries the API key"""
    id: int
    device_id: str
    name: str
    device_type: str = Field(..., alias="type")
    status: str
    last_connected: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

class DeviceWithKey(DeviceResponse):
    """Device as returned once, at registration"""
    api_key: str

class DeviceRegisterResponse(ApiModel):
    message: str
    device: DeviceWithKey

class DeviceUpdateResponse(ApiModel):
    message: str
    device: DeviceResponse

class ApiKeyResponse(ApiModel):
    message: str
    api_key: str
