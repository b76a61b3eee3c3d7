"""
Device management endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from typing import List
import structlog

from pathfinder.api.deps import get_current_device, get_current_user
from pathfinder.core.errors import ConflictError
from pathfinder.core.security import generate_api_key
from pathfinder.database.connection import get_database
from pathfinder.models.device import Device, DeviceStatus
from pathfinder.models.user import User
from pathfinder.schemas.base import MessageResponse
from pathfinder.schemas.device import (
    ApiKeyResponse,
    DeviceRegister,
    DeviceRegisterResponse,
    DeviceResponse,
    DeviceUpdate,
    DeviceUpdateResponse,
    DeviceWithKey,
)
from pathfinder.services.telemetry import get_owned_device, observe_ingestion

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.post("/devices/register", response_model=DeviceRegisterResponse, status_code=status.HTTP_201_CREATED)
async def register_device(
    device_data: DeviceRegister,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Register a device; the API key is disclosed in this response only"""

    # Device ids are unique across all owners
    existing_device = db.query(Device).filter(Device.device_id == device_data.device_id).first()
    if existing_device:
        raise ConflictError("Device ID already registered.")

    device = Device(
        device_id=device_data.device_id,
        name=device_data.name,
        device_type=device_data.device_type,
        status=DeviceStatus.OFFLINE.value,
        api_key=generate_api_key(),
        user_id=user.id,
    )
    db.add(device)
    db.commit()
    db.refresh(device)

    logger.info("Device registered", device_id=device.device_id, name=device.name)
    return DeviceRegisterResponse(
        message="Device registered successfully.",
        device=DeviceWithKey.model_validate(device),
    )

@router.post("/devices/check-in", response_model=MessageResponse)
async def check_in(
    device: Device = Depends(get_current_device),
    db: Session = Depends(get_database)
):
    """Heartbeat from a device; no data is stored"""

    observe_ingestion(device)
    db.commit()

    logger.info("Device checked in", device_id=device.device_id)
    return MessageResponse(message="Check-in successful.")

@router.get("/devices", response_model=List[DeviceResponse])
async def get_devices(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get the caller's devices"""

    devices = db.query(Device).filter(Device.user_id == user.id).order_by(Device.id).all()
    return [DeviceResponse.model_validate(device) for device in devices]

@router.get("/devices/{device_id}", response_model=DeviceResponse)
async def get_device(
    device_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get one of the caller's devices"""

    device = get_owned_device(db, device_id, user)
    return DeviceResponse.model_validate(device)

@router.put("/devices/{device_id}", response_model=DeviceUpdateResponse)
async def update_device(
    device_id: int,
    device_data: DeviceUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Update a device's name or type"""

    device = get_owned_device(db, device_id, user)

    update_data = device_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(device, field, value)

    db.commit()
    db.refresh(device)

    logger.info("Device updated", device_id=device.device_id)
    return DeviceUpdateResponse(
        message="Device updated successfully.",
        device=DeviceResponse.model_validate(device),
    )

@router.delete("/devices/{device_id}", response_model=MessageResponse)
async def delete_device(
    device_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Delete a device together with its stored readings"""

    device = get_owned_device(db, device_id, user)
    external_id = device.device_id

    db.delete(device)
    db.commit()

    logger.info("Device deleted", device_id=external_id)
    return MessageResponse(message="Device deleted successfully.")

@router.post("/devices/{device_id}/regenerate-key", response_model=ApiKeyResponse)
async def regenerate_api_key(
    device_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Replace the device's API key; the old key stops working on commit"""

    device = get_owned_device(db, device_id, user)
    device.api_key = generate_api_key()
    db.commit()

    logger.info("Device API key regenerated", device_id=device.device_id)
    return ApiKeyResponse(message="API key regenerated successfully.", api_key=device.api_key)
