"""
Telemetry ingestion and query endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import datetime

from pathfinder.api.deps import get_current_device, get_current_user
from pathfinder.database.connection import get_database
from pathfinder.models.device import Device
from pathfinder.models.user import User
from pathfinder.schemas.device_data import (
    BatchSubmission,
    BatchSubmitResponse,
    DataSubmission,
    DeviceDataResponse,
    SubmitResponse,
)
from pathfinder.services.telemetry import get_owned_device, query_readings, record_batch, record_reading

router = APIRouter()

@router.post("/device-data/submit", response_model=SubmitResponse, status_code=status.HTTP_201_CREATED)
async def submit_data(
    reading: DataSubmission,
    device: Device = Depends(get_current_device),
    db: Session = Depends(get_database)
):
    """Store a single reading from the authenticated device"""

    row = record_reading(db, device, reading)
    return SubmitResponse(message="Data submitted successfully.", data_id=row.id)

@router.post("/device-data/batch-submit", response_model=BatchSubmitResponse, status_code=status.HTTP_201_CREATED)
async def batch_submit_data(
    batch: BatchSubmission,
    device: Device = Depends(get_current_device),
    db: Session = Depends(get_database)
):
    """Store many readings from the authenticated device in one insert"""

    count = record_batch(db, device, batch.data_entries)
    return BatchSubmitResponse(message="Batch data submitted successfully.", count=count)

@router.get("/device-data/{device_id}", response_model=List[DeviceDataResponse])
async def get_device_data(
    device_id: int,
    data_type: Optional[str] = Query(None, alias="dataType"),
    start_date: Optional[datetime] = Query(None, alias="startDate"),
    end_date: Optional[datetime] = Query(None, alias="endDate"),
    limit: Optional[int] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get readings of one of the caller's devices, newest first"""

    device = get_owned_device(db, device_id, user)
    readings = query_readings(db, device, data_type, start_date, end_date, limit)
    return [DeviceDataResponse.model_validate(row) for row in readings]
