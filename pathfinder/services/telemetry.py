"""
Telemetry ingestion and query logic shared by the device endpoints
"""

from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy import desc, insert
from sqlalchemy.orm import Session
import structlog

from pathfinder.core.clock import as_utc, utcnow
from pathfinder.core.config import settings
from pathfinder.core.errors import AuthorizationError, InvalidInputError, NotFoundError
from pathfinder.models.device import Device, DeviceStatus
from pathfinder.models.device_data import DeviceData
from pathfinder.models.user import User
from pathfinder.schemas.device_data import BatchEntry, DataSubmission

logger = structlog.get_logger(__name__)

DEVICE_NOT_FOUND = "Device not found."


def observe_ingestion(device: Device, now: Optional[datetime] = None) -> Device:
    """Mark a device as seen: online, last connected ``now``.

    Applied on every ingestion and check-in, whatever the previous status.
    The caller commits it together with any data rows.
    """
    device.status = DeviceStatus.ONLINE.value
    device.last_connected = now or utcnow()
    return device


def get_owned_device(db: Session, device_pk: int, user: User) -> Device:
    """Load a device the user owns.

    A device owned by another user raises ``AuthorizationError``, which is
    rendered exactly like the ``NotFoundError`` for a missing device.
    """
    device = db.get(Device, device_pk)
    if device is None:
        raise NotFoundError(DEVICE_NOT_FOUND)
    if device.user_id != user.id:
        raise AuthorizationError(DEVICE_NOT_FOUND)
    return device


def record_reading(db: Session, device: Device, reading: DataSubmission) -> DeviceData:
    """Store one reading stamped with the server time"""
    now = utcnow()
    row = DeviceData(
        device_id=device.id,
        timestamp=now,
        data_type=reading.data_type,
        value=reading.value,
        latitude=reading.latitude,
        longitude=reading.longitude,
    )
    try:
        db.add(row)
        observe_ingestion(device, now)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(row)

    logger.info("Device data submitted", device_id=device.device_id, data_type=row.data_type, data_id=row.id)
    return row


def record_batch(db: Session, device: Device, entries: Optional[List[BatchEntry]]) -> int:
    """Bulk insert readings in one statement; nothing is stored on failure.

    Returns the number of submitted entries.
    """
    if not isinstance(entries, list) or not entries:
        raise InvalidInputError("Invalid data format. Expected an array of data entries.")

    now = utcnow()
    rows = [
        {
            "device_id": device.id,
            "timestamp": entry.timestamp or now,
            "data_type": entry.data_type,
            "value": entry.value,
            "latitude": entry.latitude,
            "longitude": entry.longitude,
        }
        for entry in entries
    ]
    try:
        db.execute(insert(DeviceData), rows)
        observe_ingestion(device, now)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info("Batch device data submitted", device_id=device.device_id, count=len(rows))
    return len(rows)


def clamp_limit(limit: Optional[int]) -> int:
    """Apply the default row limit and cap it server-side"""
    if limit is None:
        return settings.data_query_default_limit
    if limit < 1:
        raise InvalidInputError("limit must be a positive integer")
    if limit > settings.data_query_max_limit:
        logger.debug("Capping data query limit", requested=limit, limit=settings.data_query_max_limit)
        return settings.data_query_max_limit
    return limit


def build_data_query(
    db: Session,
    device_pk: int,
    data_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
):
    """Readings of one device, optionally narrowed by type and an inclusive time range"""
    query = db.query(DeviceData).filter(DeviceData.device_id == device_pk)

    if data_type:
        query = query.filter(DeviceData.data_type == data_type)
    if start_date is not None:
        query = query.filter(DeviceData.timestamp >= as_utc(start_date))
    if end_date is not None:
        query = query.filter(DeviceData.timestamp <= as_utc(end_date))

    return query


def query_readings(
    db: Session,
    device: Device,
    data_type: Optional[str] = None,
    start_date: Optional[datetime] = None,
    end_date: Optional[datetime] = None,
    limit: Optional[int] = None,
) -> Iterable[DeviceData]:
    """Newest readings first, at most ``limit`` of them"""
    query = build_data_query(db, device.id, data_type, start_date, end_date)
    return query.order_by(desc(DeviceData.timestamp)).limit(clamp_limit(limit)).all()
