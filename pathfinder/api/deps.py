"""
Authentication dependencies

Users authenticate with a bearer token; devices with a static API key in
the ``x-api-key`` header. The two schemes guard disjoint sets of routes.
"""

from typing import Optional

from fastapi import Depends, Request
from fastapi.security import APIKeyHeader, HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session
import structlog

from pathfinder.core.errors import UnauthenticatedError
from pathfinder.core.logs import LogBuffer
from pathfinder.core.security import decode_access_token
from pathfinder.database.connection import get_database
from pathfinder.models.device import Device
from pathfinder.models.user import User

logger = structlog.get_logger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)
_api_key_header = APIKeyHeader(name="x-api-key", auto_error=False)


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    db: Session = Depends(get_database),
) -> User:
    """Resolve the bearer token to an existing user"""
    if credentials is None or not credentials.credentials:
        raise UnauthenticatedError("Authorization token is missing or invalid.")

    payload = decode_access_token(credentials.credentials)
    user = db.get(User, int(payload["sub"]))
    if user is None:
        logger.warning("Token refers to unknown user", user_id=payload["sub"])
        raise UnauthenticatedError("Invalid or expired token.")

    structlog.contextvars.bind_contextvars(user_id=user.id)
    return user


async def get_current_device(
    api_key: Optional[str] = Depends(_api_key_header),
    db: Session = Depends(get_database),
) -> Device:
    """Resolve the ``x-api-key`` header to a registered device"""
    if not api_key:
        raise UnauthenticatedError("API key is required.")

    device = db.query(Device).filter(Device.api_key == api_key).first()
    if device is None:
        logger.warning("Rejected unknown device API key")
        raise UnauthenticatedError("Invalid API key.")

    structlog.contextvars.bind_contextvars(device_id=device.device_id)
    return device


async def get_log_buffer(request: Request) -> LogBuffer:
    """The application's log buffer"""
    return request.app.state.log_buffer
