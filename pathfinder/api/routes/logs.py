"""
Recent application log entries
"""

from fastapi import APIRouter, Depends, Query
from typing import Optional

from pathfinder.api.deps import get_current_user, get_log_buffer
from pathfinder.core.errors import InvalidInputError
from pathfinder.core.logs import LEVELS, LogBuffer
from pathfinder.models.user import User
from pathfinder.schemas.base import MessageResponse

router = APIRouter()

@router.get("/logs")
async def get_logs(
    level: Optional[str] = Query(None, description="Minimum level: debug, info, warning, error, critical"),
    limit: Optional[int] = Query(None, ge=1),
    user: User = Depends(get_current_user),
    buffer: LogBuffer = Depends(get_log_buffer)
):
    """The caller's own buffered log entries, oldest first"""
    if level and level.lower() not in LEVELS:
        raise InvalidInputError(f"Unknown log level: {level}")

    entries = buffer.entries(level=level, limit=limit, user_id=user.id)
    return {"capacity": buffer.capacity, "count": len(entries), "entries": entries}

@router.delete("/logs", response_model=MessageResponse)
async def clear_logs(
    user: User = Depends(get_current_user),
    buffer: LogBuffer = Depends(get_log_buffer)
):
    """Drop the caller's buffered entries"""
    buffer.clear(user_id=user.id)
    return MessageResponse(message="Logs cleared.")
