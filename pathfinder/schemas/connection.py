"""
Connection Pydantic schemas
"""

from pydantic import Field
from typing import Optional

from pathfinder.schemas.base import ApiModel
from pathfinder.schemas.user import UserSummary

class ConnectionCreate(ApiModel):
    connected_user_id: int
    shared_patterns: Optional[str] = Field(None, max_length=1000)

class ConnectionUpdate(ApiModel):
    shared_patterns: Optional[str] = Field(None, max_length=1000)

class ConnectionResponse(ApiModel):
    id: int
    user_id: int
    connected_user_id: int
    shared_patterns: Optional[str] = None
    connected_user: Optional[UserSummary] = None

class ConnectionMessage(ApiModel):
    message: str
    connection: ConnectionResponse
