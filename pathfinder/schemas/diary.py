"""
Diary Pydantic schemas
"""

from pydantic import Field
from typing import Optional
import datetime

from pathfinder.schemas.base import ApiModel

class DiaryEntryCreate(ApiModel):
    date: datetime.date
    title: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)

class DiaryEntryUpdate(ApiModel):
    date: Optional[datetime.date] = None
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    content: Optional[str] = Field(None, min_length=1)

class DiaryEntryResponse(ApiModel):
    id: int
    user_id: int
    date: datetime.date
    title: str
    content: str

class DiaryEntryMessage(ApiModel):
    message: str
    entry: DiaryEntryResponse
