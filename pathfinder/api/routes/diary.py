"""
Synchronicity diary endpoints
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session
from sqlalchemy import desc, or_
from typing import List, Optional
import structlog

from pathfinder.api.deps import get_current_user
from pathfinder.core.errors import AuthorizationError, InvalidInputError, NotFoundError
from pathfinder.database.connection import get_database
from pathfinder.models.diary_entry import DiaryEntry
from pathfinder.models.user import User
from pathfinder.schemas.base import MessageResponse
from pathfinder.schemas.diary import (
    DiaryEntryCreate,
    DiaryEntryMessage,
    DiaryEntryResponse,
    DiaryEntryUpdate,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

ENTRY_NOT_FOUND = "Diary entry not found."


def _own_diary(user_id: int, user: User) -> None:
    if user_id != user.id:
        raise AuthorizationError(ENTRY_NOT_FOUND)


def _get_entry(db: Session, user_id: int, entry_id: int) -> DiaryEntry:
    entry = db.query(DiaryEntry).filter(DiaryEntry.id == entry_id, DiaryEntry.user_id == user_id).first()
    if not entry:
        raise NotFoundError(ENTRY_NOT_FOUND)
    return entry

@router.post("/diary/{user_id}", response_model=DiaryEntryMessage, status_code=status.HTTP_201_CREATED)
async def create_entry(
    user_id: int,
    entry_data: DiaryEntryCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Create a diary entry"""
    _own_diary(user_id, user)

    entry = DiaryEntry(user_id=user.id, **entry_data.model_dump())
    db.add(entry)
    db.commit()
    db.refresh(entry)

    logger.info("Diary entry created", entry_id=entry.id)
    return DiaryEntryMessage(
        message="Diary entry created successfully.",
        entry=DiaryEntryResponse.model_validate(entry),
    )

@router.get("/diary/{user_id}", response_model=List[DiaryEntryResponse])
async def get_entries(
    user_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get all diary entries, most recent date first"""
    _own_diary(user_id, user)

    entries = db.query(DiaryEntry).filter(DiaryEntry.user_id == user.id).order_by(
        desc(DiaryEntry.date), desc(DiaryEntry.id)
    ).all()
    return [DiaryEntryResponse.model_validate(entry) for entry in entries]

@router.get("/diary/{user_id}/search", response_model=List[DiaryEntryResponse])
async def search_entries(
    user_id: int,
    query: Optional[str] = Query(None),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Case-insensitive substring search over title and content"""
    _own_diary(user_id, user)

    if not query:
        raise InvalidInputError("Search query is required.")

    pattern = f"%{query}%"
    entries = db.query(DiaryEntry).filter(
        DiaryEntry.user_id == user.id,
        or_(DiaryEntry.title.ilike(pattern), DiaryEntry.content.ilike(pattern))
    ).order_by(desc(DiaryEntry.date), desc(DiaryEntry.id)).all()
    return [DiaryEntryResponse.model_validate(entry) for entry in entries]

@router.get("/diary/{user_id}/{entry_id}", response_model=DiaryEntryResponse)
async def get_entry(
    user_id: int,
    entry_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Get a single diary entry"""
    _own_diary(user_id, user)
    return DiaryEntryResponse.model_validate(_get_entry(db, user.id, entry_id))

@router.put("/diary/{user_id}/{entry_id}", response_model=DiaryEntryMessage)
async def update_entry(
    user_id: int,
    entry_id: int,
    entry_data: DiaryEntryUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Update a diary entry"""
    _own_diary(user_id, user)
    entry = _get_entry(db, user.id, entry_id)

    update_data = entry_data.model_dump(exclude_unset=True, exclude_none=True)
    for field, value in update_data.items():
        setattr(entry, field, value)

    db.commit()
    db.refresh(entry)

    logger.info("Diary entry updated", entry_id=entry.id)
    return DiaryEntryMessage(
        message="Diary entry updated successfully.",
        entry=DiaryEntryResponse.model_validate(entry),
    )

@router.delete("/diary/{user_id}/{entry_id}", response_model=MessageResponse)
async def delete_entry(
    user_id: int,
    entry_id: int,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Delete a diary entry"""
    _own_diary(user_id, user)
    entry = _get_entry(db, user.id, entry_id)

    db.delete(entry)
    db.commit()

    logger.info("Diary entry deleted", entry_id=entry_id)
    return MessageResponse(message="Diary entry deleted successfully.")
