"""
Profile endpoints for the authenticated user
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
import structlog

from pathfinder.api.deps import get_current_user
from pathfinder.core.errors import ConflictError
from pathfinder.database.connection import get_database
from pathfinder.models.user import User
from pathfinder.schemas.user import ProfileResponse, ProfileUpdate, ProfileUpdateResponse

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.get("/profile", response_model=ProfileResponse)
async def get_profile(user: User = Depends(get_current_user)):
    """Get the caller's profile"""
    return ProfileResponse.model_validate(user)

@router.put("/profile", response_model=ProfileUpdateResponse)
async def update_profile(
    payload: ProfileUpdate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_database)
):
    """Update name, email or date of birth"""

    update_data = payload.model_dump(exclude_unset=True, exclude_none=True)

    new_email = update_data.get("email")
    if new_email and new_email != user.email:
        taken = db.query(User).filter(User.email == new_email, User.id != user.id).first()
        if taken:
            raise ConflictError("Email already in use")

    for field, value in update_data.items():
        setattr(user, field, value)

    db.commit()
    db.refresh(user)

    logger.info("Profile updated", fields=sorted(update_data))
    return ProfileUpdateResponse(
        message="Profile updated successfully.",
        user=ProfileResponse.model_validate(user),
    )
