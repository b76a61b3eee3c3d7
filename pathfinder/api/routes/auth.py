"""
Registration, login and token validation endpoints
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
import structlog

from pathfinder.api.deps import get_current_user
from pathfinder.core.errors import ConflictError, UnauthenticatedError
from pathfinder.core.security import create_access_token, hash_password, verify_password
from pathfinder.database.connection import get_database
from pathfinder.models.user import User
from pathfinder.schemas.user import (
    AuthResponse,
    TokenValidationResponse,
    UserLogin,
    UserRegister,
    UserSummary,
)

logger = structlog.get_logger(__name__)
router = APIRouter()

@router.post("/auth/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(payload: UserRegister, db: Session = Depends(get_database)):
    """Create an account and sign the caller in"""

    existing_user = db.query(User).filter(User.email == payload.email).first()
    if existing_user:
        logger.warning("Registration failed: email already in use")
        raise ConflictError("Email already in use")

    user = User(
        name=payload.name,
        email=payload.email,
        password_hash=hash_password(payload.password),
        date_of_birth=payload.date_of_birth,
    )
    db.add(user)
    db.commit()
    db.refresh(user)

    logger.info("User registered", user_id=user.id)
    return AuthResponse(
        message="User registered successfully",
        token=create_access_token(user.id, user.email),
        user=UserSummary.model_validate(user),
    )

@router.post("/auth/login", response_model=AuthResponse)
async def login(payload: UserLogin, db: Session = Depends(get_database)):
    """Exchange credentials for an access token"""

    user = db.query(User).filter(User.email == payload.email).first()
    if not user or not verify_password(payload.password, user.password_hash):
        logger.warning("Login failed: invalid credentials")
        raise UnauthenticatedError("Invalid credentials")

    logger.info("User logged in", user_id=user.id)
    return AuthResponse(
        message="Login successful",
        token=create_access_token(user.id, user.email),
        user=UserSummary.model_validate(user),
    )

@router.get("/auth/validate-token", response_model=TokenValidationResponse)
async def validate_token(user: User = Depends(get_current_user)):
    """Confirm the bearer token still identifies a user"""
    return TokenValidationResponse(is_valid=True, user=UserSummary.model_validate(user))
