"""
User and authentication Pydantic schemas
"""

from pydantic import EmailStr, Field, WrapValidator
from typing import Annotated, Optional
from datetime import date

from pathfinder.schemas.base import ApiModel


def _email_as_sent(value, handler):
    handler(value)
    return value

# Checked like EmailStr, stored exactly as sent
EmailAsSent = Annotated[EmailStr, WrapValidator(_email_as_sent)]

class UserRegister(ApiModel):
    """Schema for registering a user"""
    name: str = Field(..., min_length=1, max_length=255, description="Display name")
    email: EmailAsSent = Field(..., description="Login email, unique")
    password: str = Field(..., min_length=1, description="Plain-text password")
    date_of_birth: date = Field(..., description="Date of birth")

class UserLogin(ApiModel):
    """Schema for logging in"""
    email: EmailAsSent
    password: str

class UserSummary(ApiModel):
    """Public identity of a user"""
    id: int
    name: str
    email: str

class ProfileResponse(UserSummary):
    """Schema for the caller's profile"""
    date_of_birth: date

class ProfileUpdate(ApiModel):
    """Schema for updating a profile"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[EmailAsSent] = None
    date_of_birth: Optional[date] = None

class AuthResponse(ApiModel):
    """Schema for register/login response"""
    message: str
    token: str
    user: UserSummary

class TokenValidationResponse(ApiModel):
    is_valid: bool
    user: UserSummary

class ProfileUpdateResponse(ApiModel):
    message: str
    user: ProfileResponse
