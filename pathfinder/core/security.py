"""
Password hashing, access tokens and device API keys
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

from jose import JWTError, jwt
from passlib.context import CryptContext

from pathfinder.core.config import settings
from pathfinder.core.errors import UnauthenticatedError

pwd_context = CryptContext(
    schemes=["pbkdf2_sha256"],
    deprecated="auto",
)

API_KEY_BYTES = 32


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed: str) -> bool:
    return pwd_context.verify(plain_password, hashed)


def create_access_token(user_id: int, email: str, expires_delta: timedelta = None) -> str:
    """Create a signed access token identifying a user"""
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.jwt_expire_minutes)
    to_encode = {
        "sub": str(user_id),
        "email": email,
        "exp": datetime.now(timezone.utc) + expires_delta,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Dict[str, Any]:
    """
    Verify signature and expiry of an access token and return its payload.

    Raises:
        UnauthenticatedError: if the token is malformed, forged, expired or
            carries no usable subject.
    """
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    except JWTError as exc:
        raise UnauthenticatedError("Invalid or expired token.") from exc

    subject = payload.get("sub")
    if subject is None or not str(subject).isdigit():
        raise UnauthenticatedError("Invalid or expired token.")
    return payload


def generate_api_key() -> str:
    """32 random bytes, hex encoded"""
    return secrets.token_hex(API_KEY_BYTES)
