"""
Authentication utilities for JWT tokens and password hashing.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.orm import Session

from .database import get_db
from .models.user import User
from .config import get_settings
from .logging_config import auth_logger
from .responses import ApiException, unauthorized

settings = get_settings()

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login", auto_error=False)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its salted hash."""
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except ValueError:
        # Stored value is not a recognizable hash
        return False


def get_password_hash(password: str) -> str:
    """Hash a password for storage."""
    return pwd_context.hash(password)


def create_access_token(user_id: int, email: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed bearer token for a user."""
    if expires_delta is None:
        expires_delta = timedelta(days=settings.access_token_expire_days)
    expire = datetime.now(timezone.utc) + expires_delta
    to_encode = {
        "sub": str(user_id),  # JWT sub claim must be a string
        "email": email,
        "exp": expire,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.algorithm)


def decode_token(token: str) -> dict:
    """Verify signature and expiry; raise ApiException(403) otherwise."""
    try:
        payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        auth_logger.info("Rejected expired token")
        raise ApiException(403, "Invalid or expired token", "AUTH_TOKEN_INVALID")
    except JWTError as e:
        auth_logger.info("Rejected invalid token", reason=str(e))
        raise ApiException(403, "Invalid or expired token", "AUTH_TOKEN_INVALID")

    try:
        int(payload.get("sub"))
    except (TypeError, ValueError):
        raise ApiException(403, "Invalid or expired token", "AUTH_TOKEN_INVALID")
    return payload


def get_required_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a user.

    Missing token -> 401 AUTH_TOKEN_MISSING, bad signature or expired -> 403
    AUTH_TOKEN_INVALID, user deleted since issue -> 401 AUTH_USER_NOT_FOUND.
    """
    if not token:
        unauthorized("Access token required", "AUTH_TOKEN_MISSING")

    payload = decode_token(token)
    user = db.query(User).filter(User.id == int(payload["sub"])).first()
    if user is None:
        unauthorized("Invalid token - user not found", "AUTH_USER_NOT_FOUND")
    return user
