"""
Authentication routes for registration, login and token verification.
"""
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.orm import Session

from ..auth import create_access_token, get_required_user, verify_password
from ..config import get_settings
from ..database import get_db
from ..limiter import limiter
from ..logging_config import auth_logger
from ..models.user import User
from ..responses import ApiException, bad_request
from ..schemas.auth import AuthResponse, UserCreate, UserLogin
from .users import create_user, user_to_dict

settings = get_settings()

router = APIRouter(prefix="/api/auth", tags=["auth"])


def auth_payload(user: User) -> dict:
    return AuthResponse(
        user=user_to_dict(user),
        auth_token=create_access_token(user.id, user.email),
    ).model_dump()


@router.post("/register", status_code=status.HTTP_201_CREATED)
@limiter.limit(settings.register_rate_limit)
def register(request: Request, user_data: UserCreate, db: Session = Depends(get_db)):
    """Register a new account and log it in immediately."""
    user = create_user(db, user_data)
    auth_logger.info("User registered", user_id=user.id)
    return auth_payload(user)


@router.post("/login")
@limiter.limit(settings.login_rate_limit)
def login(request: Request, credentials: UserLogin, db: Session = Depends(get_db)):
    """Login with JSON body (email/password_hash)."""
    if not credentials.email or not credentials.password_hash:
        bad_request("Email and password are required", "MISSING_REQUIRED_FIELDS")

    user = db.query(User).filter(User.email == credentials.email.strip().lower()).first()
    if not user or not verify_password(credentials.password_hash, user.password_hash):
        auth_logger.info("Login rejected", reason="invalid_credentials")
        raise ApiException(401, "Invalid email or password", "INVALID_CREDENTIALS")

    auth_logger.info("User logged in", user_id=user.id)
    return auth_payload(user)


@router.get("/verify")
def verify(current_user: User = Depends(get_required_user)):
    """Return the user a bearer token belongs to."""
    return {"user": user_to_dict(current_user)}
