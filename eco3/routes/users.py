"""
User routes: search, create, read, partial update and delete.
"""
import random
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..auth import get_password_hash, get_required_user
from ..database import get_db
from ..logging_config import api_logger
from ..models.user import User
from ..patch import Patch
from ..responses import bad_request, isoformat, not_found
from ..schemas.auth import UserCreate
from ..schemas.common import IdPath, blank_to_none
from ..schemas.users import UserSortField, UserUpdate

router = APIRouter(prefix="/api/users", tags=["users"])


def user_to_dict(user: User) -> dict:
    """Public user fields. The password hash is never included."""
    return {
        "id": str(user.id),
        "username": user.username,
        "email": user.email,
        "full_name": user.full_name,
        "profile_image_url": user.profile_image_url,
        "created_at": isoformat(user.created_at),
    }


def default_profile_image() -> str:
    return f"https://picsum.photos/200/300?random={random.randint(0, 999)}"


def create_user(db: Session, user_data: UserCreate) -> User:
    """Insert a user after checking that email and username are free."""
    existing = db.query(User.id).filter(
        or_(User.email == user_data.email, User.username == user_data.username)
    ).first()
    if existing:
        bad_request("User with this email or username already exists", "USER_ALREADY_EXISTS")

    user = User(
        username=user_data.username,
        email=user_data.email,
        password_hash=get_password_hash(user_data.password_hash),
        full_name=blank_to_none(user_data.full_name),
        profile_image_url=user_data.profile_image_url or default_profile_image(),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    api_logger.info("User created", user_id=user.id)
    return user


def get_user_or_404(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        not_found("User not found", "USER_NOT_FOUND")
    return user


@router.get("")
def list_users(
    query: Optional[str] = None,
    limit: int = Query(10, gt=0),
    offset: int = Query(0, ge=0),
    sort_by: UserSortField = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    """List users, optionally filtered by a substring of username, email or full name."""
    q = db.query(User)

    if query and query.strip():
        pattern = f"%{query.strip()}%"
        q = q.filter(or_(
            User.username.ilike(pattern),
            User.email.ilike(pattern),
            User.full_name.ilike(pattern),
        ))

    column = getattr(User, sort_by)
    q = q.order_by(column.asc() if sort_order == "asc" else column.desc())

    return [user_to_dict(u) for u in q.offset(offset).limit(limit).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_user_route(user_data: UserCreate, db: Session = Depends(get_db)):
    """Create a user account without issuing a token."""
    return user_to_dict(create_user(db, user_data))


@router.get("/{user_id}")
def get_user(user_id: IdPath, db: Session = Depends(get_db)):
    return user_to_dict(get_user_or_404(db, user_id))


@router.put("/{user_id}")
def update_user(
    user_id: IdPath,
    user_update: UserUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Update only the fields present in the body; null clears full_name."""
    get_user_or_404(db, user_id)

    patch = Patch.from_model(user_update, transforms={
        "full_name": blank_to_none,
        "password_hash": get_password_hash,
    })
    if patch.is_empty:
        bad_request("No fields to update", "NO_UPDATE_FIELDS")

    taken = []
    if "username" in patch:
        taken.append(User.username == patch.get("username"))
    if "email" in patch:
        taken.append(User.email == patch.get("email"))
    if taken and db.query(User.id).filter(or_(*taken), User.id != user_id).first():
        bad_request("User with this email or username already exists", "USER_ALREADY_EXISTS")

    patch.apply(db, User, User.id == user_id)
    db.commit()

    user = get_user_or_404(db, user_id)
    db.refresh(user)
    api_logger.info("User updated", user_id=user_id, fields=sorted(patch.values), by=current_user.id)
    return user_to_dict(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: IdPath,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    """Delete a user with their posts, comments and likes."""
    user = get_user_or_404(db, user_id)
    db.delete(user)
    db.commit()
    api_logger.info("User deleted", user_id=user_id, by=current_user.id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
