"""
Like routes. A like is identified by its (user_id, post_id) pair.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.like import Like
from ..responses import bad_request, isoformat, not_found
from ..schemas.common import IdFilter, IdPath
from ..schemas.likes import LikeCreate, LikeSortField
from .comments import require_post
from .events import emit_impact_update, emit_leaderboard_update
from .posts import require_user

router = APIRouter(prefix="/api/likes", tags=["likes"])


def like_to_dict(like: Like) -> dict:
    return {
        "user_id": str(like.user_id),
        "post_id": str(like.post_id),
        "created_at": isoformat(like.created_at),
    }


def find_like(db: Session, user_id: int, post_id: int) -> Optional[Like]:
    return db.query(Like).filter(Like.user_id == user_id, Like.post_id == post_id).first()


@router.get("")
def get_likes(
    user_id: IdFilter = None,
    post_id: IdFilter = None,
    limit: int = Query(10, gt=0),
    offset: int = Query(0, ge=0),
    sort_by: LikeSortField = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    q = db.query(Like)

    if user_id is not None:
        q = q.filter(Like.user_id == user_id)
    if post_id is not None:
        q = q.filter(Like.post_id == post_id)

    column = getattr(Like, sort_by)
    q = q.order_by(column.asc() if sort_order == "asc" else column.desc())

    return [like_to_dict(like) for like in q.offset(offset).limit(limit).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_like(like_data: LikeCreate, db: Session = Depends(get_db)):
    """Like a post. A user can like a given post at most once."""
    require_user(db, like_data.user_id)
    require_post(db, like_data.post_id)

    if find_like(db, like_data.user_id, like_data.post_id):
        bad_request("Like already exists", "LIKE_ALREADY_EXISTS")

    like = Like(user_id=like_data.user_id, post_id=like_data.post_id)
    db.add(like)
    db.commit()
    db.refresh(like)

    emit_impact_update(db, like.user_id)
    emit_leaderboard_update(db)
    return like_to_dict(like)


@router.delete("/{user_id}/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_like(user_id: IdPath, post_id: IdPath, db: Session = Depends(get_db)):
    like = find_like(db, user_id, post_id)
    if not like:
        not_found("Like not found", "LIKE_NOT_FOUND")

    db.delete(like)
    db.commit()

    emit_leaderboard_update(db)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
