"""
Comment routes.
"""
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.comment import Comment
from ..models.post import Post
from ..patch import Patch
from ..responses import bad_request, isoformat, not_found
from ..schemas.comments import CommentCreate, CommentSortField, CommentUpdate
from ..schemas.common import IdFilter, IdPath
from .events import emit_impact_update
from .posts import require_user

router = APIRouter(prefix="/api/comments", tags=["comments"])


def comment_to_dict(comment: Comment) -> dict:
    return {
        "id": str(comment.id),
        "user_id": str(comment.user_id),
        "post_id": str(comment.post_id),
        "content": comment.content,
        "created_at": isoformat(comment.created_at),
    }


def require_post(db: Session, post_id: int):
    if not db.query(Post.id).filter(Post.id == post_id).first():
        bad_request("Post not found", "POST_NOT_FOUND")


def get_comment_or_404(db: Session, comment_id: int) -> Comment:
    comment = db.query(Comment).filter(Comment.id == comment_id).first()
    if not comment:
        not_found("Comment not found", "COMMENT_NOT_FOUND")
    return comment


@router.get("")
def get_comments(
    query: Optional[str] = None,
    user_id: IdFilter = None,
    post_id: IdFilter = None,
    limit: int = Query(10, gt=0),
    offset: int = Query(0, ge=0),
    sort_by: CommentSortField = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    q = db.query(Comment)

    if query and query.strip():
        q = q.filter(Comment.content.ilike(f"%{query.strip()}%"))
    if user_id is not None:
        q = q.filter(Comment.user_id == user_id)
    if post_id is not None:
        q = q.filter(Comment.post_id == post_id)

    column = getattr(Comment, sort_by)
    q = q.order_by(column.asc() if sort_order == "asc" else column.desc())

    return [comment_to_dict(c) for c in q.offset(offset).limit(limit).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_comment(comment_data: CommentCreate, db: Session = Depends(get_db)):
    require_user(db, comment_data.user_id)
    require_post(db, comment_data.post_id)

    comment = Comment(
        user_id=comment_data.user_id,
        post_id=comment_data.post_id,
        content=comment_data.content,
    )
    db.add(comment)
    db.commit()
    db.refresh(comment)

    emit_impact_update(db, comment.user_id)
    return comment_to_dict(comment)


@router.get("/{comment_id}")
def get_comment(comment_id: IdPath, db: Session = Depends(get_db)):
    return comment_to_dict(get_comment_or_404(db, comment_id))


@router.put("/{comment_id}")
def update_comment(comment_id: IdPath, comment_update: CommentUpdate, db: Session = Depends(get_db)):
    get_comment_or_404(db, comment_id)

    patch = Patch.from_model(comment_update)
    if patch.is_empty:
        bad_request("No fields to update", "NO_UPDATE_FIELDS")
    if "user_id" in patch:
        require_user(db, patch.get("user_id"))
    if "post_id" in patch:
        require_post(db, patch.get("post_id"))

    patch.apply(db, Comment, Comment.id == comment_id)
    db.commit()

    comment = get_comment_or_404(db, comment_id)
    db.refresh(comment)
    return comment_to_dict(comment)


@router.delete("/{comment_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_comment(comment_id: IdPath, db: Session = Depends(get_db)):
    comment = get_comment_or_404(db, comment_id)
    db.delete(comment)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
