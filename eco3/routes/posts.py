"""
Posts routes for CRUD operations on shared posts.
"""
import random
from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy import or_
from sqlalchemy.orm import Session

from ..database import get_db
from ..models.post import Post
from ..models.user import User
from ..patch import Patch
from ..responses import bad_request, isoformat, not_found
from ..schemas.common import IdFilter, IdPath, blank_to_none
from ..schemas.posts import PostCreate, PostSortField, PostUpdate
from .events import emit_impact_update

router = APIRouter(prefix="/api/posts", tags=["posts"])


def post_to_dict(post: Post) -> dict:
    """Convert a Post model to a dictionary response."""
    return {
        "id": str(post.id),
        "user_id": str(post.user_id),
        "title": post.title,
        "content": post.content,
        "image_url": post.image_url,
        "created_at": isoformat(post.created_at),
    }


def require_user(db: Session, user_id: int):
    """Referenced user must exist; a missing reference is a bad request."""
    if not db.query(User.id).filter(User.id == user_id).first():
        bad_request("User not found", "USER_NOT_FOUND")


def get_post_or_404(db: Session, post_id: int) -> Post:
    post = db.query(Post).filter(Post.id == post_id).first()
    if not post:
        not_found("Post not found", "POST_NOT_FOUND")
    return post


@router.get("")
def get_posts(
    query: Optional[str] = None,
    user_id: IdFilter = None,
    limit: int = Query(10, gt=0),
    offset: int = Query(0, ge=0),
    sort_by: PostSortField = "created_at",
    sort_order: Literal["asc", "desc"] = "desc",
    db: Session = Depends(get_db),
):
    """Search posts by title or content, optionally for one user."""
    q = db.query(Post)

    if query and query.strip():
        pattern = f"%{query.strip()}%"
        q = q.filter(or_(Post.title.ilike(pattern), Post.content.ilike(pattern)))
    if user_id is not None:
        q = q.filter(Post.user_id == user_id)

    column = getattr(Post, sort_by)
    q = q.order_by(column.asc() if sort_order == "asc" else column.desc())

    return [post_to_dict(p) for p in q.offset(offset).limit(limit).all()]


@router.post("", status_code=status.HTTP_201_CREATED)
def create_post(post_data: PostCreate, db: Session = Depends(get_db)):
    """Create a new post for an existing user."""
    require_user(db, post_data.user_id)

    post = Post(
        user_id=post_data.user_id,
        title=post_data.title,
        content=blank_to_none(post_data.content),
        image_url=post_data.image_url or f"https://picsum.photos/800/600?random={random.randint(0, 999)}",
    )
    db.add(post)
    db.commit()
    db.refresh(post)

    emit_impact_update(db, post.user_id)
    return post_to_dict(post)


@router.get("/{post_id}")
def get_post(post_id: IdPath, db: Session = Depends(get_db)):
    """Get a single post by ID."""
    return post_to_dict(get_post_or_404(db, post_id))


@router.put("/{post_id}")
def update_post(post_id: IdPath, post_update: PostUpdate, db: Session = Depends(get_db)):
    """Update the supplied fields of a post; null clears content."""
    get_post_or_404(db, post_id)

    patch = Patch.from_model(post_update, transforms={"content": blank_to_none})
    if patch.is_empty:
        bad_request("No fields to update", "NO_UPDATE_FIELDS")
    if "user_id" in patch:
        require_user(db, patch.get("user_id"))

    patch.apply(db, Post, Post.id == post_id)
    db.commit()

    post = get_post_or_404(db, post_id)
    db.refresh(post)
    return post_to_dict(post)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(post_id: IdPath, db: Session = Depends(get_db)):
    """Delete a post together with its comments and likes."""
    post = get_post_or_404(db, post_id)
    db.delete(post)
    db.commit()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
