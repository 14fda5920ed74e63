"""
Notification feed for the current user.

Notifications are not stored. They are derived from comments and likes
that other users left on the caller's posts, so read state is tracked by
the client only and ``is_read`` is always false here.
"""
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from ..auth import get_required_user
from ..database import get_db
from ..models import Comment, Like, Post, User
from ..responses import isoformat

router = APIRouter(prefix="/api/notifications", tags=["notifications"])


@router.get("")
def get_notifications(
    limit: int = Query(20, gt=0, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_required_user),
):
    comments = (
        db.query(Comment, User.username, Post.title)
        .join(Post, Comment.post_id == Post.id)
        .join(User, Comment.user_id == User.id)
        .filter(Post.user_id == current_user.id, Comment.user_id != current_user.id)
        .order_by(Comment.created_at.desc())
        .limit(limit)
        .all()
    )
    likes = (
        db.query(Like, User.username, Post.title)
        .join(Post, Like.post_id == Post.id)
        .join(User, Like.user_id == User.id)
        .filter(Post.user_id == current_user.id, Like.user_id != current_user.id)
        .order_by(Like.created_at.desc())
        .limit(limit)
        .all()
    )

    items = [
        {
            "id": f"comment-{comment.id}",
            "content": f'{username} commented on "{title}"',
            "is_read": False,
            "created_at": isoformat(comment.created_at),
        }
        for comment, username, title in comments
    ] + [
        {
            "id": f"like-{like.user_id}-{like.post_id}",
            "content": f'{username} liked "{title}"',
            "is_read": False,
            "created_at": isoformat(like.created_at),
        }
        for like, username, title in likes
    ]
    items.sort(key=lambda item: item["created_at"], reverse=True)

    return items[:limit]
