from .auth import UserCreate, UserLogin, AuthResponse
from .users import UserUpdate
from .posts import PostCreate, PostUpdate
from .comments import CommentCreate, CommentUpdate
from .likes import LikeCreate

__all__ = [
    "UserCreate", "UserLogin", "AuthResponse",
    "UserUpdate",
    "PostCreate", "PostUpdate",
    "CommentCreate", "CommentUpdate",
    "LikeCreate",
]
