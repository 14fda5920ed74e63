from .auth import router as auth_router
from .users import router as users_router
from .posts import router as posts_router
from .comments import router as comments_router
from .likes import router as likes_router
from .notifications import router as notifications_router
from .events import router as events_router
from .health import router as health_router
from .spa import router as spa_router

__all__ = [
    "auth_router",
    "users_router",
    "posts_router",
    "comments_router",
    "likes_router",
    "notifications_router",
    "events_router",
    "health_router",
    "spa_router",
]
