"""
Client state types.

Every type here is immutable; the store replaces state wholesale through
the reducer in ``actions.py``.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field


def _now() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


class User(BaseModel):
    id: str
    username: str
    email: str
    full_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: str

    class Config:
        frozen = True


class Preferences(BaseModel):
    theme: Literal["dark", "light"] = "light"
    unit_system: Literal["metric", "imperial"] = "metric"
    data_export_format: Literal["csv", "pdf"] = "csv"
    opt_out_data_sharing: bool = False

    class Config:
        frozen = True


class Notification(BaseModel):
    id: str
    message: str
    read: bool = False
    created_at: str = Field(default_factory=_now)

    class Config:
        frozen = True


class AuthState(BaseModel):
    current_user: Optional[User] = None
    auth_token: Optional[str] = None
    is_authenticated: bool = False
    is_loading: bool = True
    error_message: Optional[str] = None

    class Config:
        frozen = True


class NotificationsState(BaseModel):
    notifications: Tuple[Notification, ...] = ()

    class Config:
        frozen = True

    @property
    def unread_count(self) -> int:
        # Derived from the list on every read, never stored
        return sum(1 for n in self.notifications if not n.read)

    def find(self, notification_id: str) -> Optional[Notification]:
        return next((n for n in self.notifications if n.id == notification_id), None)


class RealtimeState(BaseModel):
    """Latest payloads pushed over the realtime channel."""
    leaderboard: List[Dict[str, Any]] = Field(default_factory=list)
    impact_metrics: Dict[str, Dict[str, Any]] = Field(default_factory=dict)  # keyed by user id

    class Config:
        frozen = True


class AppState(BaseModel):
    auth: AuthState = Field(default_factory=AuthState)
    preferences: Preferences = Field(default_factory=Preferences)
    notifications: NotificationsState = Field(default_factory=NotificationsState)
    realtime: RealtimeState = Field(default_factory=RealtimeState)

    class Config:
        frozen = True
