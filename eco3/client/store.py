"""
Client global store.

``AppStore`` owns the application state, the persisted slice and the
realtime channel. State only changes through ``dispatch``; the async
actions talk to the API once, with no retry, and commit either the result
or a fixed failure message.

Build the store inside a running event loop: the realtime channel is
opened by the constructor.
"""
from typing import Any, Callable, List, Optional

import httpx
from pydantic import ValidationError

from ..logging_config import get_logger
from .actions import (
    AllNotificationsRead,
    AuthCheckSkipped,
    AuthFailed,
    AuthStarted,
    AuthSucceeded,
    ErrorRaised,
    ImpactMetricsReceived,
    LeaderboardReceived,
    LoggedOut,
    NotificationAdded,
    NotificationRead,
    PreferencesSet,
    ProfileUpdated,
    SessionVerified,
    reduce,
)
from .api import ApiClient
from .realtime import IMPACT_METRIC_UPDATE, LEADERBOARD_UPDATE, SSEChannel
from .state import AppState, Notification, Preferences, User
from .storage import STORAGE_KEY, MemoryStorage, partialize, rehydrate

logger = get_logger("client")

Listener = Callable[[AppState], None]

# Anything one failed request can raise on the way to a commit
REQUEST_ERRORS = (httpx.HTTPError, ValueError, KeyError, TypeError, ValidationError)


class AppStore:
    def __init__(
        self,
        base_url: Optional[str] = None,
        storage=None,
        channel=None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.api = ApiClient(base_url=base_url, client=http_client)
        self.storage = storage if storage is not None else MemoryStorage()
        self._state = rehydrate(self.storage.get_item(STORAGE_KEY))
        self._listeners: List[Listener] = []

        self.channel = channel if channel is not None else SSEChannel(self.api.url("/api/events/stream"))
        self.channel.subscribe(LEADERBOARD_UPDATE, self._on_leaderboard)
        self.channel.subscribe(IMPACT_METRIC_UPDATE, self._on_impact_metrics)
        self.channel.open()

    # ------------------------------------------------------------
    # State
    # ------------------------------------------------------------

    @property
    def state(self) -> AppState:
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with the new state after every dispatch. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def dispatch(self, action) -> AppState:
        self._state = reduce(self._state, action)
        self.storage.set_item(STORAGE_KEY, partialize(self._state))
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    # ------------------------------------------------------------
    # Realtime
    # ------------------------------------------------------------

    def _on_leaderboard(self, data: Any) -> None:
        entries = data.get("leaderboard") if isinstance(data, dict) else data
        if not isinstance(entries, list):
            logger.warning("Ignoring malformed leaderboard update", payload_type=type(data).__name__)
            return
        entries = [entry for entry in entries if isinstance(entry, dict)]
        logger.info("Leaderboard update received", entries=len(entries))
        self.dispatch(LeaderboardReceived(leaderboard=entries))

    def _on_impact_metrics(self, data: Any) -> None:
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed impact metrics update", payload_type=type(data).__name__)
            return
        logger.info("Impact metrics update received", user_id=data.get("user_id"))
        self.dispatch(ImpactMetricsReceived(metrics=dict(data)))

    # ------------------------------------------------------------
    # Auth actions
    # ------------------------------------------------------------

    async def login(self, email: str, password: str) -> bool:
        self.dispatch(AuthStarted())
        try:
            payload = await self.api.login(email, password)
            user = User(**payload["user"])
            token = payload["auth_token"]
        except REQUEST_ERRORS as e:
            logger.warning("Login failed", error_message=str(e))
            self.dispatch(AuthFailed("Login failed"))
            return False
        self.dispatch(AuthSucceeded(user=user, token=token))
        return True

    async def register(self, email: str, password: str, name: Optional[str] = None) -> bool:
        """Create an account; the username is the local part of the email."""
        self.dispatch(AuthStarted())
        try:
            payload = await self.api.register(email.split("@", 1)[0], email, password, full_name=name)
            user = User(**payload["user"])
            token = payload["auth_token"]
        except REQUEST_ERRORS as e:
            logger.warning("Registration failed", error_message=str(e))
            self.dispatch(AuthFailed("Registration failed"))
            return False
        self.dispatch(AuthSucceeded(user=user, token=token))
        return True

    def logout(self) -> None:
        self.dispatch(LoggedOut())

    async def check_auth(self) -> bool:
        """Re-validate the stored token against the server."""
        token = self._state.auth.auth_token
        if not token:
            self.dispatch(AuthCheckSkipped())
            return False
        try:
            payload = await self.api.verify(token)
            user = User(**payload["user"])
        except REQUEST_ERRORS as e:
            logger.warning("Token check failed", error_message=str(e))
            self.dispatch(AuthFailed("Token invalid"))
            return False
        self.dispatch(SessionVerified(user=user))
        return True

    # ------------------------------------------------------------
    # Account actions
    # ------------------------------------------------------------

    async def update_profile(self, **fields) -> bool:
        auth = self._state.auth
        if not auth.auth_token or auth.current_user is None:
            self.dispatch(ErrorRaised("Profile update failed"))
            return False
        try:
            payload = await self.api.update_user(auth.auth_token, auth.current_user.id, fields)
            user = User(**payload)
        except REQUEST_ERRORS as e:
            logger.warning("Profile update failed", error_message=str(e))
            self.dispatch(ErrorRaised("Profile update failed"))
            return False
        self.dispatch(ProfileUpdated(user=user))
        return True

    async def delete_account(self) -> bool:
        auth = self._state.auth
        if not auth.auth_token or auth.current_user is None:
            self.dispatch(ErrorRaised("Account deletion failed"))
            return False
        try:
            await self.api.delete_user(auth.auth_token, auth.current_user.id)
        except httpx.HTTPError as e:
            logger.warning("Account deletion failed", error_message=str(e))
            self.dispatch(ErrorRaised("Account deletion failed"))
            return False
        self.dispatch(LoggedOut())
        return True

    # ------------------------------------------------------------
    # Preferences and notifications
    # ------------------------------------------------------------

    def set_preferences(self, preferences: Optional[Preferences] = None, **changes) -> None:
        """Replace preferences, or update the named fields of the current ones."""
        if preferences is None:
            preferences = Preferences(**{**self._state.preferences.model_dump(), **changes})
        self.dispatch(PreferencesSet(preferences=preferences))

    def add_notification(self, notification: Notification) -> None:
        self.dispatch(NotificationAdded(notification=notification))

    def mark_notification_read(self, notification_id: str) -> None:
        self.dispatch(NotificationRead(notification_id=notification_id))

    def mark_all_notifications_read(self) -> None:
        self.dispatch(AllNotificationsRead())

    async def fetch_notifications(self) -> bool:
        """Merge the server's notification feed into the local list."""
        token = self._state.auth.auth_token
        if not token:
            self.dispatch(ErrorRaised("Failed to load notifications"))
            return False
        try:
            items = await self.api.notifications(token)
            notifications = [
                Notification(
                    id=item["id"],
                    message=item["content"],
                    read=item.get("is_read", False),
                    created_at=item["created_at"],
                )
                for item in items
            ]
        except REQUEST_ERRORS as e:
            logger.warning("Loading notifications failed", error_message=str(e))
            self.dispatch(ErrorRaised("Failed to load notifications"))
            return False
        for notification in notifications:
            self.add_notification(notification)
        return True

    # ------------------------------------------------------------
    # Teardown
    # ------------------------------------------------------------

    async def close(self) -> None:
        try:
            await self.channel.close()
        finally:
            await self.api.aclose()

    async def __aenter__(self) -> "AppStore":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()
