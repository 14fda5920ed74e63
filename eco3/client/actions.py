"""
Store actions and the reducer that applies them.

``reduce`` is the only code that produces a new AppState. It is pure: no
I/O, no clock reads beyond what an action carries.
"""
from dataclasses import dataclass
from typing import Any, Dict, List

from .state import AppState, AuthState, Notification, Preferences, User


@dataclass(frozen=True)
class AuthStarted:
    pass


@dataclass(frozen=True)
class AuthSucceeded:
    user: User
    token: str


@dataclass(frozen=True)
class AuthFailed:
    """Any failed login, registration or token check. Clears the session."""
    message: str


@dataclass(frozen=True)
class SessionVerified:
    user: User


@dataclass(frozen=True)
class AuthCheckSkipped:
    """No stored token: loading is over and nobody is signed in."""


@dataclass(frozen=True)
class ProfileUpdated:
    user: User


@dataclass(frozen=True)
class ErrorRaised:
    """Failure of a non-auth action; session is left as is."""
    message: str


@dataclass(frozen=True)
class LoggedOut:
    pass


@dataclass(frozen=True)
class PreferencesSet:
    preferences: Preferences


@dataclass(frozen=True)
class NotificationAdded:
    notification: Notification


@dataclass(frozen=True)
class NotificationRead:
    notification_id: str


@dataclass(frozen=True)
class AllNotificationsRead:
    pass


@dataclass(frozen=True)
class LeaderboardReceived:
    leaderboard: List[Dict[str, Any]]


@dataclass(frozen=True)
class ImpactMetricsReceived:
    metrics: Dict[str, Any]


SIGNED_OUT = AuthState(is_loading=False)


def _auth(state: AppState, **changes) -> AppState:
    return state.model_copy(update={"auth": state.auth.model_copy(update=changes)})


def _notifications(state: AppState, notifications) -> AppState:
    return state.model_copy(update={
        "notifications": state.notifications.model_copy(update={"notifications": tuple(notifications)}),
    })


def reduce(state: AppState, action) -> AppState:
    """Return the state that results from applying ``action`` to ``state``."""
    if isinstance(action, AuthStarted):
        return _auth(state, is_loading=True, error_message=None)

    if isinstance(action, AuthSucceeded):
        return _auth(
            state,
            current_user=action.user,
            auth_token=action.token,
            is_authenticated=True,
            is_loading=False,
            error_message=None,
        )

    if isinstance(action, AuthFailed):
        return state.model_copy(update={
            "auth": SIGNED_OUT.model_copy(update={"error_message": action.message}),
        })

    if isinstance(action, SessionVerified):
        return _auth(
            state,
            current_user=action.user,
            is_authenticated=True,
            is_loading=False,
            error_message=None,
        )

    if isinstance(action, AuthCheckSkipped):
        return _auth(state, is_authenticated=False, is_loading=False)

    if isinstance(action, ProfileUpdated):
        return _auth(state, current_user=action.user, error_message=None)

    if isinstance(action, ErrorRaised):
        return _auth(state, is_loading=False, error_message=action.message)

    if isinstance(action, LoggedOut):
        return state.model_copy(update={"auth": SIGNED_OUT})

    if isinstance(action, PreferencesSet):
        return state.model_copy(update={"preferences": action.preferences})

    if isinstance(action, NotificationAdded):
        if state.notifications.find(action.notification.id) is not None:
            return state
        return _notifications(state, state.notifications.notifications + (action.notification,))

    if isinstance(action, NotificationRead):
        return _notifications(state, (
            n.model_copy(update={"read": True}) if n.id == action.notification_id else n
            for n in state.notifications.notifications
        ))

    if isinstance(action, AllNotificationsRead):
        return _notifications(state, (
            n.model_copy(update={"read": True}) for n in state.notifications.notifications
        ))

    if isinstance(action, LeaderboardReceived):
        return state.model_copy(update={
            "realtime": state.realtime.model_copy(update={"leaderboard": list(action.leaderboard)}),
        })

    if isinstance(action, ImpactMetricsReceived):
        user_id = str(action.metrics.get("user_id", ""))
        metrics = {**state.realtime.impact_metrics, user_id: dict(action.metrics)}
        return state.model_copy(update={
            "realtime": state.realtime.model_copy(update={"impact_metrics": metrics}),
        })

    raise TypeError(f"Unknown action: {action!r}")
