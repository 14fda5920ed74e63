"""
eco3 client store: state, actions, persistence and realtime updates.
"""
from .api import ApiClient
from .realtime import SSEChannel
from .state import AppState, AuthState, Notification, Preferences, User
from .storage import JsonFileStorage, MemoryStorage, STORAGE_KEY
from .store import AppStore

__all__ = [
    "ApiClient",
    "AppState",
    "AppStore",
    "AuthState",
    "JsonFileStorage",
    "MemoryStorage",
    "Notification",
    "Preferences",
    "SSEChannel",
    "STORAGE_KEY",
    "User",
]
