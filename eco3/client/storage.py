"""
Persistence for the client store.

Only the signed-in identity, its token and the preferences survive a
restart; loading/error flags, notifications and realtime data do not.
"""
import json
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import ValidationError

from ..logging_config import get_logger
from .state import AppState, AuthState, Preferences

STORAGE_KEY = "eco3-store"

logger = get_logger("client")


class MemoryStorage:
    """Key/value string storage kept in process memory."""

    def __init__(self):
        self._items: Dict[str, str] = {}

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class JsonFileStorage:
    """Key/value string storage backed by a JSON file on disk."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except ValueError:
            logger.warning("Ignoring unreadable store file", path=str(self.path))
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self, items: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(items, indent=2), encoding="utf-8")
        tmp.replace(self.path)

    def get_item(self, key: str) -> Optional[str]:
        return self._read().get(key)

    def set_item(self, key: str, value: str) -> None:
        items = self._read()
        items[key] = value
        self._write(items)

    def remove_item(self, key: str) -> None:
        items = self._read()
        if items.pop(key, None) is not None:
            self._write(items)


def partialize(state: AppState) -> str:
    """Serialize the persisted slice of ``state``."""
    auth = state.auth
    return json.dumps({
        "auth": {
            "current_user": auth.current_user.model_dump() if auth.current_user else None,
            "auth_token": auth.auth_token,
            "is_authenticated": auth.is_authenticated,
        },
        "preferences": state.preferences.model_dump(),
    })


def rehydrate(raw: Optional[str]) -> AppState:
    """Rebuild the initial state from a persisted slice; anything else starts fresh."""
    if not raw:
        return AppState()
    try:
        data = json.loads(raw)
        auth = AuthState(**data.get("auth", {}))
        preferences = Preferences(**data.get("preferences", {}))
    except (ValueError, TypeError, AttributeError, ValidationError) as e:
        logger.warning("Discarding unreadable persisted state", error_message=str(e))
        return AppState()
    return AppState(auth=auth, preferences=preferences)
