"""User preferences: the OpenRouter API key and the preferred model."""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Optional

from unslop.db.kv import KeyValueStore

logger = logging.getLogger(__name__)

STORE_NAME = "preferences"
API_KEY_KEY = "unslop_user_openrouter_api_key"
MODEL_KEY = "unslop_ai_model"

API_KEY_PREFIX = "sk-or-v1-"
MASK = "•"


class PreferencesError(Exception):
    """Raised when a preference cannot be saved or cleared."""

    pass


def validate_api_key(api_key: str) -> bool:
    """Basic format check for OpenRouter keys."""
    return len(api_key.strip()) > 0 and api_key.startswith(API_KEY_PREFIX)


def mask_api_key(api_key: str) -> str:
    """Show the first 12 and last 4 characters only."""
    if len(api_key) < 20:
        return MASK * 12
    return f"{api_key[:12]}{MASK * 8}{api_key[-4:]}"


class PreferencesStore:
    """Durable key-value storage for the credential and model preference."""

    def __init__(self, db_path: Path) -> None:
        self._store = KeyValueStore(db_path, STORE_NAME)

    def _get(self, key: str) -> Optional[str]:
        try:
            value = self._store.get(key)
        except (sqlite3.Error, ValueError) as e:
            logger.error(f"Failed to read preference {key}: {e}")
            return None
        return value if isinstance(value, str) else None

    def _put(self, key: str, value: str, what: str) -> None:
        try:
            self._store.put(key, value)
        except sqlite3.Error as e:
            logger.error(f"Failed to save {what}: {e}")
            raise PreferencesError(f"Failed to save {what} to local storage") from e

    def _delete(self, key: str, what: str) -> None:
        try:
            self._store.delete(key)
        except sqlite3.Error as e:
            logger.error(f"Failed to clear {what}: {e}")
            raise PreferencesError(f"Failed to clear {what} from local storage") from e

    def save_api_key(self, api_key: str) -> None:
        self._put(API_KEY_KEY, api_key, "API key")

    def get_api_key(self) -> Optional[str]:
        return self._get(API_KEY_KEY)

    def clear_api_key(self) -> None:
        self._delete(API_KEY_KEY, "API key")

    def has_api_key(self) -> bool:
        return self.get_api_key() is not None

    def save_model(self, model: str) -> None:
        self._put(MODEL_KEY, model, "model preference")

    def get_model(self) -> Optional[str]:
        return self._get(MODEL_KEY)

    def clear_model(self) -> None:
        self._delete(MODEL_KEY, "model preference")

    def close(self) -> None:
        self._store.close()
