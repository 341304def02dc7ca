"""Durable storage for the granted directory handle."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from unslop.db.kv import KeyValueStore
from unslop.storage.handles import DirectoryHandle

logger = logging.getLogger(__name__)

STORE_NAME = "handles"
HANDLE_KEY = "fileSystemDirectoryHandle"


class DirectoryHandleStore:
    """Keeps the single directory handle record across sessions."""

    def __init__(self, db_path: Path) -> None:
        self._store = KeyValueStore(db_path, STORE_NAME)

    def get(
        self, key: str = HANDLE_KEY, base_path: Optional[Path] = None
    ) -> Optional[DirectoryHandle]:
        """Return the stored handle, or None if nothing usable is stored."""
        try:
            record = self._store.get(key)
        except ValueError as e:
            logger.warning(f"Ignoring unreadable directory handle record: {e}")
            return None
        if not record:
            return None
        try:
            return DirectoryHandle.from_record(record, base_path=base_path)
        except (KeyError, TypeError) as e:
            logger.warning(f"Ignoring malformed directory handle record: {e}")
            return None

    def put(self, handle: DirectoryHandle, key: str = HANDLE_KEY) -> None:
        self._store.put(key, handle.to_record())

    def delete(self, key: str = HANDLE_KEY) -> None:
        self._store.delete(key)

    def close(self) -> None:
        self._store.close()
