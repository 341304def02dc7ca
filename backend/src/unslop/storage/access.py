"""Directory access management.

Owns the one directory grant the application works against: asking the user
for a directory, restoring the grant saved by a previous session, and
dropping it when the user starts a new project.
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Callable, Optional

from unslop.project_state.service import ProjectStateService
from unslop.storage.handle_store import DirectoryHandleStore
from unslop.storage.handles import READWRITE, DirectoryHandle, PermissionState

logger = logging.getLogger(__name__)


class PickerCancelled(Exception):
    """Raised by a directory picker when the user dismisses it."""

    pass


# Called with the requested mode; returns the chosen directory or None if
# the user cancelled.
DirectoryPicker = Callable[[str], Optional[Path]]


class DirectoryAccessManager:
    """Holds the live directory grant shared by the file reader and writer.

    Platform support is decided once at construction. When unsupported,
    every operation answers False/None instead of raising.
    """

    def __init__(
        self,
        handle_store: DirectoryHandleStore,
        project_state: ProjectStateService,
        picker: Optional[DirectoryPicker] = None,
        supported: bool = True,
        base_path: Optional[Path] = None,
    ) -> None:
        """Create the manager without touching the saved grant.

        Args:
            handle_store: Durable store for the grant.
            project_state: Completion-state index, cleared by clear_access().
            picker: Default picker used by request_access().
            supported: Whether directory access is available at all.
            base_path: Directories outside this path are never granted.
        """
        self._handle_store = handle_store
        self._project_state = project_state
        self._picker = picker
        self._supported = supported
        self._base_path = base_path
        self._handle: Optional[DirectoryHandle] = None
        self._initialized = False

    @property
    def initialized(self) -> bool:
        """True once initialize() has finished restoring the saved grant."""
        return self._initialized

    def is_supported(self) -> bool:
        return self._supported

    def initialize(self) -> bool:
        """Restore the grant saved by a previous session.

        The saved directory is adopted if it is still accessible. Otherwise
        permission is requested again for the same directory, without a
        picker. Any failure leaves the manager without access.

        Returns:
            True if a grant was restored.
        """
        try:
            if not self._supported:
                return False
            return self._restore()
        finally:
            self._initialized = True

    def _restore(self) -> bool:
        try:
            handle = self._handle_store.get(base_path=self._base_path)
        except sqlite3.Error as e:
            logger.warning(f"Failed to restore directory handle: {e}")
            return False

        if handle is None:
            return False

        if handle.query_permission(READWRITE) is PermissionState.GRANTED:
            self._handle = handle
        elif handle.request_permission(READWRITE) is PermissionState.GRANTED:
            self._handle = handle
        else:
            logger.info(f"Saved directory {handle.path} is no longer accessible")
            return False

        logger.info(f"Restored directory access to {handle.path}")
        return True

    def request_access(self, picker: Optional[DirectoryPicker] = None) -> bool:
        """Ask the user for a directory with read-write access.

        Args:
            picker: Picker for this request; defaults to the one given at
                construction.

        Returns:
            True if access was granted. Failures are logged and reported
            as False.
        """
        if not self._supported:
            logger.warning("Directory access is not supported")
            return False

        picker = picker or self._picker
        if picker is None:
            logger.warning("No directory picker available")
            return False

        try:
            path = picker(READWRITE)
        except PickerCancelled:
            logger.info("Directory picker cancelled")
            return False
        except Exception as e:
            logger.error(f"Failed to get directory access: {e}")
            return False

        if path is None:
            logger.info("Directory picker cancelled")
            return False

        try:
            handle = DirectoryHandle(Path(path).resolve(), base_path=self._base_path)
        except (OSError, RuntimeError) as e:
            logger.error(f"Failed to get directory access: {e}")
            return False

        if handle.query_permission(READWRITE) is not PermissionState.GRANTED:
            logger.error(f"Failed to get directory access: permission denied for {path}")
            return False

        self._handle = handle

        try:
            self._handle_store.put(handle)
        except sqlite3.Error as e:
            logger.warning(f"Failed to save directory handle: {e}")

        logger.info(f"Directory access granted for {handle.path}")
        return True

    def has_access(self) -> bool:
        """True iff a grant is held in memory. Permission is not re-checked."""
        return self._handle is not None

    def get_handle(self) -> Optional[DirectoryHandle]:
        return self._handle

    def clear_access(self) -> None:
        """Forget the grant and reset the completion state (New Project)."""
        self._handle = None

        try:
            self._handle_store.delete()
        except sqlite3.Error as e:
            logger.warning(f"Failed to clear directory handle: {e}")

        self._project_state.clear_state()

    def close(self) -> None:
        self._handle_store.close()
