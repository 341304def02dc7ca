"""Project completion-state service.

Tracks which planning artifacts the user has produced. The files themselves
live in the user's directory; this index lives in its own local database so
the export page can check completion without scanning the directory.
"""

from __future__ import annotations

import copy
import logging
import sqlite3
from dataclasses import replace
from pathlib import Path
from typing import Callable, Optional

from unslop.db.kv import KeyValueStore
from unslop.project_state.models import ProjectState, SectionState, now_ms

logger = logging.getLogger(__name__)

STORE_NAME = "project-state"
STATE_KEY = "current-project"

Listener = Callable[[], None]


class ProjectStateService:
    """Persisted, observable completion state for the current project.

    Every mutator saves the whole record and then calls the registered
    listeners in registration order. A listener that raises stops the
    remaining listeners for that notification.
    """

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self._store: Optional[KeyValueStore] = None
        self._state: Optional[ProjectState] = None
        self._listeners: list[Listener] = []

    def load(self) -> None:
        """Open the store and load the saved state.

        A missing, unreadable or corrupt record leaves the service with the
        initial empty state.
        """
        try:
            self._store = KeyValueStore(self.db_path, STORE_NAME)
        except (sqlite3.Error, OSError) as e:
            logger.warning(f"Failed to open project state database: {e}")
            self._store = None
            self._state = ProjectState()
            return

        try:
            record = self._store.get(STATE_KEY)
            self._state = ProjectState.from_dict(record) if record else ProjectState()
        except (sqlite3.Error, AttributeError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load project state: {e}")
            self._state = ProjectState()

        self._notify_listeners()

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None

    def get_state(self) -> ProjectState:
        """Return a copy of the current state."""
        return copy.deepcopy(self._state) if self._state else ProjectState()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify_listeners(self) -> None:
        for listener in list(self._listeners):
            listener()

    def _current(self) -> ProjectState:
        if self._state is None:
            self._state = ProjectState()
        return self._state

    def _save_state(self) -> None:
        state = self._current()
        state.last_updated = now_ms()
        if self._store is not None:
            try:
                self._store.put(STATE_KEY, state.to_dict())
            except sqlite3.Error as e:
                logger.warning(f"Failed to save project state: {e}")
        self._notify_listeners()

    def mark_product_overview_complete(self, product_name: Optional[str] = None) -> None:
        state = self._current()
        state.has_product_overview = True
        if product_name:
            state.project_name = product_name
        self._save_state()

    def mark_product_roadmap_complete(self) -> None:
        self._current().has_product_roadmap = True
        self._save_state()

    def mark_data_model_complete(self) -> None:
        self._current().has_data_model = True
        self._save_state()

    def mark_colors_complete(self) -> None:
        state = self._current()
        state.has_colors = True
        state.has_design_system = state.has_colors and state.has_typography
        self._save_state()

    def mark_typography_complete(self) -> None:
        state = self._current()
        state.has_typography = True
        state.has_design_system = state.has_colors and state.has_typography
        self._save_state()

    def mark_shell_complete(self) -> None:
        self._current().has_shell = True
        self._save_state()

    def update_section_state(self, section_id: str, **updates) -> None:
        """Merge updates into a section's state, creating the section if new.

        Raises:
            TypeError: If updates names a field SectionState doesn't have.
        """
        state = self._current()
        current = state.sections.get(section_id) or SectionState(section_id=section_id)
        state.sections[section_id] = replace(current, **updates)
        self._save_state()

    def mark_section_spec_complete(self, section_id: str) -> None:
        self.update_section_state(section_id, has_spec=True)

    def mark_section_data_complete(self, section_id: str) -> None:
        self.update_section_state(section_id, has_data=True)

    def mark_section_types_complete(self, section_id: str) -> None:
        self.update_section_state(section_id, has_types=True)

    def add_section_screen_design(self, section_id: str) -> None:
        # Counts every call, including re-saves of the same file
        section = self._current().sections.get(section_id)
        count = (section.screen_design_count if section else 0) + 1
        self.update_section_state(
            section_id, has_screen_designs=True, screen_design_count=count
        )

    def add_section_screenshot(self, section_id: str) -> None:
        section = self._current().sections.get(section_id)
        count = (section.screenshot_count if section else 0) + 1
        self.update_section_state(section_id, has_screenshots=True, screenshot_count=count)

    def get_section_state(self, section_id: str) -> Optional[SectionState]:
        section = self._current().sections.get(section_id)
        return copy.deepcopy(section) if section else None

    def get_sections_with_screen_designs(self) -> list[str]:
        """Ids of sections with screen designs, in first-touched order."""
        return [
            section.section_id
            for section in self._current().sections.values()
            if section.has_screen_designs
        ]

    def is_ready_for_export(self) -> bool:
        """Overview, roadmap and at least one designed section are required.

        The design system and shell are not.
        """
        state = self._current()
        has_required_steps = state.has_product_overview and state.has_product_roadmap
        return has_required_steps and len(self.get_sections_with_screen_designs()) > 0

    def clear_state(self) -> None:
        """Reset to the initial empty record (New Project)."""
        self._state = ProjectState()
        self._save_state()
