"""Maps written file paths onto completion-state updates."""

from __future__ import annotations

import logging
import re
from typing import Callable, Optional

from unslop.project_state.service import ProjectStateService

logger = logging.getLogger(__name__)

PRODUCT_OVERVIEW_PATH = "product/product-overview.md"
PRODUCT_ROADMAP_PATH = "product/product-roadmap.md"
DATA_MODEL_PATH = "product/data-model/data-model.md"
COLORS_PATH = "product/design-system/colors.json"
TYPOGRAPHY_PATH = "product/design-system/typography.json"
SHELL_SPEC_PATH = "product/shell/spec.md"

SECTION_FILE_RE = re.compile(r"^product/sections/([^/]+)/([^/]+)$")
SCREEN_DESIGN_RE = re.compile(r"^src/sections/([^/]+)/.+$")

SCREENSHOT_EXTENSIONS = (".png", ".jpg", ".jpeg", ".webp")

_HEADING_RE = re.compile(r"^#[ \t]+(.+)$", re.MULTILINE)


def _product_name(content: Optional[str]) -> Optional[str]:
    if not content:
        return None
    match = _HEADING_RE.search(content)
    return match.group(1).strip() if match else None


class CompletionTracker:
    """Applies the fixed path table to a ProjectStateService.

    Exact paths cover the top-level artifacts; per-section files are matched
    by prefix. Anything else is ignored.
    """

    def __init__(self, state: ProjectStateService) -> None:
        self._state = state
        self._exact: dict[str, Callable[[Optional[str]], None]] = {
            PRODUCT_OVERVIEW_PATH: lambda content: state.mark_product_overview_complete(
                _product_name(content)
            ),
            PRODUCT_ROADMAP_PATH: lambda _: state.mark_product_roadmap_complete(),
            DATA_MODEL_PATH: lambda _: state.mark_data_model_complete(),
            COLORS_PATH: lambda _: state.mark_colors_complete(),
            TYPOGRAPHY_PATH: lambda _: state.mark_typography_complete(),
            SHELL_SPEC_PATH: lambda _: state.mark_shell_complete(),
        }
        self._section_files: dict[str, Callable[[str], None]] = {
            "spec.md": state.mark_section_spec_complete,
            "data.json": state.mark_section_data_complete,
            "types.ts": state.mark_section_types_complete,
        }

    def record(self, path: str, content: Optional[str] = None) -> bool:
        """Update the index for a successful write to path.

        Returns:
            True if path matched an entry in the table.
        """
        handler = self._exact.get(path)
        if handler is not None:
            handler(content)
            return True

        match = SECTION_FILE_RE.match(path)
        if match:
            section_id, file_name = match.groups()
            section_handler = self._section_files.get(file_name)
            if section_handler is not None:
                section_handler(section_id)
                return True
            if file_name.lower().endswith(SCREENSHOT_EXTENSIONS):
                self._state.add_section_screenshot(section_id)
                return True
            return False

        match = SCREEN_DESIGN_RE.match(path)
        if match:
            self._state.add_section_screen_design(match.group(1))
            return True

        logger.debug(f"No completion entry for {path}")
        return False
