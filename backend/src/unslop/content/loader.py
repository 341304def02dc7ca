"""Loads the planning files into structured product data.

Files are read from the user's directory first. When a file is missing
there, the bundled defaults tree (if configured) is used instead.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from unslop.content.models import (
    DataModel,
    DesignSystem,
    ProductData,
    ProductOverview,
    ProductRoadmap,
    ShellInfo,
)
from unslop.content.parsers import (
    parse_color_tokens,
    parse_data_model,
    parse_product_overview,
    parse_product_roadmap,
    parse_shell_spec,
    parse_typography_tokens,
)
from unslop.project_state.tracker import (
    COLORS_PATH,
    DATA_MODEL_PATH,
    PRODUCT_OVERVIEW_PATH,
    PRODUCT_ROADMAP_PATH,
    SHELL_SPEC_PATH,
    TYPOGRAPHY_PATH,
)
from unslop.storage.access import DirectoryAccessManager
from unslop.storage.reader import RuntimeFileReader

logger = logging.getLogger(__name__)

EXPORT_ZIP_NAME = "product-plan.zip"
SHELL_COMPONENTS_DIR = "src/shell/components"
APP_SHELL_COMPONENT = "AppShell"


class ProductLoader:
    """Builds ProductData from the granted directory and the defaults tree."""

    def __init__(
        self,
        reader: RuntimeFileReader,
        access: DirectoryAccessManager,
        defaults_dir: Optional[Path] = None,
    ) -> None:
        self._reader = reader
        self._access = access
        self._defaults_dir = defaults_dir

    def _read_default(self, path: str) -> Optional[str]:
        if self._defaults_dir is None:
            return None
        try:
            return (self._defaults_dir / path).read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError):
            return None

    def read_text(self, path: str) -> Optional[str]:
        """Runtime file content, else the bundled default, else None."""
        return self._reader.read_file(path) or self._read_default(path)

    def _read_default_json(self, path: str) -> Optional[Any]:
        content = self._read_default(path)
        if not content:
            return None
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            logger.warning(f"Failed to parse default JSON file {path}: {e}")
            return None

    def load_overview(self) -> Optional[ProductOverview]:
        return parse_product_overview(self.read_text(PRODUCT_OVERVIEW_PATH))

    def load_roadmap(self) -> Optional[ProductRoadmap]:
        return parse_product_roadmap(self.read_text(PRODUCT_ROADMAP_PATH))

    def load_data_model(self) -> Optional[DataModel]:
        return parse_data_model(self.read_text(DATA_MODEL_PATH))

    def load_design_system(self) -> Optional[DesignSystem]:
        """Colors and typography, each falling back to its default separately."""
        colors = parse_color_tokens(self._reader.read_json_file(COLORS_PATH))
        if colors is None:
            colors = parse_color_tokens(self._read_default_json(COLORS_PATH))

        typography = parse_typography_tokens(self._reader.read_json_file(TYPOGRAPHY_PATH))
        if typography is None:
            typography = parse_typography_tokens(self._read_default_json(TYPOGRAPHY_PATH))

        if colors is None and typography is None:
            return None
        return DesignSystem(colors=colors, typography=typography)

    def get_shell_component_names(self) -> list[str]:
        names = {
            name[: -len(".tsx")]
            for name in self._reader.list_files(SHELL_COMPONENTS_DIR)
            if name.endswith(".tsx")
        }
        if self._defaults_dir is not None:
            default_dir = self._defaults_dir / SHELL_COMPONENTS_DIR
            if default_dir.is_dir():
                names.update(p.stem for p in default_dir.glob("*.tsx") if p.is_file())
        return sorted(names)

    def has_shell_components(self) -> bool:
        return APP_SHELL_COMPONENT in self.get_shell_component_names()

    def load_shell_info(self) -> Optional[ShellInfo]:
        spec = parse_shell_spec(self.read_text(SHELL_SPEC_PATH))
        has_components = self.has_shell_components()

        if spec is None and not has_components:
            return None
        return ShellInfo(spec=spec, has_components=has_components)

    def load_product_data(self) -> ProductData:
        return ProductData(
            overview=self.load_overview(),
            roadmap=self.load_roadmap(),
            data_model=self.load_data_model(),
            design_system=self.load_design_system(),
            shell=self.load_shell_info(),
        )

    def export_zip_path(self) -> Optional[Path]:
        """Location of a pre-built product-plan.zip, if there is one."""
        root = self._access.get_handle() if self._access.has_access() else None
        if root is not None:
            try:
                return root.get_file_handle(EXPORT_ZIP_NAME).path
            except (OSError, ValueError):
                pass

        if self._defaults_dir is not None:
            candidate = self._defaults_dir / EXPORT_ZIP_NAME
            if candidate.is_file():
                return candidate

        return None

    def has_export_zip(self) -> bool:
        return self.export_zip_path() is not None
