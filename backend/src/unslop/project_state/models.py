"""Completion-state records."""

from __future__ import annotations

import time
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Optional


def now_ms() -> int:
    """Current wall-clock time in milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass
class SectionState:
    """Which artifacts exist for one roadmap section."""

    section_id: str
    has_spec: bool = False
    has_data: bool = False
    has_types: bool = False
    has_screen_designs: bool = False
    has_screenshots: bool = False
    screen_design_count: int = 0
    screenshot_count: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SectionState":
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class ProjectState:
    """Root record of the completion-state index.

    has_design_system is derived: it is only ever set to
    has_colors and has_typography.
    """

    has_product_overview: bool = False
    has_product_roadmap: bool = False
    has_data_model: bool = False
    has_design_system: bool = False
    has_shell: bool = False
    has_colors: bool = False
    has_typography: bool = False
    # Insertion ordered: first-touched section first
    sections: dict[str, SectionState] = field(default_factory=dict)
    last_updated: int = field(default_factory=now_ms)
    project_name: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProjectState":
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known and k != "sections"}
        sections = {
            section_id: SectionState.from_dict(section)
            for section_id, section in (data.get("sections") or {}).items()
        }
        return cls(sections=sections, **values)
