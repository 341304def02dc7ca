"""Markdown and JSON parsers for the planning files.

Each parser pulls a few well-known sections out of a document with regular
expressions and returns None when nothing meaningful was found. Documents
follow the layouts written by the generation forms, e.g. for the overview:

    # Product Name

    ## Description
    One to three sentences.

    ## Problems & Solutions

    ### Problem 1: Title
    How the product solves it.

    ## Key Features
    - Feature one
"""

from __future__ import annotations

import re
from typing import Any, Optional

from unslop.content.models import (
    ColorTokens,
    DataModel,
    Entity,
    Problem,
    ProductOverview,
    ProductRoadmap,
    RoadmapSection,
    ShellSpec,
    TypographyTokens,
)

DEFAULT_MONO_FONT = "IBM Plex Mono"

# Body of a "## Heading" section: everything up to the next h1/h2 or the end
_SECTION_END = r"(?=\n## |\n#[^#]|\Z)"

_TITLE_RE = re.compile(r"^#\s+(.+)$", re.MULTILINE)
_PROBLEM_RE = re.compile(r"### Problem \d+:\s*(.+)\n+([\s\S]*?)(?=\n### |\n## |\Z)")
_ROADMAP_SECTION_RE = re.compile(r"### (\d+)\.\s*(.+)\n+([\s\S]*?)(?=\n### |\n## |\n#[^#]|\Z)")
_ENTITY_RE = re.compile(r"### ([^\n]+)\n+([\s\S]*?)(?=\n### |\n## |\Z)")


def _section(md: str, heading: str) -> Optional[str]:
    match = re.search(r"## " + re.escape(heading) + r"\s*\n+([\s\S]*?)" + _SECTION_END, md)
    return match.group(1) if match else None


def _bullets(body: Optional[str]) -> list[str]:
    if not body:
        return []
    items = []
    for line in body.split("\n"):
        trimmed = line.strip()
        if trimmed.startswith("- "):
            items.append(trimmed[2:].strip())
    return items


def slugify(text: str) -> str:
    """Lowercase, dash-separated id. " & " becomes "-and-"."""
    slug = re.sub(r"\s+&\s+", "-and-", text.lower())
    slug = re.sub(r"[^a-z0-9]+", "-", slug)
    return slug.strip("-")


def parse_product_overview(md: Optional[str]) -> Optional[ProductOverview]:
    """Parse product/product-overview.md."""
    if not md or not md.strip():
        return None

    title = _TITLE_RE.search(md)
    name = title.group(1).strip() if title else "Product Overview"

    description = (_section(md, "Description") or "").strip()

    problems = []
    problems_body = _section(md, "Problems & Solutions")
    if problems_body:
        for match in _PROBLEM_RE.finditer(problems_body):
            problems.append(Problem(title=match.group(1).strip(), solution=match.group(2).strip()))

    features = _bullets(_section(md, "Key Features"))

    if not description and not problems and not features:
        return None

    return ProductOverview(name=name, description=description, problems=problems, features=features)


def parse_product_roadmap(md: Optional[str]) -> Optional[ProductRoadmap]:
    """Parse product/product-roadmap.md: "### N. Title" entries, sorted by N."""
    if not md or not md.strip():
        return None

    sections = [
        RoadmapSection(
            id=slugify(match.group(2).strip()),
            title=match.group(2).strip(),
            description=match.group(3).strip(),
            order=int(match.group(1)),
        )
        for match in _ROADMAP_SECTION_RE.finditer(md)
    ]
    sections.sort(key=lambda s: s.order)

    if not sections:
        return None

    return ProductRoadmap(sections=sections)


def parse_data_model(md: Optional[str]) -> Optional[DataModel]:
    """Parse product/data-model/data-model.md.

    Entities are "### Name" blocks under "## Entities"; relationships are the
    bullets under "## Relationships".
    """
    if not md or not md.strip():
        return None

    entities = []
    entities_body = _section(md, "Entities")
    if entities_body:
        for match in _ENTITY_RE.finditer(entities_body):
            entities.append(Entity(name=match.group(1).strip(), description=match.group(2).strip()))

    relationships = _bullets(_section(md, "Relationships"))

    if not entities and not relationships:
        return None

    return DataModel(entities=entities, relationships=relationships)


def parse_shell_spec(md: Optional[str]) -> Optional[ShellSpec]:
    """Parse product/shell/spec.md."""
    if not md or not md.strip():
        return None

    overview = (_section(md, "Overview") or "").strip()
    navigation_items = _bullets(_section(md, "Navigation Structure"))
    layout_pattern = (_section(md, "Layout Pattern") or "").strip()

    if not overview and not navigation_items and not layout_pattern:
        return None

    return ShellSpec(
        raw=md,
        overview=overview,
        navigation_items=navigation_items,
        layout_pattern=layout_pattern,
    )


def parse_color_tokens(colors: Any) -> Optional[ColorTokens]:
    """Color tokens need all of primary, secondary and neutral."""
    if not isinstance(colors, dict):
        return None
    if not colors.get("primary") or not colors.get("secondary") or not colors.get("neutral"):
        return None
    return ColorTokens(
        primary=colors["primary"],
        secondary=colors["secondary"],
        neutral=colors["neutral"],
    )


def parse_typography_tokens(typography: Any) -> Optional[TypographyTokens]:
    """Typography needs heading and body fonts; mono has a default."""
    if not isinstance(typography, dict):
        return None
    if not typography.get("heading") or not typography.get("body"):
        return None
    return TypographyTokens(
        heading=typography["heading"],
        body=typography["body"],
        mono=typography.get("mono") or DEFAULT_MONO_FONT,
    )
