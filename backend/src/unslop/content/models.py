"""Structured records parsed from the planning files."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass
class Problem:
    title: str
    solution: str


@dataclass
class ProductOverview:
    name: str
    description: str
    problems: list[Problem] = field(default_factory=list)
    features: list[str] = field(default_factory=list)


@dataclass
class RoadmapSection:
    id: str
    title: str
    description: str
    order: int


@dataclass
class ProductRoadmap:
    sections: list[RoadmapSection] = field(default_factory=list)


@dataclass
class Entity:
    name: str
    description: str


@dataclass
class DataModel:
    entities: list[Entity] = field(default_factory=list)
    relationships: list[str] = field(default_factory=list)


@dataclass
class ColorTokens:
    primary: str
    secondary: str
    neutral: str


@dataclass
class TypographyTokens:
    heading: str
    body: str
    mono: str


@dataclass
class DesignSystem:
    colors: Optional[ColorTokens] = None
    typography: Optional[TypographyTokens] = None


@dataclass
class ShellSpec:
    raw: str
    overview: str
    navigation_items: list[str] = field(default_factory=list)
    layout_pattern: str = ""


@dataclass
class ShellInfo:
    spec: Optional[ShellSpec] = None
    has_components: bool = False


@dataclass
class ProductData:
    """Everything the planning pages render, as far as it exists."""

    overview: Optional[ProductOverview] = None
    roadmap: Optional[ProductRoadmap] = None
    data_model: Optional[DataModel] = None
    design_system: Optional[DesignSystem] = None
    shell: Optional[ShellInfo] = None
