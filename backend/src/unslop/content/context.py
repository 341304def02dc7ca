"""Existing product files as context for AI generation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from unslop.content.loader import ProductLoader
from unslop.project_state.tracker import PRODUCT_OVERVIEW_PATH, PRODUCT_ROADMAP_PATH


@dataclass
class ProductContext:
    has_overview: bool
    has_roadmap: bool
    overview: Optional[str] = None
    roadmap: Optional[str] = None


class ProductContextService:
    """Reads the overview and roadmap so later stages can build on them."""

    def __init__(self, loader: ProductLoader) -> None:
        self._loader = loader

    def get_product_context(self) -> ProductContext:
        overview = self._loader.read_text(PRODUCT_OVERVIEW_PATH)
        roadmap = self._loader.read_text(PRODUCT_ROADMAP_PATH)
        return ProductContext(
            has_overview=overview is not None,
            has_roadmap=roadmap is not None,
            overview=overview or None,
            roadmap=roadmap or None,
        )

    @staticmethod
    def build_context_prompt(context: ProductContext) -> str:
        prompt = ""
        if context.overview:
            prompt += f"# Product Overview\n\n{context.overview}\n\n"
        if context.roadmap:
            prompt += f"# Product Roadmap\n\n{context.roadmap}\n\n"
        return prompt
