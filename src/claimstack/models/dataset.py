"""Bulk dataset format used to seed fact providers from JSON."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field

from ..domain.claims import Brand, Claim, Ingredient, MarketOverride, Product


class ProductIngredientLink(BaseModel):
    """Product contains ingredient."""

    product_id: str = Field(..., description="Product identifier")
    ingredient_id: str = Field(..., description="Ingredient identifier")


class FactDataset(BaseModel):
    """All reference rows, claims and overrides in one document."""

    brands: list[Brand] = Field(default_factory=list)
    products: list[Product] = Field(default_factory=list)
    ingredients: list[Ingredient] = Field(default_factory=list)
    product_ingredients: list[ProductIngredientLink] = Field(default_factory=list)
    claims: list[Claim] = Field(default_factory=list)
    market_overrides: list[MarketOverride] = Field(default_factory=list)

    @classmethod
    def from_json_file(cls, path: Path | str) -> FactDataset:
        """Load and validate a dataset file. Raises on missing file or invalid schema."""
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
        return cls.model_validate(raw)
