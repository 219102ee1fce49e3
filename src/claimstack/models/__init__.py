"""Domain and response models."""

from ..domain.claims import (
    Brand,
    Claim,
    EffectiveClaim,
    Ingredient,
    MarketOverride,
    Product,
)
from .dataset import FactDataset, ProductIngredientLink
from .matrix import MatrixCell, MatrixResult, OverrideInfo, ProductRef
from .summary import ClaimsSummary, LevelClaims

__all__ = [
    # Domain
    "Brand",
    "Claim",
    "EffectiveClaim",
    "Ingredient",
    "MarketOverride",
    "Product",
    # Datasets
    "FactDataset",
    "ProductIngredientLink",
    # Responses
    "ClaimsSummary",
    "LevelClaims",
    "MatrixCell",
    "MatrixResult",
    "OverrideInfo",
    "ProductRef",
]
