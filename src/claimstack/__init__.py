"""Claimstack: claims resolution engine for products across markets."""

from .domain import (
    Claim,
    ClaimLevel,
    ClaimType,
    EffectiveClaim,
    FinalClaimType,
    MarketOverride,
    Product,
    SourceLevel,
)

__version__ = "0.1.0"
__all__ = [
    "Claim",
    "ClaimLevel",
    "ClaimType",
    "EffectiveClaim",
    "FinalClaimType",
    "MarketOverride",
    "Product",
    "SourceLevel",
]
