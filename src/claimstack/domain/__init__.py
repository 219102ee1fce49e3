"""Domain layer for claim resolution."""

from .aggregator import LevelAggregator
from .claims import (
    ALL_COUNTRIES_CODE,
    GLOBAL_CLAIM_COUNTRY_CODE,
    Brand,
    Claim,
    ClaimLevel,
    ClaimType,
    EffectiveClaim,
    FinalClaimType,
    Ingredient,
    MarketOverride,
    Product,
    SourceLevel,
    is_all_countries_code,
    is_global_country_code,
)
from .context import ResolutionContext
from .deduplicator import PrecedenceDeduplicator, compare_precedence
from .errors import (
    ClaimsError,
    DataIntegrityWarning,
    NotFoundError,
    ProviderUnavailableError,
    ResolutionTimeoutError,
)
from .override_resolver import OverrideResolver, select_override
from .semantics import (
    PRECEDENCE_LADDER,
    RULE_BLOCK_DOMINATES,
    RULE_FIRST_SEEN,
    RULE_LEVEL_SPECIFICITY,
    RULE_MARKET_OVER_GLOBAL,
    RULE_REPLACEMENT_OVER_BASE,
)

__all__ = [
    "ALL_COUNTRIES_CODE",
    "GLOBAL_CLAIM_COUNTRY_CODE",
    "Brand",
    "Claim",
    "ClaimLevel",
    "ClaimType",
    "ClaimsError",
    "DataIntegrityWarning",
    "EffectiveClaim",
    "FinalClaimType",
    "Ingredient",
    "LevelAggregator",
    "MarketOverride",
    "NotFoundError",
    "OverrideResolver",
    "PrecedenceDeduplicator",
    "Product",
    "ProviderUnavailableError",
    "ResolutionContext",
    "ResolutionTimeoutError",
    "SourceLevel",
    "compare_precedence",
    "is_all_countries_code",
    "is_global_country_code",
    "select_override",
    "PRECEDENCE_LADDER",
    "RULE_BLOCK_DOMINATES",
    "RULE_FIRST_SEEN",
    "RULE_LEVEL_SPECIFICITY",
    "RULE_MARKET_OVER_GLOBAL",
    "RULE_REPLACEMENT_OVER_BASE",
]
