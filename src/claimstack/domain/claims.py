"""Claim, override and effective-claim domain models."""

from __future__ import annotations

from enum import Enum

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator

# Claim scope meaning "applies in every market".
GLOBAL_CLAIM_COUNTRY_CODE = "__GLOBAL__"
# Override scope meaning "applies to all markets".
ALL_COUNTRIES_CODE = "__ALL_COUNTRIES__"


def _normalize_code(code: str | None) -> str:
    if not isinstance(code, str):
        return ""
    return code.strip().upper()


def is_global_country_code(code: str | None) -> bool:
    """True if ``code`` is the worldwide claim sentinel."""
    return _normalize_code(code) == GLOBAL_CLAIM_COUNTRY_CODE


def is_all_countries_code(code: str | None) -> bool:
    """True if ``code`` is the all-markets override sentinel."""
    return _normalize_code(code) == ALL_COUNTRIES_CODE


def same_country(a: str | None, b: str | None) -> bool:
    """Case-insensitive country code comparison; blanks never match."""
    na, nb = _normalize_code(a), _normalize_code(b)
    return bool(na) and na == nb


class ClaimType(str, Enum):
    """Truth type declared on a claim."""

    mandatory = "mandatory"
    allowed = "allowed"
    disallowed = "disallowed"
    conditional = "conditional"


class FinalClaimType(str, Enum):
    """Resolved claim type; ``none`` marks an explicitly suppressed claim."""

    mandatory = "mandatory"
    allowed = "allowed"
    disallowed = "disallowed"
    conditional = "conditional"
    none = "none"


class ClaimLevel(str, Enum):
    """Organizational level a claim is declared against."""

    brand = "brand"
    product = "product"
    ingredient = "ingredient"


class SourceLevel(str, Enum):
    """Where an effective claim came from."""

    brand = "brand"
    product = "product"
    ingredient = "ingredient"
    override = "override"


class Brand(BaseModel):
    """Brand reference entity."""

    id: str = Field(..., description="Brand identifier")
    name: str = Field(..., description="Brand name")


class Ingredient(BaseModel):
    """Ingredient reference entity."""

    id: str = Field(..., description="Ingredient identifier")
    name: str = Field(..., description="Ingredient name")


class Product(BaseModel):
    """Product reference entity with its owning brand."""

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")
    brand_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("brand_id", "master_brand_id"),
        description="Owning brand identifier",
    )
    description: str | None = Field(default=None, description="Optional product description")


class Claim(BaseModel):
    """A statement about a brand, product or ingredient."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Claim identifier")
    text: str | None = Field(
        default=None,
        validation_alias=AliasChoices("text", "claim_text"),
        description="Literal claim text",
    )
    type: ClaimType = Field(
        ...,
        validation_alias=AliasChoices("type", "claim_type"),
        description="Declared claim type",
    )
    level: ClaimLevel = Field(..., description="Organizational level")
    country_scope: str = Field(
        default=GLOBAL_CLAIM_COUNTRY_CODE,
        validation_alias=AliasChoices("country_scope", "country_code"),
        description="Country code, or __GLOBAL__ for every market",
    )
    brand_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("brand_id", "master_brand_id"),
        description="Owner when level is brand",
    )
    product_id: str | None = Field(default=None, description="Owner when level is product")
    ingredient_id: str | None = Field(default=None, description="Owner when level is ingredient")
    description: str | None = Field(default=None, description="Optional free text")

    @model_validator(mode="after")
    def _owner_matches_level(self) -> Claim:
        owners = {
            ClaimLevel.brand: self.brand_id,
            ClaimLevel.product: self.product_id,
            ClaimLevel.ingredient: self.ingredient_id,
        }
        if not owners[self.level]:
            raise ValueError(f"{self.level.value}-level claim {self.id!r} has no {self.level.value}_id")
        others = [lvl.value for lvl, owner in owners.items() if lvl is not self.level and owner]
        if others:
            raise ValueError(
                f"{self.level.value}-level claim {self.id!r} also references {', '.join(others)}"
            )
        return self

    @property
    def owner_id(self) -> str:
        if self.level is ClaimLevel.brand:
            return self.brand_id or ""
        if self.level is ClaimLevel.product:
            return self.product_id or ""
        return self.ingredient_id or ""

    @property
    def is_global(self) -> bool:
        return is_global_country_code(self.country_scope)


class MarketOverride(BaseModel):
    """Blocks or replaces one master claim for one product in a market."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Override identifier")
    master_claim_id: str = Field(..., description="Claim being overridden")
    target_product_id: str = Field(..., description="Product the override applies to")
    market_scope: str = Field(
        ...,
        validation_alias=AliasChoices("market_scope", "market_country_code"),
        description="Country code, or __ALL_COUNTRIES__",
    )
    is_blocked: bool = Field(default=False, description="Suppress the master claim")
    replacement_claim_id: str | None = Field(default=None, description="Claim substituted in")
    replacement_claim: Claim | None = Field(
        default=None,
        description="Replacement claim row when the provider resolved it inline",
    )

    @property
    def is_all_markets(self) -> bool:
        return is_all_countries_code(self.market_scope)


class EffectiveClaim(BaseModel):
    """Resolved claim for one product in one country. Never persisted."""

    model_config = ConfigDict(frozen=True)

    text: str | None = Field(default=None, description="Literal claim text")
    final_type: FinalClaimType = Field(..., description="Resolved claim type")
    source_level: SourceLevel = Field(..., description="Originating level, or override")
    source_claim_id: str | None = Field(default=None, description="Claim the text/type came from")
    applies_to_product_id: str = Field(..., description="Product being resolved")
    applies_to_country: str = Field(..., description="Country being resolved")
    original_country_scope: str | None = Field(
        default=None, description="Scope of the claim before resolution"
    )
    is_actually_master: bool = Field(
        default=False, description="Claim scope equals the requested country"
    )
    is_blocked_override: bool = Field(default=False)
    is_replacement_override: bool = Field(default=False)
    original_master_claim_id_if_overridden: str | None = Field(default=None)
    description: str | None = Field(default=None)
    override_rule_id: str | None = Field(default=None, description="Applied MarketOverride id")
    original_claim_text: str | None = Field(
        default=None, description="Master claim text before any replacement"
    )
    source_entity_id: str | None = Field(
        default=None, description="Brand/product/ingredient the claim is declared against"
    )

    @property
    def dedupe_key(self) -> str | None:
        """Grouping key: trimmed text; falsy text keeps its own value."""
        if isinstance(self.text, str):
            return self.text.strip()
        return self.text

    @property
    def is_market_specific(self) -> bool:
        scope = self.original_country_scope
        return bool(_normalize_code(scope)) and not is_global_country_code(scope)

    @classmethod
    def from_claim(cls, claim: Claim, product_id: str, country_code: str) -> EffectiveClaim:
        """Build a candidate straight from a fetched claim."""
        return cls(
            text=claim.text,
            final_type=FinalClaimType(claim.type.value),
            source_level=SourceLevel(claim.level.value),
            source_claim_id=claim.id,
            applies_to_product_id=product_id,
            applies_to_country=country_code,
            original_country_scope=claim.country_scope,
            is_actually_master=same_country(claim.country_scope, country_code),
            description=claim.description,
            original_claim_text=claim.text,
            source_entity_id=claim.owner_id,
        )
