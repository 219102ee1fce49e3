"""Direct (non-AI) formatting of resolved claims into a grouped summary."""

from __future__ import annotations

from ..domain.claims import EffectiveClaim, FinalClaimType, SourceLevel
from ..models.summary import ClaimsSummary, LevelClaims

_LEVEL_ORDER = (
    (SourceLevel.product, "Product"),
    (SourceLevel.ingredient, "Ingredient"),
    (SourceLevel.brand, "Brand"),
    (SourceLevel.override, "Market override"),
)

_TYPE_FIELD = {
    FinalClaimType.mandatory: "mandatory_claims",
    FinalClaimType.allowed: "allowed_claims",
    FinalClaimType.disallowed: "disallowed_claims",
    FinalClaimType.conditional: "conditional_claims",
}


def introductory_sentence(product_name: str | None = None, brand_name: str | None = None) -> str:
    if product_name and brand_name:
        return f"Approved claims for {product_name} by {brand_name}."
    if product_name:
        return f"Approved claims for {product_name}."
    if brand_name:
        return f"Approved claims for {brand_name} products."
    return "Approved claims for this product."


def summarize_claims(
    claims: list[EffectiveClaim],
    product_name: str | None = None,
    brand_name: str | None = None,
) -> ClaimsSummary:
    """Group resolved claims by level and type, preserving text exactly (trimmed).

    Suppressed claims go to ``blocked_claims``; claims without text are skipped.
    The override group is only included when it has content.
    """
    groups = {level: LevelClaims(level=label) for level, label in _LEVEL_ORDER}
    blocked: list[str] = []
    for claim in claims:
        text = (claim.text or "").strip()
        if not text:
            continue
        if claim.final_type is FinalClaimType.none:
            blocked.append(text)
            continue
        getattr(groups[claim.source_level], _TYPE_FIELD[claim.final_type]).append(text)

    grouped = [
        groups[level]
        for level, _ in _LEVEL_ORDER
        if level is not SourceLevel.override or not groups[level].is_empty
    ]
    return ClaimsSummary(
        introductory_sentence=introductory_sentence(product_name, brand_name),
        grouped_claims=grouped,
        blocked_claims=blocked,
    )
