"""Grouped, non-AI rendering of resolved claims."""

from __future__ import annotations

from pydantic import BaseModel, Field


class LevelClaims(BaseModel):
    """Claim texts for one level, split by resolved type."""

    level: str = Field(..., description="Display name of the level")
    mandatory_claims: list[str] = Field(default_factory=list)
    allowed_claims: list[str] = Field(default_factory=list)
    disallowed_claims: list[str] = Field(default_factory=list)
    conditional_claims: list[str] = Field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not (
            self.mandatory_claims
            or self.allowed_claims
            or self.disallowed_claims
            or self.conditional_claims
        )


class ClaimsSummary(BaseModel):
    """Resolved claims for a product, ready for display or AI styling."""

    introductory_sentence: str = Field(..., description="Lead-in sentence")
    grouped_claims: list[LevelClaims] = Field(default_factory=list)
    blocked_claims: list[str] = Field(
        default_factory=list, description="Texts explicitly suppressed in this market"
    )
