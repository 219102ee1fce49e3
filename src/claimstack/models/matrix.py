"""Response DTOs for the claim x product matrix."""

from __future__ import annotations

from pydantic import BaseModel, Field

from ..domain.claims import EffectiveClaim, FinalClaimType, SourceLevel


class ProductRef(BaseModel):
    """A matrix column."""

    id: str = Field(..., description="Product identifier")
    name: str = Field(..., description="Product name")


class OverrideInfo(BaseModel):
    """The market override that shaped a cell, if any."""

    override_id: str = Field(..., description="MarketOverride identifier")
    is_blocked: bool = Field(..., description="Override suppresses the master claim")
    master_claim_id: str | None = Field(default=None, description="Claim being overridden")
    replacement_claim_id: str | None = Field(default=None)
    replacement_claim_text: str | None = Field(default=None)
    replacement_claim_type: FinalClaimType | None = Field(default=None)


class MatrixCell(BaseModel):
    """Resolved state of one claim text for one product."""

    final_type: FinalClaimType = Field(default=FinalClaimType.none)
    has_data: bool = Field(default=False, description="False when the product has no claim for this text")
    source_level: SourceLevel | None = Field(default=None)
    source_claim_id: str | None = Field(default=None)
    is_actually_master: bool = Field(default=False)
    is_blocked_override: bool = Field(default=False)
    is_replacement_override: bool = Field(default=False)
    original_master_claim_id_if_overridden: str | None = Field(default=None)
    description: str | None = Field(default=None)
    active_override: OverrideInfo | None = Field(default=None)
    effective_claim: EffectiveClaim | None = Field(
        default=None, description="Full resolved claim backing this cell"
    )

    @classmethod
    def empty(cls) -> MatrixCell:
        return cls()

    @classmethod
    def from_effective(cls, claim: EffectiveClaim) -> MatrixCell:
        active: OverrideInfo | None = None
        if claim.override_rule_id:
            replaced = claim.is_replacement_override
            active = OverrideInfo(
                override_id=claim.override_rule_id,
                is_blocked=claim.is_blocked_override,
                master_claim_id=claim.original_master_claim_id_if_overridden,
                replacement_claim_id=claim.source_claim_id if replaced else None,
                replacement_claim_text=claim.text if replaced else None,
                replacement_claim_type=claim.final_type if replaced else None,
            )
        return cls(
            final_type=claim.final_type,
            has_data=True,
            source_level=claim.source_level,
            source_claim_id=claim.source_claim_id,
            is_actually_master=claim.is_actually_master,
            is_blocked_override=claim.is_blocked_override,
            is_replacement_override=claim.is_replacement_override,
            original_master_claim_id_if_overridden=claim.original_master_claim_id_if_overridden,
            description=claim.description,
            active_override=active,
            effective_claim=claim,
        )


class MatrixResult(BaseModel):
    """Claim-text rows x product columns for one country."""

    country_code: str = Field(..., description="Country the matrix was resolved for")
    rows: list[str] = Field(default_factory=list, description="Claim texts, sorted")
    columns: list[ProductRef] = Field(default_factory=list, description="Resolved products")
    cells: dict[str, dict[str, MatrixCell]] = Field(
        default_factory=dict, description="text -> product id -> cell"
    )
    row_limit: int = Field(..., ge=1, description="Row cap applied to this result")
    total_rows: int = Field(default=0, ge=0, description="Distinct texts before truncation")
    skipped_product_ids: list[str] = Field(
        default_factory=list, description="Requested products that do not exist"
    )

    @property
    def truncated(self) -> bool:
        return self.total_rows > len(self.rows)

    def cell(self, text: str, product_id: str) -> MatrixCell:
        return self.cells.get(text, {}).get(product_id) or MatrixCell.empty()
