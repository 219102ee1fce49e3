"""Port: read-only fact provider for claims, products and overrides."""

from __future__ import annotations

from typing import Iterable, Protocol, runtime_checkable

from ..domain.claims import Brand, Claim, ClaimLevel, MarketOverride, Product


@runtime_checkable
class FactProvider(Protocol):
    """Read-only access to claim rows.

    Implementations raise ``NotFoundError`` for missing products and
    ``ProviderUnavailableError`` when the backing store fails.
    """

    # --- reference entities ---

    def get_product(self, product_id: str) -> Product: ...

    def list_products(self, brand_id: str | None = None) -> list[Product]: ...

    def get_brand(self, brand_id: str) -> Brand: ...

    def get_brand_for_product(self, product_id: str) -> str: ...

    def get_ingredients_for_product(self, product_id: str) -> list[str]: ...

    # --- claims ---

    def get_claims_for_owner(
        self,
        level: ClaimLevel,
        owner_id: str,
        country_scope: str,
    ) -> list[Claim]: ...

    def get_claims_by_ids(self, ids: Iterable[str]) -> list[Claim]: ...

    # --- overrides ---

    def get_overrides_for_master_claims(
        self,
        master_claim_ids: Iterable[str],
        product_id: str,
        market_scope: str,
    ) -> list[MarketOverride]: ...
