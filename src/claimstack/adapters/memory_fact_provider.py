"""Adapter: in-memory FactProvider backed by a FactDataset."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..domain.claims import (
    Brand,
    Claim,
    ClaimLevel,
    MarketOverride,
    Product,
    is_all_countries_code,
    is_global_country_code,
    same_country,
)
from ..domain.errors import NotFoundError
from ..models.dataset import FactDataset


def _scope_matches(scope: str, wanted: str, is_sentinel) -> bool:
    if is_sentinel(wanted):
        return is_sentinel(scope)
    return same_country(scope, wanted)


class InMemoryFactProvider:
    """Concrete FactProvider over rows held in memory. Read-only after construction."""

    def __init__(self, dataset: FactDataset) -> None:
        self._brands = {b.id: b for b in dataset.brands}
        self._products = {p.id: p for p in dataset.products}
        self._claims = {c.id: c for c in dataset.claims}
        self._claim_order = [c.id for c in dataset.claims]
        self._overrides = list(dataset.market_overrides)
        self._ingredients: dict[str, list[str]] = {}
        for link in dataset.product_ingredients:
            self._ingredients.setdefault(link.product_id, []).append(link.ingredient_id)

    @classmethod
    def from_json_file(cls, path: Path | str) -> InMemoryFactProvider:
        return cls(FactDataset.from_json_file(path))

    # ------------------------------------------------------------------
    # Reference entities
    # ------------------------------------------------------------------

    def get_product(self, product_id: str) -> Product:
        product = self._products.get(product_id)
        if product is None:
            raise NotFoundError("product", product_id)
        return product

    def list_products(self, brand_id: str | None = None) -> list[Product]:
        products = [
            p for p in self._products.values() if brand_id is None or p.brand_id == brand_id
        ]
        return sorted(products, key=lambda p: (p.name, p.id))

    def get_brand(self, brand_id: str) -> Brand:
        brand = self._brands.get(brand_id)
        if brand is None:
            raise NotFoundError("brand", brand_id)
        return brand

    def get_brand_for_product(self, product_id: str) -> str:
        product = self.get_product(product_id)
        if not product.brand_id or product.brand_id not in self._brands:
            raise NotFoundError("brand", product.brand_id or f"<none for product {product_id}>")
        return product.brand_id

    def get_ingredients_for_product(self, product_id: str) -> list[str]:
        self.get_product(product_id)
        return list(dict.fromkeys(self._ingredients.get(product_id, [])))

    # ------------------------------------------------------------------
    # Claims
    # ------------------------------------------------------------------

    def get_claims_for_owner(
        self,
        level: ClaimLevel,
        owner_id: str,
        country_scope: str,
    ) -> list[Claim]:
        level = ClaimLevel(level)
        out: list[Claim] = []
        for claim_id in self._claim_order:
            claim = self._claims[claim_id]
            if claim.level is not level or claim.owner_id != owner_id:
                continue
            if _scope_matches(claim.country_scope, country_scope, is_global_country_code):
                out.append(claim)
        return out

    def get_claims_by_ids(self, ids: Iterable[str]) -> list[Claim]:
        return [self._claims[i] for i in dict.fromkeys(ids) if i in self._claims]

    # ------------------------------------------------------------------
    # Overrides
    # ------------------------------------------------------------------

    def get_overrides_for_master_claims(
        self,
        master_claim_ids: Iterable[str],
        product_id: str,
        market_scope: str,
    ) -> list[MarketOverride]:
        wanted = set(master_claim_ids)
        out: list[MarketOverride] = []
        for override in self._overrides:
            if override.master_claim_id not in wanted or override.target_product_id != product_id:
                continue
            if not _scope_matches(override.market_scope, market_scope, is_all_countries_code):
                continue
            replacement = (
                self._claims.get(override.replacement_claim_id)
                if override.replacement_claim_id
                else None
            )
            out.append(override.model_copy(update={"replacement_claim": replacement}))
        return out
