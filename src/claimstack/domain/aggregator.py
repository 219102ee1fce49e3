"""LevelAggregator: enumerates candidate claims across levels and scopes."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .claims import (
    GLOBAL_CLAIM_COUNTRY_CODE,
    ClaimLevel,
    EffectiveClaim,
    is_global_country_code,
)

if TYPE_CHECKING:
    from ..ports.fact_provider import FactProvider


class LevelAggregator:
    """Collect every candidate claim applicable to one product in one country.

    Brand, ingredient and product owners are each queried at the exact
    country and at the worldwide scope. Nothing is deduplicated here: a
    country-specific and a worldwide version of the same text are both
    emitted and left for the later stages.
    """

    def __init__(self, provider: FactProvider) -> None:
        self._provider = provider

    def aggregate(self, product_id: str, country_code: str) -> list[EffectiveClaim]:
        brand_id = self._provider.get_brand_for_product(product_id)
        ingredient_ids = list(dict.fromkeys(self._provider.get_ingredients_for_product(product_id)))

        owners: list[tuple[ClaimLevel, str]] = [(ClaimLevel.brand, brand_id)]
        owners.extend((ClaimLevel.ingredient, ingredient_id) for ingredient_id in ingredient_ids)
        owners.append((ClaimLevel.product, product_id))

        candidates: list[EffectiveClaim] = []
        for level, owner_id in owners:
            for scope in self._scopes(country_code):
                for claim in self._provider.get_claims_for_owner(level, owner_id, scope):
                    candidates.append(EffectiveClaim.from_claim(claim, product_id, country_code))
        return candidates

    @staticmethod
    def _scopes(country_code: str) -> list[str]:
        if is_global_country_code(country_code):
            return [GLOBAL_CLAIM_COUNTRY_CODE]
        return [country_code, GLOBAL_CLAIM_COUNTRY_CODE]
