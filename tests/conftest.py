"""Shared fixtures: a small claims dataset covering the resolution scenarios."""

import pytest

from claimstack.adapters.memory_fact_provider import InMemoryFactProvider
from claimstack.domain.claims import ALL_COUNTRIES_CODE, GLOBAL_CLAIM_COUNTRY_CODE
from claimstack.models.dataset import FactDataset


def make_dataset() -> FactDataset:
    """Products:

    p-yogurt  one worldwide ingredient claim, nothing else
    p-cream   brand claim blocked worldwide, replaced in DE
    p-serum   same brand, no overrides, conditional product claim
    p-empty   brand without claims, no ingredients
    p-orphan  product whose brand row is missing
    """
    return FactDataset.model_validate(
        {
            "brands": [
                {"id": "b-acme", "name": "Acme"},
                {"id": "b-dairy", "name": "DairyCo"},
                {"id": "b-quiet", "name": "Quiet"},
            ],
            "products": [
                {"id": "p-yogurt", "name": "Yogurt", "brand_id": "b-dairy"},
                {"id": "p-cream", "name": "Cream", "brand_id": "b-acme"},
                {"id": "p-serum", "name": "Serum", "brand_id": "b-acme"},
                {"id": "p-empty", "name": "Empty", "brand_id": "b-quiet"},
                {"id": "p-orphan", "name": "Orphan", "brand_id": "b-gone"},
            ],
            "ingredients": [
                {"id": "i-milk", "name": "Milk"},
                {"id": "i-aloe", "name": "Aloe"},
            ],
            "product_ingredients": [
                {"product_id": "p-yogurt", "ingredient_id": "i-milk"},
                {"product_id": "p-cream", "ingredient_id": "i-aloe"},
                {"product_id": "p-serum", "ingredient_id": "i-aloe"},
            ],
            "claims": [
                {"id": "c-dairy", "text": "Contains dairy", "type": "allowed",
                 "level": "ingredient", "ingredient_id": "i-milk",
                 "country_scope": GLOBAL_CLAIM_COUNTRY_CODE},
                {"id": "c-clinical", "text": "Clinically proven", "type": "allowed",
                 "level": "brand", "brand_id": "b-acme",
                 "country_scope": GLOBAL_CLAIM_COUNTRY_CODE},
                {"id": "c-derm", "text": "Dermatologically tested", "type": "allowed",
                 "level": "brand", "brand_id": "b-acme", "country_scope": "XX"},
                {"id": "c-soothing", "text": "Soothes skin", "type": "allowed",
                 "level": "ingredient", "ingredient_id": "i-aloe",
                 "country_scope": GLOBAL_CLAIM_COUNTRY_CODE},
                {"id": "c-soothing-fr", "text": "Soothes skin", "type": "mandatory",
                 "level": "brand", "brand_id": "b-acme", "country_scope": "FR"},
                {"id": "c-wrinkles", "text": "Reduces wrinkles", "type": "conditional",
                 "level": "product", "product_id": "p-serum",
                 "country_scope": GLOBAL_CLAIM_COUNTRY_CODE},
            ],
            "market_overrides": [
                {"id": "o-block", "master_claim_id": "c-clinical", "target_product_id": "p-cream",
                 "market_scope": ALL_COUNTRIES_CODE, "is_blocked": True},
                {"id": "o-de", "master_claim_id": "c-clinical", "target_product_id": "p-cream",
                 "market_scope": "DE", "replacement_claim_id": "c-derm"},
            ],
        }
    )


@pytest.fixture
def dataset() -> FactDataset:
    return make_dataset()


@pytest.fixture
def provider(dataset) -> InMemoryFactProvider:
    return InMemoryFactProvider(dataset)
