"""LevelAggregator tests: enumeration across levels and scopes."""

import pytest

from claimstack.adapters.memory_fact_provider import InMemoryFactProvider
from claimstack.domain.aggregator import LevelAggregator
from claimstack.domain.claims import GLOBAL_CLAIM_COUNTRY_CODE, ClaimLevel, SourceLevel
from claimstack.domain.errors import NotFoundError
from claimstack.models.dataset import FactDataset


class RecordingProvider:
    """Wraps a provider and records get_claims_for_owner calls."""

    def __init__(self, inner):
        self._inner = inner
        self.owner_calls: list[tuple] = []

    def get_brand_for_product(self, product_id):
        return self._inner.get_brand_for_product(product_id)

    def get_ingredients_for_product(self, product_id):
        return self._inner.get_ingredients_for_product(product_id)

    def get_claims_for_owner(self, level, owner_id, country_scope):
        self.owner_calls.append((ClaimLevel(level).value, owner_id, country_scope))
        return self._inner.get_claims_for_owner(level, owner_id, country_scope)


class TestAggregate:
    def test_both_scopes_emitted(self, provider):
        candidates = LevelAggregator(provider).aggregate("p-cream", "FR")
        texts = [(c.text, c.original_country_scope) for c in candidates]
        assert ("Soothes skin", "FR") in texts
        assert ("Soothes skin", GLOBAL_CLAIM_COUNTRY_CODE) in texts
        assert len(candidates) == 3

    def test_queries_every_owner_at_both_scopes(self, provider):
        recording = RecordingProvider(provider)
        LevelAggregator(recording).aggregate("p-cream", "FR")
        assert recording.owner_calls == [
            ("brand", "b-acme", "FR"),
            ("brand", "b-acme", GLOBAL_CLAIM_COUNTRY_CODE),
            ("ingredient", "i-aloe", "FR"),
            ("ingredient", "i-aloe", GLOBAL_CLAIM_COUNTRY_CODE),
            ("product", "p-cream", "FR"),
            ("product", "p-cream", GLOBAL_CLAIM_COUNTRY_CODE),
        ]

    def test_global_country_queries_worldwide_once(self, provider):
        recording = RecordingProvider(provider)
        LevelAggregator(recording).aggregate("p-yogurt", GLOBAL_CLAIM_COUNTRY_CODE)
        assert {call[2] for call in recording.owner_calls} == {GLOBAL_CLAIM_COUNTRY_CODE}

    def test_candidate_fields(self, provider):
        (candidate,) = LevelAggregator(provider).aggregate("p-yogurt", "FR")
        assert candidate.text == "Contains dairy"
        assert candidate.source_level is SourceLevel.ingredient
        assert candidate.source_claim_id == "c-dairy"
        assert candidate.applies_to_product_id == "p-yogurt"
        assert candidate.applies_to_country == "FR"
        assert candidate.is_actually_master is False
        assert candidate.source_entity_id == "i-milk"

    def test_is_actually_master_for_exact_scope(self, provider):
        candidates = LevelAggregator(provider).aggregate("p-cream", "fr")
        fr = [c for c in candidates if c.source_claim_id == "c-soothing-fr"]
        assert fr[0].is_actually_master is True

    def test_no_claims_returns_empty_list(self, provider):
        assert LevelAggregator(provider).aggregate("p-empty", "FR") == []

    def test_missing_product_propagates(self, provider):
        with pytest.raises(NotFoundError) as exc:
            LevelAggregator(provider).aggregate("p-nope", "FR")
        assert exc.value.entity == "product"

    def test_missing_brand_propagates(self, provider):
        with pytest.raises(NotFoundError) as exc:
            LevelAggregator(provider).aggregate("p-orphan", "FR")
        assert exc.value.entity == "brand"

    def test_duplicate_ingredient_links_queried_once(self):
        dataset = FactDataset.model_validate(
            {
                "brands": [{"id": "b", "name": "B"}],
                "products": [{"id": "p", "name": "P", "brand_id": "b"}],
                "ingredients": [{"id": "i", "name": "I"}],
                "product_ingredients": [
                    {"product_id": "p", "ingredient_id": "i"},
                    {"product_id": "p", "ingredient_id": "i"},
                ],
                "claims": [
                    {"id": "c", "text": "Natural", "type": "allowed", "level": "ingredient",
                     "ingredient_id": "i"},
                ],
            }
        )
        candidates = LevelAggregator(InMemoryFactProvider(dataset)).aggregate("p", "GB")
        assert [c.source_claim_id for c in candidates] == ["c"]
