"""ClaimsResolutionService tests: end-to-end scenarios over the in-memory provider."""

import pytest

from claimstack.adapters.memory_fact_provider import InMemoryFactProvider
from claimstack.domain.claims import FinalClaimType, SourceLevel
from claimstack.domain.errors import NotFoundError, ProviderUnavailableError, WARN_MISSING_REPLACEMENT
from claimstack.domain.semantics import RULE_MARKET_OVER_GLOBAL
from claimstack.models.dataset import FactDataset
from claimstack.services.resolution_service import ClaimsResolutionService

from conftest import make_dataset


class FixedRequestIdProvider:
    def new_request_id(self) -> str:
        return "req-fixed"


class FailingProvider:
    """Every call fails the way a broken database would."""

    def get_brand_for_product(self, product_id):
        raise ProviderUnavailableError("connection refused")

    def get_ingredients_for_product(self, product_id):
        raise ProviderUnavailableError("connection refused")


def _make_service(dataset: FactDataset | None = None) -> ClaimsResolutionService:
    provider = InMemoryFactProvider(dataset or make_dataset())
    return ClaimsResolutionService(provider, request_id_provider=FixedRequestIdProvider())


class TestScenarios:
    def test_single_worldwide_ingredient_claim(self):
        (claim,) = _make_service().resolve_effective_claims("p-yogurt", "FR")
        assert claim.text == "Contains dairy"
        assert claim.final_type is FinalClaimType.allowed
        assert claim.source_level is SourceLevel.ingredient
        assert claim.is_actually_master is False

    def test_worldwide_block(self):
        dataset = make_dataset()
        dataset.market_overrides = [o for o in dataset.market_overrides if o.id == "o-block"]
        claims = _make_service(dataset).resolve_effective_claims("p-cream", "DE")
        (blocked,) = [c for c in claims if c.text == "Clinically proven"]
        assert blocked.final_type is FinalClaimType.none
        assert blocked.is_blocked_override is True

    def test_country_replacement_beats_worldwide_block(self):
        service = _make_service()
        de = service.resolve_effective_claims("p-cream", "DE")
        (replaced,) = [c for c in de if c.text == "Dermatologically tested"]
        assert replaced.final_type is FinalClaimType.allowed
        assert replaced.is_replacement_override is True
        assert replaced.original_master_claim_id_if_overridden == "c-clinical"
        assert not any(c.text == "Clinically proven" for c in de)

        gb = service.resolve_effective_claims("p-cream", "GB")
        (blocked,) = [c for c in gb if c.text == "Clinically proven"]
        assert blocked.is_blocked_override is True

    def test_market_claim_wins_over_more_specific_worldwide_level(self):
        claims = _make_service().resolve_effective_claims("p-cream", "FR")
        (soothing,) = [c for c in claims if c.text == "Soothes skin"]
        assert soothing.original_country_scope == "FR"
        assert soothing.source_level is SourceLevel.brand
        assert soothing.final_type is FinalClaimType.mandatory

    def test_no_claims_is_empty_not_error(self):
        assert _make_service().resolve_effective_claims("p-empty", "FR") == []

    def test_conditional_type_flows_through(self):
        (claim,) = _make_service().resolve_effective_claims("p-serum", "GB")[-1:]
        assert claim.final_type is FinalClaimType.conditional


class TestProperties:
    def test_idempotent(self):
        service = _make_service()
        first = service.resolve_effective_claims("p-cream", "DE")
        second = service.resolve_effective_claims("p-cream", "DE")
        assert [c.model_dump() for c in first] == [c.model_dump() for c in second]

    def test_text_unique(self):
        claims = _make_service().resolve_effective_claims("p-cream", "FR")
        keys = [c.dedupe_key for c in claims]
        assert len(keys) == len(set(keys))

    def test_inputs_are_trimmed(self):
        service = _make_service()
        assert service.resolve_effective_claims(" p-yogurt ", " FR ") == service.resolve_effective_claims(
            "p-yogurt", "FR"
        )


class TestErrors:
    def test_missing_product_raises(self):
        with pytest.raises(NotFoundError):
            _make_service().resolve_effective_claims("p-nope", "FR")

    def test_missing_brand_raises(self):
        with pytest.raises(NotFoundError) as exc:
            _make_service().resolve_effective_claims("p-orphan", "FR")
        assert exc.value.entity == "brand"

    @pytest.mark.parametrize("product_id,country", [("", "FR"), ("p-yogurt", "  ")])
    def test_empty_inputs_rejected(self, product_id, country):
        with pytest.raises(ValueError):
            _make_service().resolve_effective_claims(product_id, country)

    def test_provider_failure_propagates(self):
        service = ClaimsResolutionService(FailingProvider())
        with pytest.raises(ProviderUnavailableError):
            service.resolve_effective_claims("p-1", "FR")


class TestTrace:
    def test_trace_records_decisions(self):
        _, trace = _make_service().resolve_with_trace("p-cream", "FR")
        assert trace["request_id"] == "req-fixed"
        assert trace["candidates_count"] == 3
        assert trace["effective_count"] == 2
        assert trace["decisions"] == [
            {
                "text": "Soothes skin",
                "kept_claim_id": "c-soothing-fr",
                "dropped_claim_id": "c-soothing",
                "rule": RULE_MARKET_OVER_GLOBAL,
            }
        ]

    def test_dangling_replacement_warning(self):
        dataset = make_dataset()
        dataset.market_overrides = [
            o.model_copy(update={"replacement_claim_id": "c-gone"})
            for o in dataset.market_overrides
            if o.id == "o-de"
        ]
        claims, trace = _make_service(dataset).resolve_with_trace("p-cream", "DE")
        (clinical,) = [c for c in claims if c.text == "Clinically proven"]
        assert clinical.final_type is FinalClaimType.allowed
        assert [w["kind"] for w in trace["warnings"]] == [WARN_MISSING_REPLACEMENT]


class TestSummary:
    def test_summary_groups_and_blocks(self):
        summary = _make_service().summarize("p-cream", "GB")
        assert summary.introductory_sentence == "Approved claims for Cream by Acme."
        assert summary.blocked_claims == ["Clinically proven"]
        ingredient = next(g for g in summary.grouped_claims if g.level == "Ingredient")
        assert ingredient.allowed_claims == ["Soothes skin"]
