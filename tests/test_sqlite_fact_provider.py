"""SqliteFactProvider tests against a temporary database."""

import sqlite3

import pytest

from claimstack.adapters.sqlite_fact_provider import SqliteFactProvider
from claimstack.domain.claims import ALL_COUNTRIES_CODE, GLOBAL_CLAIM_COUNTRY_CODE, ClaimLevel
from claimstack.domain.errors import NotFoundError, ProviderUnavailableError
from claimstack.services.resolution_service import ClaimsResolutionService

from conftest import make_dataset


@pytest.fixture
def sqlite_provider(tmp_path) -> SqliteFactProvider:
    provider = SqliteFactProvider(str(tmp_path / "nested" / "claims.db"))
    provider.load_dataset(make_dataset())
    return provider


class TestSchemaAndSeed:
    def test_creates_parent_dir_and_schema(self, tmp_path):
        path = tmp_path / "a" / "b" / "claims.db"
        SqliteFactProvider(str(path))
        with sqlite3.connect(path) as conn:
            tables = {r[0] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert {"brands", "products", "claims", "market_claim_overrides"} <= tables

    def test_load_counts(self, tmp_path):
        provider = SqliteFactProvider(str(tmp_path / "claims.db"))
        counts = provider.load_dataset(make_dataset())
        assert counts["products"] == 5
        assert counts["claims"] == 6
        assert counts["market_overrides"] == 2

    def test_reload_is_upsert(self, sqlite_provider):
        sqlite_provider.load_dataset(make_dataset())
        assert len(sqlite_provider.list_products()) == 5


class TestReads:
    def test_get_product(self, sqlite_provider):
        product = sqlite_provider.get_product("p-cream")
        assert product.name == "Cream"
        assert product.brand_id == "b-acme"

    def test_missing_product(self, sqlite_provider):
        with pytest.raises(NotFoundError):
            sqlite_provider.get_product("p-nope")

    def test_brand_for_product(self, sqlite_provider):
        assert sqlite_provider.get_brand_for_product("p-cream") == "b-acme"
        with pytest.raises(NotFoundError) as exc:
            sqlite_provider.get_brand_for_product("p-orphan")
        assert exc.value.entity == "brand"

    def test_list_products_by_brand(self, sqlite_provider):
        assert [p.id for p in sqlite_provider.list_products(brand_id="b-acme")] == ["p-cream", "p-serum"]

    def test_claims_for_owner_by_scope(self, sqlite_provider):
        fr = sqlite_provider.get_claims_for_owner(ClaimLevel.brand, "b-acme", "fr")
        worldwide = sqlite_provider.get_claims_for_owner(ClaimLevel.brand, "b-acme", GLOBAL_CLAIM_COUNTRY_CODE)
        assert [c.id for c in fr] == ["c-soothing-fr"]
        assert [c.id for c in worldwide] == ["c-clinical"]

    def test_claims_by_ids_ignores_unknown(self, sqlite_provider):
        assert [c.id for c in sqlite_provider.get_claims_by_ids(["c-derm", "c-gone"])] == ["c-derm"]

    def test_overrides_carry_replacement(self, sqlite_provider):
        (german,) = sqlite_provider.get_overrides_for_master_claims(["c-clinical"], "p-cream", "DE")
        assert german.replacement_claim is not None
        assert german.replacement_claim.text == "Dermatologically tested"
        (worldwide,) = sqlite_provider.get_overrides_for_master_claims(
            ["c-clinical"], "p-cream", ALL_COUNTRIES_CODE
        )
        assert worldwide.is_blocked is True
        assert worldwide.replacement_claim is None

    def test_overrides_scoped_to_product(self, sqlite_provider):
        assert sqlite_provider.get_overrides_for_master_claims(["c-clinical"], "p-serum", "DE") == []


class TestFailures:
    def test_query_error_wrapped(self, tmp_path):
        path = tmp_path / "claims.db"
        provider = SqliteFactProvider(str(path))
        with sqlite3.connect(path) as conn:
            conn.execute("DROP TABLE products")
        with pytest.raises(ProviderUnavailableError):
            provider.get_product("p-cream")


class TestResolutionOverSqlite:
    def test_matches_in_memory_resolution(self, sqlite_provider, provider):
        over_sqlite = ClaimsResolutionService(sqlite_provider).resolve_effective_claims("p-cream", "DE")
        in_memory = ClaimsResolutionService(provider).resolve_effective_claims("p-cream", "DE")
        assert [c.model_dump() for c in over_sqlite] == [c.model_dump() for c in in_memory]
