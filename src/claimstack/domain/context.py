"""Request-scoped state for a single resolution call."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable

from .claims import Claim
from .errors import DataIntegrityWarning

if TYPE_CHECKING:
    from ..ports.fact_provider import FactProvider


class ResolutionContext:
    """Memoized lookups, warnings and audit decisions for one resolution.

    One instance per product per request. Never shared between products or
    requests, so concurrent resolutions stay isolated.
    """

    def __init__(
        self,
        provider: FactProvider,
        product_id: str,
        country_code: str,
        request_id: str = "",
    ) -> None:
        self.provider = provider
        self.product_id = product_id
        self.country_code = country_code
        self.request_id = request_id
        self.warnings: list[DataIntegrityWarning] = []
        self.decisions: list[dict[str, Any]] = []
        self._claims: dict[str, Claim | None] = {}

    def get_claims_by_ids(self, ids: Iterable[str]) -> dict[str, Claim]:
        """Fetch claims by id, hitting the provider once per unseen id."""
        wanted = list(dict.fromkeys(i for i in ids if i))
        missing = [i for i in wanted if i not in self._claims]
        if missing:
            fetched = {c.id: c for c in self.provider.get_claims_by_ids(missing)}
            for claim_id in missing:
                self._claims[claim_id] = fetched.get(claim_id)
        return {i: self._claims[i] for i in wanted if self._claims.get(i) is not None}

    def remember_claims(self, claims: Iterable[Claim]) -> None:
        """Seed the cache with rows already in hand (e.g. inline replacements)."""
        for claim in claims:
            self._claims.setdefault(claim.id, claim)

    def warn(self, warning: DataIntegrityWarning) -> None:
        self.warnings.append(warning)

    def record_decision(self, decision: dict[str, Any]) -> None:
        self.decisions.append(decision)

    def trace(self) -> dict[str, Any]:
        return {
            "request_id": self.request_id,
            "product_id": self.product_id,
            "country_code": self.country_code,
            "warnings": [w.to_dict() for w in self.warnings],
            "decisions": list(self.decisions),
        }
