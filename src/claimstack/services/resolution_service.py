"""ClaimsResolutionService: effective claims for one product in one country."""

from __future__ import annotations

import logging
from typing import Any

from ..domain.aggregator import LevelAggregator
from ..domain.claims import EffectiveClaim
from ..domain.context import ResolutionContext
from ..domain.deduplicator import PrecedenceDeduplicator
from ..domain.override_resolver import OverrideResolver
from ..models.summary import ClaimsSummary
from ..ports.fact_provider import FactProvider
from ..ports.id_gen import RequestIdProvider, UuidRequestIdProvider
from .summary import summarize_claims

_LOGGER = logging.getLogger("claimstack.services.resolution")


class ClaimsResolutionService:
    """Orchestrates aggregate -> apply overrides -> dedupe for one product.

    Every call builds a fresh ResolutionContext; the service itself holds no
    mutable state and is safe to share between threads.
    """

    def __init__(
        self,
        fact_provider: FactProvider,
        aggregator: LevelAggregator | None = None,
        override_resolver: OverrideResolver | None = None,
        deduplicator: PrecedenceDeduplicator | None = None,
        request_id_provider: RequestIdProvider | None = None,
        logger: Any = None,
    ) -> None:
        self._provider = fact_provider
        self._logger = logger or _LOGGER
        self._aggregator = aggregator or LevelAggregator(fact_provider)
        self._overrides = override_resolver or OverrideResolver(logger=self._logger)
        self._dedupe = deduplicator or PrecedenceDeduplicator()
        self._req_id = request_id_provider or UuidRequestIdProvider()

    @property
    def fact_provider(self) -> FactProvider:
        return self._provider

    def new_request_id(self) -> str:
        return self._req_id.new_request_id()

    def resolve_effective_claims(self, product_id: str, country_code: str) -> list[EffectiveClaim]:
        """Return one resolved claim per distinct text.

        Raises NotFoundError when the product or its brand does not exist and
        lets provider failures propagate unchanged.
        """
        claims, _ = self.resolve_with_trace(product_id, country_code)
        return claims

    def resolve_with_trace(
        self,
        product_id: str,
        country_code: str,
        request_id: str | None = None,
    ) -> tuple[list[EffectiveClaim], dict[str, Any]]:
        """Resolve and also return the audit trace (warnings, dedupe decisions)."""
        product_id = (product_id or "").strip()
        country_code = (country_code or "").strip()
        if not product_id:
            raise ValueError("product_id is required")
        if not country_code:
            raise ValueError("country_code is required")

        context = ResolutionContext(
            self._provider,
            product_id,
            country_code,
            request_id=request_id or self._req_id.new_request_id(),
        )
        self._logger.info(
            "resolve_start",
            extra={
                "trace_id": context.request_id,
                "product_id": product_id,
                "country_code": country_code,
            },
        )

        candidates = self._aggregator.aggregate(product_id, country_code)
        candidates = self._overrides.apply_overrides(candidates, context)
        effective = self._dedupe.dedupe(candidates, context)

        trace = context.trace()
        trace["candidates_count"] = len(candidates)
        trace["effective_count"] = len(effective)
        self._logger.info(
            "resolve_done",
            extra={
                "trace_id": context.request_id,
                "product_id": product_id,
                "country_code": country_code,
                "candidates_count": len(candidates),
                "effective_count": len(effective),
                "warnings_count": len(context.warnings),
            },
        )
        return effective, trace

    def summarize(self, product_id: str, country_code: str) -> ClaimsSummary:
        """Resolve and render the grouped, non-AI claims summary."""
        product_id = (product_id or "").strip()
        claims = self.resolve_effective_claims(product_id, country_code)
        product = self._provider.get_product(product_id)
        brand_name = None
        if product.brand_id:
            brand_name = self._provider.get_brand(product.brand_id).name
        return summarize_claims(claims, product_name=product.name, brand_name=brand_name)
