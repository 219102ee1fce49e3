"""OverrideResolver: applies market overrides (block / replace) to candidates."""

from __future__ import annotations

import logging
from typing import Any

from .claims import (
    ALL_COUNTRIES_CODE,
    Claim,
    EffectiveClaim,
    FinalClaimType,
    MarketOverride,
    SourceLevel,
    is_all_countries_code,
    same_country,
)
from .context import ResolutionContext
from .errors import WARN_MISSING_MASTER, WARN_MISSING_REPLACEMENT, DataIntegrityWarning

_LOGGER = logging.getLogger("claimstack.domain.overrides")


def select_override(
    overrides: list[MarketOverride],
    country_code: str,
) -> MarketOverride | None:
    """Pick the override that applies in ``country_code``.

    A country-specific override strictly dominates the all-markets one.
    Among several rows for the same scope the first one wins.
    """
    fallback: MarketOverride | None = None
    for override in overrides:
        if same_country(override.market_scope, country_code):
            return override
        if fallback is None and override.is_all_markets:
            fallback = override
    return fallback


class OverrideResolver:
    """Transform candidates whose master claim has a market override."""

    def __init__(self, logger: Any = None) -> None:
        self._logger = logger or _LOGGER

    def apply_overrides(
        self,
        candidates: list[EffectiveClaim],
        context: ResolutionContext,
    ) -> list[EffectiveClaim]:
        master_ids = list(
            dict.fromkeys(c.source_claim_id for c in candidates if c.source_claim_id)
        )
        if not master_ids:
            return list(candidates)

        by_master = self._fetch_overrides(master_ids, context)
        selected: dict[str, MarketOverride] = {}
        for master_id, rows in by_master.items():
            override = select_override(rows, context.country_code)
            if override is not None:
                selected[master_id] = override
        replacements = self._fetch_replacements(selected.values(), context)

        resolved: list[EffectiveClaim] = []
        for candidate in candidates:
            override = selected.get(candidate.source_claim_id) if candidate.source_claim_id else None
            if override is None:
                resolved.append(candidate)
                continue
            resolved.append(self._apply(candidate, override, replacements, context))
        return resolved

    def _fetch_overrides(
        self,
        master_ids: list[str],
        context: ResolutionContext,
    ) -> dict[str, list[MarketOverride]]:
        provider = context.provider
        rows: list[MarketOverride] = []
        if not is_all_countries_code(context.country_code):
            rows.extend(
                provider.get_overrides_for_master_claims(
                    master_ids, context.product_id, context.country_code
                )
            )
        rows.extend(
            provider.get_overrides_for_master_claims(
                master_ids, context.product_id, ALL_COUNTRIES_CODE
            )
        )

        known = set(master_ids)
        by_master: dict[str, list[MarketOverride]] = {}
        for override in rows:
            if override.target_product_id != context.product_id:
                continue
            if override.master_claim_id not in known:
                self._warn(
                    context,
                    DataIntegrityWarning(
                        kind=WARN_MISSING_MASTER,
                        message=(
                            f"override {override.id} references master claim "
                            f"{override.master_claim_id} which is not among candidates"
                        ),
                        override_id=override.id,
                        claim_id=override.master_claim_id,
                    ),
                )
                continue
            by_master.setdefault(override.master_claim_id, []).append(override)
        return by_master

    def _fetch_replacements(
        self,
        overrides,
        context: ResolutionContext,
    ) -> dict[str, Claim]:
        wanted: list[str] = []
        for override in overrides:
            if override.is_blocked or not override.replacement_claim_id:
                continue
            if override.replacement_claim is not None:
                context.remember_claims([override.replacement_claim])
            wanted.append(override.replacement_claim_id)
        if not wanted:
            return {}
        return context.get_claims_by_ids(wanted)

    def _apply(
        self,
        candidate: EffectiveClaim,
        override: MarketOverride,
        replacements: dict[str, Claim],
        context: ResolutionContext,
    ) -> EffectiveClaim:
        master_id = override.master_claim_id
        if override.is_blocked:
            return candidate.model_copy(
                update={
                    "final_type": FinalClaimType.none,
                    "is_blocked_override": True,
                    "original_master_claim_id_if_overridden": master_id,
                    "override_rule_id": override.id,
                }
            )

        if not override.replacement_claim_id:
            return candidate

        replacement = replacements.get(override.replacement_claim_id)
        if replacement is None:
            self._warn(
                context,
                DataIntegrityWarning(
                    kind=WARN_MISSING_REPLACEMENT,
                    message=(
                        f"override {override.id} names replacement claim "
                        f"{override.replacement_claim_id} which does not exist"
                    ),
                    override_id=override.id,
                    claim_id=override.replacement_claim_id,
                ),
            )
            return candidate

        return candidate.model_copy(
            update={
                "text": replacement.text,
                "final_type": FinalClaimType(replacement.type.value),
                "description": replacement.description,
                "source_level": SourceLevel.override,
                "source_claim_id": replacement.id,
                "original_country_scope": replacement.country_scope,
                "is_actually_master": same_country(replacement.country_scope, context.country_code),
                "is_replacement_override": True,
                "original_master_claim_id_if_overridden": master_id,
                "override_rule_id": override.id,
                "original_claim_text": candidate.text,
                "source_entity_id": replacement.owner_id,
            }
        )

    def _warn(self, context: ResolutionContext, warning: DataIntegrityWarning) -> None:
        context.warn(warning)
        self._logger.warning(
            "data_integrity_warning",
            extra={
                "trace_id": context.request_id,
                "product_id": context.product_id,
                "country_code": context.country_code,
                "kind": warning.kind,
                "override_id": warning.override_id,
                "claim_id": warning.claim_id,
                "detail": warning.message,
            },
        )
