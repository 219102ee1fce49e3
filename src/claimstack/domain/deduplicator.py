"""PrecedenceDeduplicator: one winner per distinct claim text."""

from __future__ import annotations

from typing import Any

from .claims import EffectiveClaim, SourceLevel
from .context import ResolutionContext
from .semantics import (
    RULE_BLOCK_DOMINATES,
    RULE_FIRST_SEEN,
    RULE_LEVEL_SPECIFICITY,
    RULE_MARKET_OVER_GLOBAL,
    RULE_REPLACEMENT_OVER_BASE,
)

# Override-sourced candidates are settled by the block/replacement rules.
_LEVEL_SCORE = {
    SourceLevel.product: 3,
    SourceLevel.ingredient: 2,
    SourceLevel.brand: 1,
    SourceLevel.override: 0,
}


def _level_score(claim: EffectiveClaim) -> int:
    return _LEVEL_SCORE.get(claim.source_level, 0)


def compare_precedence(a: EffectiveClaim, b: EffectiveClaim) -> tuple[int, str]:
    """Compare two same-text candidates.

    Returns ``(result, rule)`` where ``result`` is negative when ``a`` outranks
    ``b``, positive when ``b`` outranks ``a`` and zero when neither does.
    ``rule`` names the first rule of the ladder that discriminated, or the
    stability rule on a full tie.
    """
    if a.is_blocked_override != b.is_blocked_override:
        return (-1 if a.is_blocked_override else 1), RULE_BLOCK_DOMINATES
    if a.is_replacement_override != b.is_replacement_override:
        return (-1 if a.is_replacement_override else 1), RULE_REPLACEMENT_OVER_BASE
    if a.is_market_specific != b.is_market_specific:
        return (-1 if a.is_market_specific else 1), RULE_MARKET_OVER_GLOBAL
    score_a, score_b = _level_score(a), _level_score(b)
    if score_a != score_b:
        return (-1 if score_a > score_b else 1), RULE_LEVEL_SPECIFICITY
    return 0, RULE_FIRST_SEEN


class PrecedenceDeduplicator:
    """Collapse candidates rendering to the same trimmed text.

    Implemented as a left fold: the incumbent for a text is only displaced
    by a challenger that strictly outranks it, so ties keep the first seen.
    Output follows the order in which each text first appeared.
    """

    def dedupe(
        self,
        candidates: list[EffectiveClaim],
        context: ResolutionContext | None = None,
    ) -> list[EffectiveClaim]:
        winners: dict[Any, EffectiveClaim] = {}
        for candidate in candidates:
            key = candidate.dedupe_key
            if key not in winners:
                winners[key] = candidate
                continue
            incumbent = winners[key]
            result, rule = compare_precedence(incumbent, candidate)
            if result > 0:
                winners[key] = candidate
            if context is not None:
                context.record_decision(
                    {
                        "text": key,
                        "kept_claim_id": winners[key].source_claim_id,
                        "dropped_claim_id": (
                            incumbent.source_claim_id if result > 0 else candidate.source_claim_id
                        ),
                        "rule": rule,
                    }
                )
        return list(winners.values())
