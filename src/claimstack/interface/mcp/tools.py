"""Tool registry for the claims MCP server.

Request shaping (trimmed ids, clamped row limits); response allowlists
(field-level). Domain errors come back as JSON error payloads instead of
tool failures so the calling model can read them.
"""

from __future__ import annotations

import json
import time
from typing import Any

from .observability import log_tool_invocation

from claimstack.domain.claims import EffectiveClaim
from claimstack.domain.errors import ClaimsError, NotFoundError
from claimstack.models.matrix import MatrixResult

ALLOWED_TOOLS = frozenset({"claims_resolve", "claims_matrix", "claims_summary"})

# ---------------------------------------------------------------------------
# Response allowlists (field-level)
# ---------------------------------------------------------------------------
ALLOWED_EFFECTIVE_CLAIM_KEYS = frozenset({
    "text",
    "final_type",
    "source_level",
    "source_claim_id",
    "applies_to_product_id",
    "applies_to_country",
    "original_country_scope",
    "is_actually_master",
    "is_blocked_override",
    "is_replacement_override",
    "original_master_claim_id_if_overridden",
    "description",
    "override_rule_id",
})
ALLOWED_MATRIX_CELL_KEYS = frozenset({
    "final_type",
    "has_data",
    "source_level",
    "source_claim_id",
    "is_actually_master",
    "is_blocked_override",
    "is_replacement_override",
    "original_master_claim_id_if_overridden",
    "description",
    "active_override",
})
ALLOWED_MATRIX_RESPONSE_KEYS = frozenset({
    "country_code", "rows", "columns", "cells", "row_limit", "total_rows", "skipped_product_ids",
})
ALLOWED_TRACE_KEYS = frozenset({"request_id", "warnings", "decisions", "candidates_count", "effective_count"})


def _shape_effective_claim(claim: EffectiveClaim) -> dict:
    d = claim.model_dump(mode="json")
    return {k: d[k] for k in ALLOWED_EFFECTIVE_CLAIM_KEYS if k in d}


def _shape_matrix(result: MatrixResult) -> dict:
    d = result.model_dump(mode="json")
    out: dict = {k: d[k] for k in ALLOWED_MATRIX_RESPONSE_KEYS if k in d}
    out["cells"] = {
        text: {
            pid: {k: cell[k] for k in ALLOWED_MATRIX_CELL_KEYS if k in cell}
            for pid, cell in row.items()
        }
        for text, row in d.get("cells", {}).items()
    }
    out["truncated"] = result.truncated
    return out


def _error_payload(exc: ClaimsError) -> dict:
    payload: dict[str, Any] = {"error": type(exc).__name__, "detail": str(exc)}
    if isinstance(exc, NotFoundError):
        payload["entity"] = exc.entity
        payload["entity_id"] = exc.entity_id
    return payload


def _get_resolution_service():
    from claimstack.wiring import build_resolution_service
    return build_resolution_service()


def _get_matrix_assembler():
    from claimstack.wiring import build_matrix_assembler
    return build_matrix_assembler()


# ---------------------------------------------------------------------------
# Tool bodies (plain functions so they can be driven without a server)
# ---------------------------------------------------------------------------

def resolve_payload(service, product_id: str, country_code: str, include_trace: bool = False) -> dict:
    """Effective claims for one product in one country, shaped for the wire."""
    claims, trace = service.resolve_with_trace(product_id, country_code)
    out: dict[str, Any] = {
        "product_id": product_id.strip(),
        "country_code": country_code.strip(),
        "claims": [_shape_effective_claim(c) for c in claims],
    }
    if include_trace:
        out["trace"] = {k: trace[k] for k in ALLOWED_TRACE_KEYS if k in trace}
    return out


def matrix_payload(
    assembler,
    country_code: str,
    product_ids: list[str] | None = None,
    brand_id: str | None = None,
    row_limit: int | None = None,
) -> dict:
    """Claim-text x product grid, either for explicit products or a whole brand."""
    if brand_id:
        result = assembler.resolve_brand_matrix(brand_id.strip(), country_code, row_limit=row_limit)
    else:
        result = assembler.resolve_matrix(product_ids or [], country_code, row_limit=row_limit)
    return _shape_matrix(result)


def summary_payload(service, product_id: str, country_code: str) -> dict:
    return service.summarize(product_id, country_code).model_dump(mode="json")


def _invoke(tool: str, body) -> str:
    t0 = time.monotonic()
    try:
        out = body()
    except ClaimsError as exc:
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation(tool, None, latency_ms, error=type(exc).__name__)
        return json.dumps(_error_payload(exc), indent=2)
    except ValueError as exc:
        latency_ms = (time.monotonic() - t0) * 1000
        log_tool_invocation(tool, None, latency_ms, error="ValueError")
        return json.dumps({"error": "ValueError", "detail": str(exc)}, indent=2)
    latency_ms = (time.monotonic() - t0) * 1000
    log_tool_invocation(tool, out.get("trace", {}).get("request_id"), latency_ms)
    return json.dumps(out, indent=2)


def register_tools(mcp):
    """Register the read-only claims tools."""

    @mcp.tool()
    def claims_resolve(product_id: str, country_code: str, include_trace: bool = False) -> str:
        """Resolve the effective claims for a product in a country.

        Args:
            product_id: Product identifier
            country_code: Market code, e.g. 'GB' (or '__GLOBAL__' for worldwide only)
            include_trace: Also return warnings and dedupe decisions

        Returns:
            JSON with product_id, country_code, claims (one per distinct text) and optional trace
        """
        return _invoke(
            "claims_resolve",
            lambda: resolve_payload(_get_resolution_service(), product_id, country_code, include_trace),
        )

    @mcp.tool()
    def claims_matrix(
        country_code: str,
        product_ids: list[str] | None = None,
        brand_id: str | None = None,
        row_limit: int | None = None,
    ) -> str:
        """Build the claim-text x product matrix for one country.

        Args:
            country_code: Market code
            product_ids: Products to compare (ignored when brand_id is given)
            brand_id: Use every product of this brand as columns
            row_limit: Maximum rows; clamped to the configured hard cap

        Returns:
            JSON with rows, columns, cells (text -> product id -> cell), truncated, skipped_product_ids
        """
        return _invoke(
            "claims_matrix",
            lambda: matrix_payload(_get_matrix_assembler(), country_code, product_ids, brand_id, row_limit),
        )

    @mcp.tool()
    def claims_summary(product_id: str, country_code: str) -> str:
        """Grouped plain-text summary of a product's resolved claims.

        Args:
            product_id: Product identifier
            country_code: Market code

        Returns:
            JSON with introductory_sentence, grouped_claims by level, blocked_claims
        """
        return _invoke(
            "claims_summary",
            lambda: summary_payload(_get_resolution_service(), product_id, country_code),
        )
