"""MatrixAssembler: claim-text x product grid for one country."""

from __future__ import annotations

import logging
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Any, Iterable

from ..config.runtime import RuntimeSettings, get_settings
from ..domain.claims import EffectiveClaim
from ..domain.errors import NotFoundError, ResolutionTimeoutError
from ..models.matrix import MatrixCell, MatrixResult, ProductRef
from .resolution_service import ClaimsResolutionService

_LOGGER = logging.getLogger("claimstack.services.matrix")


def _row_text(claim: EffectiveClaim) -> str:
    return (claim.text or "").strip()


class MatrixAssembler:
    """Run the resolution pipeline per product and reshape into a grid.

    Products are resolved independently on a bounded worker pool; each one
    gets its own ResolutionContext, so no claim or override leaks between
    columns. A product that does not exist is dropped from the columns;
    any other failure fails the whole matrix.
    """

    def __init__(
        self,
        resolution_service: ClaimsResolutionService,
        settings: RuntimeSettings | None = None,
        logger: Any = None,
    ) -> None:
        self._resolver = resolution_service
        self._settings = settings or get_settings()
        self._logger = logger or _LOGGER

    def resolve_matrix(
        self,
        product_ids: Iterable[str],
        country_code: str,
        row_limit: int | None = None,
    ) -> MatrixResult:
        country_code = (country_code or "").strip()
        if not country_code:
            raise ValueError("country_code is required")
        ids = list(dict.fromkeys(p.strip() for p in product_ids if p and p.strip()))
        limit = self._settings.clamp_row_limit(row_limit)
        request_id = self._resolver.new_request_id()

        self._logger.info(
            "matrix_start",
            extra={
                "trace_id": request_id,
                "country_code": country_code,
                "products_count": len(ids),
                "row_limit": limit,
            },
        )

        resolved = self._fan_out(ids, country_code, request_id)

        columns: list[ProductRef] = []
        per_product: dict[str, dict[str, EffectiveClaim]] = {}
        skipped: list[str] = []
        for product_id in ids:
            outcome = resolved.get(product_id)
            if outcome is None:
                skipped.append(product_id)
                continue
            ref, claims = outcome
            columns.append(ref)
            by_text: dict[str, EffectiveClaim] = {}
            for claim in claims:
                by_text.setdefault(_row_text(claim), claim)
            per_product[product_id] = by_text

        all_texts = sorted({text for by_text in per_product.values() for text in by_text})
        rows = all_texts[:limit]
        cells: dict[str, dict[str, MatrixCell]] = {}
        for text in rows:
            cells[text] = {}
            for ref in columns:
                claim = per_product[ref.id].get(text)
                cells[text][ref.id] = (
                    MatrixCell.from_effective(claim) if claim is not None else MatrixCell.empty()
                )

        result = MatrixResult(
            country_code=country_code,
            rows=rows,
            columns=columns,
            cells=cells,
            row_limit=limit,
            total_rows=len(all_texts),
            skipped_product_ids=skipped,
        )
        self._logger.info(
            "matrix_done",
            extra={
                "trace_id": request_id,
                "country_code": country_code,
                "columns_count": len(columns),
                "rows_count": len(rows),
                "total_rows": len(all_texts),
                "skipped_count": len(skipped),
            },
        )
        return result

    def resolve_brand_matrix(
        self,
        brand_id: str,
        country_code: str,
        row_limit: int | None = None,
    ) -> MatrixResult:
        """Matrix over every product of ``brand_id``, ordered by product name."""
        products = self._resolver.fact_provider.list_products(brand_id=brand_id)
        return self.resolve_matrix([p.id for p in products], country_code, row_limit)

    def _resolve_column(
        self,
        product_id: str,
        country_code: str,
        request_id: str,
    ) -> tuple[ProductRef, list[EffectiveClaim]] | None:
        try:
            product = self._resolver.fact_provider.get_product(product_id)
            claims, _ = self._resolver.resolve_with_trace(
                product_id, country_code, request_id=request_id
            )
        except NotFoundError as exc:
            self._logger.info(
                "matrix_product_skipped",
                extra={
                    "trace_id": request_id,
                    "product_id": product_id,
                    "entity": exc.entity,
                    "entity_id": exc.entity_id,
                },
            )
            return None
        return ProductRef(id=product.id, name=product.name), claims

    def _fan_out(
        self,
        product_ids: list[str],
        country_code: str,
        request_id: str,
    ) -> dict[str, tuple[ProductRef, list[EffectiveClaim]] | None]:
        if not product_ids:
            return {}
        workers = min(self._settings.matrix_max_workers, len(product_ids))
        timeout = self._settings.request_timeout_seconds
        pool = ThreadPoolExecutor(max_workers=workers, thread_name_prefix="claims-matrix")
        try:
            futures: dict[str, Future] = {
                pid: pool.submit(self._resolve_column, pid, country_code, request_id)
                for pid in product_ids
            }
            done, pending = wait(futures.values(), timeout=timeout, return_when=FIRST_EXCEPTION)
            failed = [f for f in done if f.exception() is not None]
            if failed:
                raise failed[0].exception()
            if pending:
                raise ResolutionTimeoutError(
                    f"matrix resolution for {len(pending)} of {len(product_ids)} products "
                    f"exceeded {timeout}s"
                )
            return {pid: future.result() for pid, future in futures.items()}
        finally:
            pool.shutdown(wait=False, cancel_futures=True)
