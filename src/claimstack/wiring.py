"""Composition root: single place where all wiring happens.

Call ``build_resolution_service()`` or ``build_matrix_assembler()`` to get a
fully-constructed service with the configured fact provider. No ad-hoc
construction elsewhere.
"""

from __future__ import annotations

from .adapters.memory_fact_provider import InMemoryFactProvider
from .adapters.sqlite_fact_provider import SqliteFactProvider
from .config.runtime import FactProviderKind, RuntimeSettings, get_settings
from .ports.fact_provider import FactProvider
from .services.matrix_service import MatrixAssembler
from .services.resolution_service import ClaimsResolutionService


def build_fact_provider(settings: RuntimeSettings | None = None) -> FactProvider:
    """Construct the fact provider selected by ``settings.fact_provider``."""
    settings = settings or get_settings()
    if settings.fact_provider is FactProviderKind.memory:
        return InMemoryFactProvider.from_json_file(settings.claims_dataset_path)
    return SqliteFactProvider(
        settings.claims_db_path, timeout_seconds=settings.sqlite_timeout_seconds
    )


def build_resolution_service(
    settings: RuntimeSettings | None = None,
    fact_provider: FactProvider | None = None,
) -> ClaimsResolutionService:
    """Construct a ClaimsResolutionService with real adapters."""
    settings = settings or get_settings()
    return ClaimsResolutionService(fact_provider or build_fact_provider(settings))


def build_matrix_assembler(
    settings: RuntimeSettings | None = None,
    fact_provider: FactProvider | None = None,
) -> MatrixAssembler:
    """Construct a MatrixAssembler sharing one provider across its workers."""
    settings = settings or get_settings()
    return MatrixAssembler(
        build_resolution_service(settings, fact_provider=fact_provider),
        settings=settings,
    )
