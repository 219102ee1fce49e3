"""Services: resolution, matrix, summary; pipeline stages live in domain."""

from ..domain.aggregator import LevelAggregator
from ..domain.deduplicator import PrecedenceDeduplicator
from ..domain.override_resolver import OverrideResolver
from .matrix_service import MatrixAssembler
from .resolution_service import ClaimsResolutionService
from .summary import summarize_claims

__all__ = [
    "ClaimsResolutionService",
    "LevelAggregator",
    "MatrixAssembler",
    "OverrideResolver",
    "PrecedenceDeduplicator",
    "summarize_claims",
]
