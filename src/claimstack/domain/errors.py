"""Error taxonomy for claim resolution."""

from __future__ import annotations

from dataclasses import dataclass


class ClaimsError(Exception):
    """Base class for resolution errors surfaced to callers."""


class NotFoundError(ClaimsError):
    """A requested product (or its brand) does not exist."""

    def __init__(self, entity: str, entity_id: str) -> None:
        super().__init__(f"{entity} not found: {entity_id}")
        self.entity = entity
        self.entity_id = entity_id


class ProviderUnavailableError(ClaimsError):
    """The fact provider failed (connectivity, timeout, storage error)."""


class ResolutionTimeoutError(ClaimsError):
    """A resolution did not complete within the request timeout."""


@dataclass(frozen=True)
class DataIntegrityWarning:
    """A dangling reference found in override data. Logged, never raised."""

    kind: str
    message: str
    override_id: str | None = None
    claim_id: str | None = None

    def to_dict(self) -> dict:
        return {
            "kind": self.kind,
            "message": self.message,
            "override_id": self.override_id,
            "claim_id": self.claim_id,
        }


WARN_MISSING_REPLACEMENT = "missing_replacement_claim"
WARN_MISSING_MASTER = "missing_master_claim"
