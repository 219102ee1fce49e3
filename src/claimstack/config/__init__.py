"""Runtime configuration."""

from .runtime import FactProviderKind, RuntimeSettings, get_settings

__all__ = ["FactProviderKind", "RuntimeSettings", "get_settings"]
