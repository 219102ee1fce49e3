"""Concrete adapter implementations."""

from .memory_fact_provider import InMemoryFactProvider
from .sqlite_fact_provider import SqliteFactProvider

__all__ = [
    "InMemoryFactProvider",
    "SqliteFactProvider",
]
