"""Port interfaces (Protocols).

Services depend only on these, never on concrete adapters.
No sqlite or other infrastructure imports allowed here.
"""

from .fact_provider import FactProvider
from .id_gen import RequestIdProvider, UuidRequestIdProvider

__all__ = [
    "FactProvider",
    "RequestIdProvider",
    "UuidRequestIdProvider",
]
