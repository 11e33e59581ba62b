"""Application ports - interfaces for external adapters."""

from gatekeeper.application.ports.cache_backend import CacheBackend, CacheError
from gatekeeper.application.ports.unit_of_work import UnitOfWork, UnitOfWorkFactory

__all__ = [
    "CacheBackend",
    "CacheError",
    "UnitOfWork",
    "UnitOfWorkFactory",
]
