"""
Storage Services Package

Provides the abstract persistence gateway and its local implementations.
JSON files on disk are the default backend; the in-memory gateway is for tests.
"""

from lumina.services.storage.interface import (
    PersistenceError,
    PersistenceGateway,
)
from lumina.services.storage.json_file import JsonFileGateway
from lumina.services.storage.memory import InMemoryGateway

__all__ = [
    # Interface
    "PersistenceGateway",
    # Exceptions
    "PersistenceError",
    # Implementations
    "InMemoryGateway",
    "JsonFileGateway",
]
