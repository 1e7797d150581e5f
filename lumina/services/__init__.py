"""Services package."""

from lumina.services.storage import (
    InMemoryGateway,
    JsonFileGateway,
    PersistenceError,
    PersistenceGateway,
)
from lumina.services.sync import (
    DecodeError,
    MissingFieldError,
    SyncCodec,
    SyncError,
    SyncSnapshot,
)

__all__ = [
    # Storage services
    "InMemoryGateway",
    "JsonFileGateway",
    "PersistenceError",
    "PersistenceGateway",
    # Sync services
    "DecodeError",
    "MissingFieldError",
    "SyncCodec",
    "SyncError",
    "SyncSnapshot",
]
