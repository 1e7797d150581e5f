"""Sync token services package."""

from lumina.services.sync.codec import (
    SNAPSHOT_VERSION,
    DecodeError,
    MissingFieldError,
    SyncCodec,
    SyncError,
    SyncSnapshot,
)

__all__ = [
    "SNAPSHOT_VERSION",
    "DecodeError",
    "MissingFieldError",
    "SyncCodec",
    "SyncError",
    "SyncSnapshot",
]
