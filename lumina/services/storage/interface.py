"""
Abstract Persistence Gateway

DESIGN DECISION: The ledger core never touches files directly.
It reads and writes whole text blobs under two fixed logical keys
(one for the transaction store, one for the profile). This allows us to:
1. Keep data in JSON files on disk for normal use
2. Use in-memory storage for testing
3. Swap in another local backend later without touching business logic

The interface is intentionally tiny: load a blob, save a blob, discard a blob.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PersistenceGateway(ABC):
    """
    Abstract interface for local persistence.

    Any storage implementation must implement these methods.
    """

    @abstractmethod
    def load(self, key: str) -> Optional[str]:
        """
        Load the text saved under a key.

        Args:
            key: Logical storage key

        Returns:
            The saved text, or None if nothing is saved or it can't be read.
            Load never raises: unreadable state is treated as absent.
        """
        pass

    @abstractmethod
    def save(self, key: str, text: str) -> None:
        """
        Save text under a key, replacing whatever was there.

        Args:
            key: Logical storage key
            text: Serialized state

        Raises:
            PersistenceError: If the write fails
        """
        pass

    @abstractmethod
    def discard(self, key: str) -> None:
        """
        Forget whatever is saved under a key. No-op if nothing is saved.

        Raises:
            PersistenceError: If the removal fails
        """
        pass


class PersistenceError(Exception):
    """Base exception for persistence operations."""

    def __init__(self, message: str, key: Optional[str] = None):
        super().__init__(message)
        self.key = key
