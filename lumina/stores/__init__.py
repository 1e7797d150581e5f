"""Ledger stores package."""

from lumina.stores.profile import ProfileStore, default_profile_factory
from lumina.stores.transactions import TransactionStore

__all__ = [
    "ProfileStore",
    "TransactionStore",
    "default_profile_factory",
]
