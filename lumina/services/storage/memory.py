"""In-memory persistence gateway, for tests and throwaway sessions."""

from typing import Optional

from lumina.services.storage.interface import PersistenceGateway


class InMemoryGateway(PersistenceGateway):
    """Dict-backed gateway. Nothing survives the process."""

    def __init__(self, initial: Optional[dict[str, str]] = None):
        self._data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def save(self, key: str, text: str) -> None:
        self._data[key] = text

    def discard(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> list[str]:
        return sorted(self._data)
