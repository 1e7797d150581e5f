"""
Profile Store

Holds the singleton UserProfile. Same observer contract as the
transaction store: callbacks fire after every successful mutation.
"""

import json
from datetime import datetime
from typing import Any, Callable, Optional

from lumina.models.profile import Language, UserProfile, generate_sync_id


MutationCallback = Callable[[], None]

# Fields the settings screen may change directly
UPDATABLE_FIELDS = frozenset({"name", "currency", "language"})


class ProfileStore:
    """Singleton profile holder with mutation observers."""

    def __init__(
        self,
        profile: Optional[UserProfile] = None,
        default_factory: Optional[Callable[[], UserProfile]] = None,
    ):
        self._default_factory = default_factory or UserProfile
        self._profile = profile or self._default_factory()
        self._observers: list[MutationCallback] = []

    def subscribe(self, callback: MutationCallback) -> None:
        """Register a callback fired after each successful mutation."""
        self._observers.append(callback)

    def _notify(self) -> None:
        for callback in list(self._observers):
            callback()

    def get(self) -> UserProfile:
        return self._profile

    def update(self, **fields: Any) -> UserProfile:
        """
        Change display preferences.

        Only name, currency and language can be changed here. The result is
        re-validated, so an unknown language raises a ValidationError.

        Raises:
            ValueError: For field names outside the updatable set
        """
        unknown = set(fields) - UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Profile fields cannot be updated: {sorted(unknown)}")
        if not fields:
            return self._profile

        data = self._profile.model_dump()
        data.update(fields)
        self._profile = UserProfile.model_validate(data)
        self._notify()
        return self._profile

    def set_language(self, language: Language) -> UserProfile:
        return self.update(language=language)

    def replace(self, profile: UserProfile) -> None:
        """Full overwrite. Nothing of the previous profile is kept."""
        self._profile = profile
        self._notify()

    def mark_synced(self, when: datetime) -> UserProfile:
        """Stamp the time of a successful push or pull."""
        self._profile = self._profile.model_copy(update={"last_sync": when})
        self._notify()
        return self._profile

    def reset(self) -> UserProfile:
        """Back to defaults, with a fresh sync id."""
        self._profile = self._default_factory()
        self._notify()
        return self._profile

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Persisted form: a camelCase JSON object."""
        return json.dumps(self._profile.to_storage_dict(), ensure_ascii=False)

    def parse_json(self, text: str) -> UserProfile:
        """
        Parse a persisted profile, merging it over a fresh default.

        Saved fields win; fields missing from older saves (e.g. syncId)
        come from the default.

        Raises ValueError if the text isn't a JSON object or doesn't validate.
        """
        data = json.loads(text)
        if not isinstance(data, dict):
            raise ValueError("Persisted profile must be a JSON object")
        merged = self._default_factory().to_storage_dict()
        merged.update(data)
        return UserProfile.model_validate(merged)


def default_profile_factory(
    name: str = "Guest",
    currency: str = "$",
    language: Language = Language.EN,
    sync_id_length: int = 8,
) -> Callable[[], UserProfile]:
    """Build a factory producing fresh default profiles with these settings."""

    def factory() -> UserProfile:
        return UserProfile(
            name=name,
            currency=currency,
            language=language,
            sync_id=generate_sync_id(sync_id_length),
        )

    return factory
