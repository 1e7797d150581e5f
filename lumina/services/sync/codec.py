"""
Sync Codec

Turns a full ledger snapshot into a copy-pasteable text token and back.

Token pipeline:
    snapshot -> compact JSON text -> UTF-8 bytes -> standard base64 -> ASCII

The token is a single line of base64 alphabet characters, safe to paste into
any text field or message.

SECURITY: The token is NOT signed or encrypted. Anyone holding it can read
the whole ledger and profile. Treat it like the data itself.

DESIGN DECISION: The codec never touches the stores. `decode` returns a
validated SyncSnapshot; applying it is the pull flow's job. That way a bad
token can never leave the ledger half-replaced.
"""

import base64
import binascii
import json
from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from lumina.models.profile import UserProfile
from lumina.models.transaction import Transaction


SNAPSHOT_VERSION = 1

REQUIRED_FIELDS = ("transactions", "user")


class SyncError(Exception):
    """Base exception for sync token handling."""
    pass


class DecodeError(SyncError):
    """Token is empty, not base64, not UTF-8 JSON, or has an invalid shape."""
    pass


class MissingFieldError(SyncError):
    """Token decoded to an object that lacks 'transactions' or 'user'."""

    def __init__(self, missing: list[str]):
        self.missing = missing
        super().__init__(f"Sync token is missing: {', '.join(missing)}")


def _is_absent(value: Any) -> bool:
    """Null, false, zero and empty-string fields count as missing."""
    if value is None or value is False or value == "":
        return True
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value == 0


class SyncSnapshot(BaseModel):
    """A full ledger state as carried by a sync token."""
    model_config = ConfigDict(populate_by_name=True)

    version: int = Field(
        default=SNAPSHOT_VERSION,
        ge=1,
        description="Snapshot format version; tokens without one are version 1"
    )
    transactions: list[Transaction] = Field(
        default_factory=list,
        description="All transactions, newest first"
    )
    user: UserProfile = Field(
        ...,
        description="The exporting device's profile"
    )


class SyncCodec:
    """
    Encodes and decodes sync tokens.

    Stateless: one instance can be shared.
    """

    def __init__(self, supported_version: int = SNAPSHOT_VERSION):
        self._supported_version = supported_version

    def snapshot(
        self,
        transactions: Iterable[Transaction],
        user: UserProfile,
    ) -> SyncSnapshot:
        return SyncSnapshot(
            version=self._supported_version,
            transactions=list(transactions),
            user=user,
        )

    def encode(
        self,
        transactions: Iterable[Transaction],
        user: UserProfile,
    ) -> str:
        """
        Build a sync token for the given state.

        Does not mutate anything; the caller stamps lastSync afterwards.
        """
        snapshot = self.snapshot(transactions, user)
        payload = snapshot.model_dump(mode="json", by_alias=True)
        text = json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
        return base64.b64encode(text.encode("utf-8")).decode("ascii")

    def decode(self, token: str) -> SyncSnapshot:
        """
        Parse a sync token back into a snapshot.

        Raises:
            DecodeError: Empty token, bad base64, bad UTF-8, bad JSON,
                         non-object payload, unsupported version, or
                         records that don't fit the models.
            MissingFieldError: Payload lacks 'transactions' or 'user'.
        """
        if token is None or not token.strip():
            raise DecodeError("Sync token is empty")

        payload = self._parse_payload(token)

        version = payload.get("version", 1)
        if not isinstance(version, int) or isinstance(version, bool) or version < 1:
            raise DecodeError(f"Invalid snapshot version: {version!r}")
        if version > self._supported_version:
            raise DecodeError(
                f"Snapshot version {version} is newer than supported "
                f"version {self._supported_version}"
            )

        missing = [field for field in REQUIRED_FIELDS if _is_absent(payload.get(field))]
        if missing:
            raise MissingFieldError(missing)

        try:
            return SyncSnapshot.model_validate(payload)
        except ValidationError as e:
            raise DecodeError(
                f"Sync token contents are invalid: {e.error_count()} errors"
            ) from e

    def _parse_payload(self, token: str) -> dict:
        # Pastes may be line-wrapped or lose their padding
        compact = "".join(token.split())
        compact += "=" * (-len(compact) % 4)
        try:
            raw = base64.b64decode(compact, validate=True)
        except (binascii.Error, ValueError) as e:
            raise DecodeError("Sync token is not valid base64") from e

        try:
            text = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError("Sync token is not valid UTF-8 text") from e

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as e:
            raise DecodeError(f"Sync token is not valid JSON: {e.msg}") from e
        except RecursionError as e:
            raise DecodeError("Sync token is nested too deeply") from e

        if not isinstance(payload, dict):
            raise DecodeError("Sync token does not contain an object")
        return payload
