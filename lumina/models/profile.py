"""
User Profile Model

One profile per installation. It holds display preferences (name, currency
symbol, language) and sync metadata (a device label and the time of the last
successful push or pull).

The currency is a SYMBOL used for display only. No conversion logic exists.
"""

import secrets
import string
from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Language(str, Enum):
    """Languages with a presentation string table."""
    EN = "en"
    BN = "bn"


# Currencies offered by the settings screen as (code, symbol).
# Any symbol string is accepted by the profile itself.
SUPPORTED_CURRENCIES: list[tuple[str, str]] = [
    ("USD", "$"),
    ("BDT", "৳"),
    ("EUR", "€"),
    ("GBP", "£"),
    ("JPY", "¥"),
]

SYNC_ID_ALPHABET = string.ascii_uppercase + string.digits


def generate_sync_id(length: int = 8) -> str:
    """
    Generate a short human-readable device label.

    This is a label, not a secret or a uniqueness guarantee.
    """
    return "".join(secrets.choice(SYNC_ID_ALPHABET) for _ in range(length))


def format_amount(amount: float, currency: str, signed: bool = False) -> str:
    """
    Format an amount for display: currency symbol prefix, thousands separators.

    Whole numbers are shown without decimals, everything else with two.
    With signed=True a leading '+' or '-' is added.
    """
    magnitude = abs(amount)
    if float(magnitude).is_integer():
        body = f"{magnitude:,.0f}"
    else:
        body = f"{magnitude:,.2f}"

    if signed:
        sign = "-" if amount < 0 else "+"
    else:
        sign = "-" if amount < 0 else ""
    return f"{sign}{currency}{body}"


class UserProfile(BaseModel):
    """
    The singleton user profile.

    Persisted and synced with camelCase keys (syncId, lastSync).
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )

    name: str = Field(
        default="Guest",
        description="Display name"
    )
    currency: str = Field(
        default="$",
        description="Currency symbol used when displaying amounts"
    )
    language: Language = Field(
        default=Language.EN,
        description="Selects the presentation string table"
    )
    sync_id: str = Field(
        default_factory=generate_sync_id,
        description="Device label shown on the sync screen"
    )
    last_sync: Optional[datetime] = Field(
        default=None,
        description="Time of the most recent successful push or pull"
    )

    @field_validator('last_sync', mode='before')
    @classmethod
    def lenient_last_sync(cls, v):
        """
        Older clients stored a locale-formatted string here.
        Anything that isn't an ISO timestamp is read as 'never synced'.
        """
        if v is None or isinstance(v, datetime):
            return v
        if isinstance(v, str):
            try:
                return datetime.fromisoformat(v)
            except ValueError:
                return None
        return None

    def format(self, amount: float, signed: bool = False) -> str:
        """Format an amount with this profile's currency symbol."""
        return format_amount(amount, self.currency, signed=signed)

    def to_storage_dict(self) -> dict:
        """JSON-ready dict using the persisted camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
