"""
Transaction Models for Lumina Ledger

A transaction is a single income or expense entry. These models define the
shape that flows between the stores, the statistics engine, persistence and
the sync codec.

DESIGN DECISION: Categories are a closed enumeration PLUS a freeform
fallback. The enums list what the entry form offers, but the data layer
stores `category` as a plain string and never enforces membership.
A token from another device may carry labels this version doesn't know;
those are kept verbatim.
"""

import datetime
from enum import Enum
from typing import Union
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow. The amount's sign is implied by this."""
    INCOME = "income"
    EXPENSE = "expense"


class IncomeCategory(str, Enum):
    """Categories offered for income entries."""
    SALARY = "Salary"
    FREELANCE = "Freelance"
    INVESTMENTS = "Investments"
    GIFT = "Gift"
    OTHER = "Other"


class ExpenseCategory(str, Enum):
    """Categories offered for expense entries."""
    FOOD = "Food"
    RENT = "Rent"
    UTILITIES = "Utilities"
    ENTERTAINMENT = "Entertainment"
    TRANSPORT = "Transport"
    SHOPPING = "Shopping"
    HEALTH = "Health"
    TRAVEL = "Travel"
    OTHER = "Other"


CategoryLabel = Union[IncomeCategory, ExpenseCategory, str]


def categories_for(txn_type: TransactionType) -> list[str]:
    """Category labels offered for a transaction type, in display order."""
    enum_cls = IncomeCategory if txn_type == TransactionType.INCOME else ExpenseCategory
    return [member.value for member in enum_cls]


def is_known_category(txn_type: TransactionType, label: str) -> bool:
    """Check a label against the closed list for its type."""
    return label in categories_for(txn_type)


def new_transaction_id() -> str:
    """Fresh, never-reused transaction identifier."""
    return uuid4().hex


# =============================================================================
# CORE TRANSACTION MODELS
# =============================================================================

class NewTransaction(BaseModel):
    """
    A transaction as submitted by the entry form, before it has an id.

    No range checks on amount: zero and negative values pass through.
    Input validation belongs to the form, not the ledger.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )

    type: TransactionType = Field(
        ...,
        description="income or expense"
    )
    amount: float = Field(
        ...,
        description="Magnitude in the user's currency unit"
    )
    category: str = Field(
        ...,
        description="Category label (not enforced against the enums)"
    )
    description: str = Field(
        default="",
        description="Free text note, may be empty"
    )
    date: datetime.date = Field(
        ...,
        description="Calendar date the transaction is attributed to"
    )

    @field_validator('category', mode='before')
    @classmethod
    def unwrap_category(cls, v):
        """Accept enum members and keep their plain label."""
        if isinstance(v, Enum):
            return v.value
        return v

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class Transaction(NewTransaction):
    """
    A stored transaction.

    Immutable once created. The only way to change history is to delete a
    transaction or to replace the whole store.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(
        ...,
        min_length=1,
        description="Unique identifier within the store"
    )

    @classmethod
    def from_new(cls, record: NewTransaction, txn_id: str) -> "Transaction":
        """Promote a submitted record to a stored one with the given id."""
        return cls(id=txn_id, **record.model_dump())

    def to_storage_dict(self) -> dict:
        """JSON-ready dict using the persisted camelCase field names."""
        return self.model_dump(mode="json", by_alias=True)
