"""
Data Models Package

This package contains all Pydantic models used by Lumina Ledger.
All data flowing through the ledger must conform to these schemas.
"""

from lumina.models.transaction import (
    ExpenseCategory,
    IncomeCategory,
    NewTransaction,
    Transaction,
    TransactionType,
    categories_for,
    is_known_category,
    new_transaction_id,
)
from lumina.models.profile import (
    SUPPORTED_CURRENCIES,
    Language,
    UserProfile,
    format_amount,
    generate_sync_id,
)
from lumina.models.stats import FinancialStats
from lumina.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)

__all__ = [
    # Transaction models
    "ExpenseCategory",
    "IncomeCategory",
    "NewTransaction",
    "Transaction",
    "TransactionType",
    "categories_for",
    "is_known_category",
    "new_transaction_id",
    # Profile models
    "SUPPORTED_CURRENCIES",
    "Language",
    "UserProfile",
    "format_amount",
    "generate_sync_id",
    # Statistics
    "FinancialStats",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
]
