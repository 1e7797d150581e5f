"""
Audit Models for Lumina Ledger

Every mutation of the ledger and every sync attempt is logged.
This provides:
1. Traceability of what changed the ledger and when
2. Debugging information when a sync token is rejected
3. A history the user can inspect

DESIGN DECISION: Audit events are append-only. We never modify them.
"""

import json
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field, field_validator


DESCRIPTION_MAX_LENGTH = 500


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Startup
    STATE_HYDRATED = "state_hydrated"

    # Ledger mutations
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"
    PROFILE_UPDATED = "profile_updated"
    DATA_WIPED = "data_wiped"

    # Sync
    SYNC_PUSHED = "sync_pushed"
    SYNC_PULLED = "sync_pulled"
    SYNC_FAILED = "sync_failed"
    SYNC_IGNORED = "sync_ignored"

    # Persistence
    PERSISTENCE_FAILED = "persistence_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'profile', 'sync')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity this event relates to"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events (e.g., one pull and its persist)"
    )

    description: str = Field(
        ...,
        max_length=DESCRIPTION_MAX_LENGTH,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    @field_validator("description", mode="before")
    @classmethod
    def _clip_description(cls, v: Any) -> Any:
        # Descriptions embed user text (categories, error messages)
        if isinstance(v, str) and len(v) > DESCRIPTION_MAX_LENGTH:
            return v[: DESCRIPTION_MAX_LENGTH - 3] + "..."
        return v

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }

    def to_json_line(self) -> str:
        """Single-line JSON form, for appending to a local audit file."""
        return json.dumps(self.to_log_dict(), ensure_ascii=False)


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(txn_id, "expense", 12.5, "Food")
        event = AuditEventBuilder.sync_failed("Token is not valid base64")
    """

    @staticmethod
    def state_hydrated(
        transaction_count: int,
        profile_restored: bool,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.STATE_HYDRATED,
            entity_type="ledger",
            description=f"Ledger loaded with {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "profile_restored": profile_restored,
            },
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        txn_type: str,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"Added {txn_type}: {amount} ({category})",
            details={
                "type": txn_type,
                "amount": amount,
                "category": category,
            },
            is_user_action=True,
        )

    @staticmethod
    def transaction_deleted(
        transaction_id: str,
        found: bool,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=(
                "Transaction deleted" if found
                else "Delete requested for unknown transaction"
            ),
            details={"found": found},
            is_user_action=True,
        )

    @staticmethod
    def profile_updated(
        fields: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_UPDATED,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Profile updated: {', '.join(sorted(fields))}",
            details={"fields": fields},
            is_user_action=True,
        )

    @staticmethod
    def data_wiped(
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_WIPED,
            severity=AuditSeverity.WARNING,
            entity_type="ledger",
            correlation_id=correlation_id,
            description=f"All data wiped ({transaction_count} transactions removed)",
            details={"transaction_count": transaction_count},
            is_user_action=True,
        )

    @staticmethod
    def sync_pushed(
        sync_id: str,
        transaction_count: int,
        token_length: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_PUSHED,
            entity_type="sync",
            entity_id=sync_id,
            correlation_id=correlation_id,
            description=f"Sync token created for {transaction_count} transactions",
            details={
                "transaction_count": transaction_count,
                "token_length": token_length,
            },
            is_user_action=True,
        )

    @staticmethod
    def sync_pulled(
        sync_id: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_PULLED,
            entity_type="sync",
            entity_id=sync_id,
            correlation_id=correlation_id,
            description=f"Ledger replaced from sync token ({transaction_count} transactions)",
            details={"transaction_count": transaction_count},
            is_user_action=True,
        )

    @staticmethod
    def sync_failed(
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="sync",
            correlation_id=correlation_id,
            description="Sync token rejected",
            error_message=error_message,
            is_user_action=True,
        )

    @staticmethod
    def sync_ignored(
        missing: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYNC_IGNORED,
            severity=AuditSeverity.WARNING,
            entity_type="sync",
            correlation_id=correlation_id,
            description=f"Sync token ignored: missing {', '.join(missing)}",
            details={"missing": missing},
            is_user_action=True,
        )

    @staticmethod
    def persistence_failed(
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PERSISTENCE_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="storage",
            entity_id=key,
            correlation_id=correlation_id,
            description=f"Failed to persist '{key}'",
            error_message=error_message,
            details={"key": key},
        )
