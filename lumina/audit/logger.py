"""
Audit Logger

DESIGN DECISION: Every mutation and every sync attempt is logged.
This provides:
1. Traceability of ledger changes
2. Debugging capability for rejected sync tokens
3. A short in-memory history the UI can show

The audit logger:
- Is synchronous, like everything else in the ledger core
- Gracefully handles failures (never crashes the app if logging fails)
- Supports correlation IDs to trace related events
"""

from collections import deque
from typing import Any, Callable, Optional
from uuid import UUID, uuid4

import structlog

from lumina.models.audit import AuditEvent, AuditEventBuilder


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. A bounded in-memory history (newest events kept)
    """

    def __init__(self, history_size: int = 200):
        """
        Initialize audit logger.

        Args:
            history_size: How many events to keep in memory.
                         0 disables the history.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._logger = structlog.get_logger("lumina.audit")

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Returns True if the event was recorded, False if logging failed.
        """
        self._history.append(event)
        log_dict = event.to_log_dict()

        try:
            if event.severity.value == "error":
                self._logger.error("audit_event", **log_dict)
            elif event.severity.value == "warning":
                self._logger.warning("audit_event", **log_dict)
            elif event.severity.value == "debug":
                self._logger.debug("audit_event", **log_dict)
            else:
                self._logger.info("audit_event", **log_dict)
        except Exception as e:
            # Log failure but don't raise
            print(f"WARNING: Failed to write audit event: {e}")
            return False

        return True

    def _emit(self, build: Callable[..., AuditEvent], **kwargs: Any) -> bool:
        """Build an event and log it. Failures while building are swallowed too."""
        try:
            event = build(**kwargs)
        except Exception as e:
            print(f"WARNING: Failed to build audit event: {e}")
            return False
        return self.log(event)

    def get_recent_events(self, limit: int = 50) -> list[AuditEvent]:
        """Most recent events, newest first."""
        events = list(self._history)
        events.reverse()
        return events[:limit]

    def clear(self) -> None:
        self._history.clear()

    def log_state_hydrated(
        self,
        transaction_count: int,
        profile_restored: bool,
    ) -> None:
        """Log startup hydration."""
        self._emit(
            AuditEventBuilder.state_hydrated,
            transaction_count=transaction_count,
            profile_restored=profile_restored,
        )

    def log_transaction_added(
        self,
        transaction_id: str,
        txn_type: str,
        amount: float,
        category: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a new transaction."""
        self._emit(
            AuditEventBuilder.transaction_added,
            transaction_id=transaction_id,
            txn_type=txn_type,
            amount=amount,
            category=category,
            correlation_id=correlation_id,
        )

    def log_transaction_deleted(
        self,
        transaction_id: str,
        found: bool,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a delete request."""
        self._emit(
            AuditEventBuilder.transaction_deleted,
            transaction_id=transaction_id,
            found=found,
            correlation_id=correlation_id,
        )

    def log_profile_updated(
        self,
        fields: dict[str, Any],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a profile change."""
        self._emit(
            AuditEventBuilder.profile_updated,
            fields=fields,
            correlation_id=correlation_id,
        )

    def log_data_wiped(
        self,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a full wipe."""
        self._emit(
            AuditEventBuilder.data_wiped,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )

    def log_sync_pushed(
        self,
        sync_id: str,
        transaction_count: int,
        token_length: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log token creation."""
        self._emit(
            AuditEventBuilder.sync_pushed,
            sync_id=sync_id,
            transaction_count=transaction_count,
            token_length=token_length,
            correlation_id=correlation_id,
        )

    def log_sync_pulled(
        self,
        sync_id: str,
        transaction_count: int,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a successful pull."""
        self._emit(
            AuditEventBuilder.sync_pulled,
            sync_id=sync_id,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )

    def log_sync_failed(
        self,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a rejected token."""
        self._emit(
            AuditEventBuilder.sync_failed,
            error_message=error_message,
            correlation_id=correlation_id,
        )

    def log_sync_ignored(
        self,
        missing: list[str],
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a token that decoded but lacked required fields."""
        self._emit(
            AuditEventBuilder.sync_ignored,
            missing=missing,
            correlation_id=correlation_id,
        )

    def log_persistence_failed(
        self,
        key: str,
        error_message: str,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log a failed save."""
        self._emit(
            AuditEventBuilder.persistence_failed,
            key=key,
            error_message=error_message,
            correlation_id=correlation_id,
        )


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a user action (e.g., a sync pull).
    Pass it through all subsequent operations.
    """
    return uuid4()
