"""
Main Orchestrator for Lumina Ledger

This module ties the stores, statistics, sync codec and persistence
together into one explicit application-state object, LedgerApp.

Flows:
1. Startup (gateway -> hydrate stores)
2. Mutation (add / delete / profile update -> on_mutate -> persist both stores)
3. Sync push (state -> token, stamp lastSync)
4. Sync pull (token -> validate -> replace both stores, stamp lastSync)
5. Wipe (empty ledger, fresh profile, discard saved state)

DESIGN DECISION: The orchestrator enforces the boundaries:
- Every successful mutation is persisted immediately, both stores together
- A failed pull never changes anything
- Every user action is audited
"""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Iterator, Optional

from lumina.audit import AuditLogger, create_correlation_id
from lumina.config import LedgerSettings, get_settings
from lumina.models.profile import UserProfile
from lumina.models.stats import FinancialStats
from lumina.models.transaction import NewTransaction, Transaction
from lumina.queries import Period, StatisticsEngine, recent, select
from lumina.services.storage import (
    InMemoryGateway,
    JsonFileGateway,
    PersistenceError,
    PersistenceGateway,
)
from lumina.services.sync import DecodeError, MissingFieldError, SyncCodec
from lumina.stores import ProfileStore, TransactionStore, default_profile_factory


class LedgerApp:
    """
    The application state: both stores plus everything that acts on them.

    Pass this object to whatever needs the ledger instead of relying on
    globals. All methods are synchronous.
    """

    def __init__(
        self,
        gateway: Optional[PersistenceGateway] = None,
        settings: Optional[LedgerSettings] = None,
        audit_logger: Optional[AuditLogger] = None,
        codec: Optional[SyncCodec] = None,
    ):
        self._settings = settings or get_settings()
        self._gateway = gateway or InMemoryGateway()
        self._audit_logger = audit_logger or AuditLogger(
            history_size=self._settings.audit_history_size,
        )
        self._codec = codec or SyncCodec()
        self._stats_engine = StatisticsEngine()

        self.transaction_store = TransactionStore()
        self.profile_store = ProfileStore(
            default_factory=default_profile_factory(
                name=self._settings.default_name,
                currency=self._settings.default_currency,
                language=self._settings.default_language,
                sync_id_length=self._settings.sync_id_length,
            ),
        )

        # Set while a multi-store operation runs, so it persists once at the end
        self._batch_depth = 0
        self._dirty = False

        self.transaction_store.subscribe(self.on_mutate)
        self.profile_store.subscribe(self.on_mutate)

    @property
    def settings(self) -> LedgerSettings:
        return self._settings

    @property
    def audit_logger(self) -> AuditLogger:
        return self._audit_logger

    @property
    def profile(self) -> UserProfile:
        return self.profile_store.get()

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def hydrate(self) -> "LedgerApp":
        """
        Load both stores from the gateway.

        Missing or unparseable state is treated as absent and the defaults
        are kept. Hydration itself does not trigger a save.
        """
        transactions_restored = False
        profile_restored = False

        with self._suppress_persist():
            text = self._gateway.load(self._settings.transactions_key)
            if text is not None:
                try:
                    records = TransactionStore.parse_json(text)
                except ValueError as e:
                    self._audit_logger.log_persistence_failed(
                        key=self._settings.transactions_key,
                        error_message=f"Ignoring unreadable saved transactions: {e}",
                    )
                else:
                    self.transaction_store.replace_all(records)
                    transactions_restored = True

            text = self._gateway.load(self._settings.profile_key)
            if text is not None:
                try:
                    profile = self.profile_store.parse_json(text)
                except ValueError as e:
                    self._audit_logger.log_persistence_failed(
                        key=self._settings.profile_key,
                        error_message=f"Ignoring unreadable saved profile: {e}",
                    )
                else:
                    self.profile_store.replace(profile)
                    profile_restored = True

        self._dirty = False
        self._audit_logger.log_state_hydrated(
            transaction_count=len(self.transaction_store) if transactions_restored else 0,
            profile_restored=profile_restored,
        )
        return self

    def on_mutate(self) -> None:
        """
        Observer hook fired after every successful store mutation.

        Re-persists BOTH stores. Inside a batch, the save is deferred to the
        end of the batch.
        """
        if self._batch_depth:
            self._dirty = True
            return
        self.persist()

    def persist(self) -> None:
        """
        Write both stores to the gateway.

        Raises:
            PersistenceError: If either write fails (after audit logging)
        """
        writes = (
            (self._settings.transactions_key, self.transaction_store.to_json()),
            (self._settings.profile_key, self.profile_store.to_json()),
        )
        for key, text in writes:
            try:
                self._gateway.save(key, text)
            except PersistenceError as e:
                self._audit_logger.log_persistence_failed(key=key, error_message=str(e))
                raise

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group several mutations into one persist at the end."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
        if self._batch_depth == 0 and self._dirty:
            self._dirty = False
            self.persist()

    @contextmanager
    def _suppress_persist(self) -> Iterator[None]:
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1

    # -------------------------------------------------------------------------
    # Ledger mutations
    # -------------------------------------------------------------------------

    def add_transaction(self, record: NewTransaction) -> Transaction:
        """Add a transaction from the entry form. Returns it with its new id."""
        txn = self.transaction_store.add(record)
        self._audit_logger.log_transaction_added(
            transaction_id=txn.id,
            txn_type=txn.type.value,
            amount=txn.amount,
            category=txn.category,
        )
        return txn

    def delete_transaction(self, txn_id: str) -> bool:
        """Delete by id. Unknown ids are a silent no-op (returns False)."""
        found = self.transaction_store.delete(txn_id)
        self._audit_logger.log_transaction_deleted(transaction_id=txn_id, found=found)
        return found

    def update_profile(self, **fields: Any) -> UserProfile:
        """Change name, currency or language."""
        profile = self.profile_store.update(**fields)
        if fields:
            self._audit_logger.log_profile_updated(
                fields={k: getattr(profile, k) for k in fields},
            )
        return profile

    # -------------------------------------------------------------------------
    # Views
    # -------------------------------------------------------------------------

    def transactions(
        self,
        period: Period = Period.ALL_TIME,
        now: Optional[date] = None,
    ) -> list[Transaction]:
        """Transactions in view for a period, newest first."""
        return select(self.transaction_store.all(), period, now)

    def stats(
        self,
        period: Period = Period.MONTH,
        now: Optional[date] = None,
    ) -> FinancialStats:
        """Statistics for a period. Dashboard uses MONTH, history ALL_TIME."""
        return self._stats_engine.for_period(self.transaction_store.all(), period, now)

    def recent_transactions(
        self,
        limit: int = 5,
        now: Optional[date] = None,
    ) -> list[Transaction]:
        """Latest transactions of the current month (dashboard strip)."""
        return recent(self.transactions(Period.MONTH, now), limit)

    # -------------------------------------------------------------------------
    # Sync
    # -------------------------------------------------------------------------

    def push(self, now: Optional[datetime] = None) -> str:
        """
        Export the full state as a sync token.

        The token is built from the state BEFORE lastSync is stamped.
        """
        correlation_id = create_correlation_id()
        profile = self.profile_store.get()
        transactions = self.transaction_store.all()

        token = self._codec.encode(transactions, profile)

        self.profile_store.mark_synced(now or datetime.now())
        self._audit_logger.log_sync_pushed(
            sync_id=profile.sync_id,
            transaction_count=len(transactions),
            token_length=len(token),
            correlation_id=correlation_id,
        )
        return token

    def pull(self, token: str, now: Optional[datetime] = None) -> bool:
        """
        Replace the whole state from a sync token.

        Returns:
            True if the state was replaced. False if the token lacked
            'transactions' or 'user' and strict_sync_fields is off.

        Raises:
            DecodeError: The token is unusable. Nothing was changed;
                         show the sync-error notice.
            MissingFieldError: Only with strict_sync_fields on.
        """
        correlation_id = create_correlation_id()

        try:
            snapshot = self._codec.decode(token)
        except DecodeError as e:
            self._audit_logger.log_sync_failed(
                error_message=str(e),
                correlation_id=correlation_id,
            )
            raise
        except MissingFieldError as e:
            self._audit_logger.log_sync_ignored(
                missing=e.missing,
                correlation_id=correlation_id,
            )
            if self._settings.strict_sync_fields:
                raise
            return False

        profile = snapshot.user.model_copy(update={"last_sync": now or datetime.now()})
        with self.batch():
            self.transaction_store.replace_all(snapshot.transactions)
            self.profile_store.replace(profile)

        self._audit_logger.log_sync_pulled(
            sync_id=profile.sync_id,
            transaction_count=len(snapshot.transactions),
            correlation_id=correlation_id,
        )
        return True

    # -------------------------------------------------------------------------
    # Wipe
    # -------------------------------------------------------------------------

    def wipe(self) -> None:
        """
        Reset everything: empty ledger, default profile with a fresh sync id,
        and no saved state left behind.
        """
        removed = len(self.transaction_store)

        with self._suppress_persist():
            self.transaction_store.replace_all([])
            self.profile_store.reset()
        self._dirty = False

        for key in (self._settings.transactions_key, self._settings.profile_key):
            try:
                self._gateway.discard(key)
            except PersistenceError as e:
                self._audit_logger.log_persistence_failed(key=key, error_message=str(e))
                raise

        self._audit_logger.log_data_wiped(transaction_count=removed)


def create_ledger_app(
    settings: Optional[LedgerSettings] = None,
    use_storage: bool = True,
) -> LedgerApp:
    """
    Factory function to create a hydrated LedgerApp.

    Args:
        settings: Settings to use; defaults to the cached environment settings.
        use_storage: Whether to persist to JSON files in settings.data_dir.
                    Set to False for an in-memory session.
    """
    settings = settings or get_settings()

    if use_storage:
        gateway: PersistenceGateway = JsonFileGateway(
            settings.data_dir,
            retry_attempts=settings.save_retry_attempts,
        )
    else:
        gateway = InMemoryGateway()

    app = LedgerApp(gateway=gateway, settings=settings)
    return app.hydrate()
