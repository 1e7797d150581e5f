# tests/conftest.py
from datetime import date
from pathlib import Path
from typing import Callable

import pytest

from lumina.audit import AuditLogger
from lumina.config import LedgerSettings
from lumina.models.transaction import NewTransaction, TransactionType
from lumina.orchestrator import LedgerApp
from lumina.services.storage import InMemoryGateway


def _make_record(
    txn_type: str,
    amount: float,
    category: str,
    when: date = date(2025, 2, 10),
    description: str = "",
) -> NewTransaction:
    return NewTransaction(
        type=TransactionType(txn_type),
        amount=amount,
        category=category,
        description=description,
        date=when,
    )


@pytest.fixture
def make_record() -> Callable[..., NewTransaction]:
    """
    Helper to build an entry-form payload:
    make_record("expense", 12.5, "Food", date(2025, 2, 1)).
    """
    return _make_record


@pytest.fixture
def settings(tmp_path: Path) -> LedgerSettings:
    """
    Settings isolated from .env files and pointed at a temp directory.
    """
    return LedgerSettings(
        _env_file=None,
        data_dir=tmp_path / "data",
        save_retry_attempts=1,
    )


@pytest.fixture
def gateway() -> InMemoryGateway:
    return InMemoryGateway()


@pytest.fixture
def app(gateway: InMemoryGateway, settings: LedgerSettings) -> LedgerApp:
    """A hydrated ledger backed by the in-memory gateway."""
    return LedgerApp(
        gateway=gateway,
        settings=settings,
        audit_logger=AuditLogger(history_size=50),
    ).hydrate()
