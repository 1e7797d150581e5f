"""
Transaction Store

The ledger: an ordered collection of transactions and the sole source of
truth for financial history.

Canonical order is NEWEST FIRST: `add` prepends.

The store does no validation beyond the model's types. Zero or negative
amounts and unknown category labels are stored as given.
"""

import json
from typing import Callable, Iterable, Iterator, Optional

from lumina.models.transaction import NewTransaction, Transaction, new_transaction_id


MutationCallback = Callable[[], None]


class TransactionStore:
    """
    In-memory ordered transaction collection with mutation observers.

    Observers are called after every mutation that actually changed the
    store. A delete of an unknown id changes nothing and notifies nobody.
    """

    def __init__(
        self,
        records: Optional[Iterable[Transaction]] = None,
        id_factory: Callable[[], str] = new_transaction_id,
    ):
        self._records: list[Transaction] = list(records or [])
        self._id_factory = id_factory
        self._observers: list[MutationCallback] = []

    def subscribe(self, callback: MutationCallback) -> None:
        """Register a callback fired after each successful mutation."""
        self._observers.append(callback)

    def _notify(self) -> None:
        for callback in list(self._observers):
            callback()

    def add(self, record: NewTransaction) -> Transaction:
        """
        Assign a fresh id and prepend the record.

        Returns the stored Transaction (with its id).
        """
        txn_id = self._fresh_id()
        txn = Transaction.from_new(record, txn_id)
        self._records.insert(0, txn)
        self._notify()
        return txn

    def delete(self, txn_id: str) -> bool:
        """
        Remove the transaction with this id.

        Returns True if something was removed. An unknown id is not an error.
        """
        for index, txn in enumerate(self._records):
            if txn.id == txn_id:
                del self._records[index]
                self._notify()
                return True
        return False

    def replace_all(self, records: Iterable[Transaction]) -> None:
        """Replace the whole collection. Used by sync pull and wipe."""
        self._records = list(records)
        self._notify()

    def all(self) -> list[Transaction]:
        """The full collection, newest first. A copy; mutating it is harmless."""
        return list(self._records)

    def get(self, txn_id: str) -> Optional[Transaction]:
        for txn in self._records:
            if txn.id == txn_id:
                return txn
        return None

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[Transaction]:
        return iter(list(self._records))

    def _fresh_id(self) -> str:
        existing = {txn.id for txn in self._records}
        txn_id = self._id_factory()
        while txn_id in existing:
            txn_id = self._id_factory()
        return txn_id

    # -------------------------------------------------------------------------
    # Serialization
    # -------------------------------------------------------------------------

    def to_json(self) -> str:
        """Persisted form: a JSON array of camelCase transaction objects."""
        return json.dumps(
            [txn.to_storage_dict() for txn in self._records],
            ensure_ascii=False,
        )

    @staticmethod
    def parse_json(text: str) -> list[Transaction]:
        """
        Parse the persisted form.

        Raises ValueError (including pydantic's ValidationError) if the text
        isn't a JSON array of valid transactions.
        """
        data = json.loads(text)
        if not isinstance(data, list):
            raise ValueError("Persisted transactions must be a JSON array")
        return [Transaction.model_validate(item) for item in data]
