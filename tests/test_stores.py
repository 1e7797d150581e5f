"""Tests for the transaction and profile stores."""

import json
from datetime import date, datetime

import pytest

from lumina.models.profile import Language, UserProfile
from lumina.models.transaction import Transaction
from lumina.stores import ProfileStore, TransactionStore, default_profile_factory


class TestTransactionStore:
    """Tests for TransactionStore."""

    def test_add_assigns_id_and_prepends(self, make_record):
        """Test newest-first ordering and id assignment."""
        store = TransactionStore()
        first = store.add(make_record("income", 1000, "Salary"))
        second = store.add(make_record("expense", 20, "Food"))

        assert first.id and second.id
        assert first.id != second.id
        assert [t.id for t in store.all()] == [second.id, first.id]

    def test_ids_never_collide(self, make_record):
        """Test that a colliding id from the factory is skipped."""
        ids = iter(["dup", "dup", "fresh"])
        store = TransactionStore(id_factory=lambda: next(ids))
        store.add(make_record("expense", 1, "Food"))
        second = store.add(make_record("expense", 2, "Food"))
        assert second.id == "fresh"

    def test_add_then_delete_restores_content(self, make_record):
        """Test that add followed by delete is an identity on the collection."""
        store = TransactionStore()
        store.add(make_record("income", 1000, "Salary"))
        store.add(make_record("expense", 50, "Food"))
        before = store.all()

        added = store.add(make_record("expense", 99, "Travel"))
        assert store.delete(added.id) is True
        assert store.all() == before

    def test_delete_unknown_is_noop(self, make_record):
        """Test that deleting an absent id is not an error."""
        store = TransactionStore()
        store.add(make_record("expense", 5, "Food"))
        assert store.delete("missing") is False
        assert len(store) == 1

    def test_replace_all(self, make_record):
        """Test wholesale replacement."""
        store = TransactionStore()
        store.add(make_record("expense", 5, "Food"))
        replacement = [
            Transaction(id="a", type="income", amount=1, category="Gift", date="2025-01-01"),
        ]
        store.replace_all(replacement)
        assert [t.id for t in store.all()] == ["a"]

        store.replace_all([])
        assert store.all() == []

    def test_all_returns_copy(self, make_record):
        """Test that callers can't mutate the store through all()."""
        store = TransactionStore()
        store.add(make_record("expense", 5, "Food"))
        snapshot = store.all()
        snapshot.clear()
        assert len(store) == 1

    def test_get(self, make_record):
        """Test lookup by id."""
        store = TransactionStore()
        txn = store.add(make_record("expense", 5, "Food"))
        assert store.get(txn.id) == txn
        assert store.get("missing") is None

    def test_observers_fire_on_change_only(self, make_record):
        """Test the mutation hook contract."""
        calls = []
        store = TransactionStore()
        store.subscribe(lambda: calls.append("mutated"))

        txn = store.add(make_record("expense", 5, "Food"))
        store.delete("missing")
        store.delete(txn.id)
        store.replace_all([])

        assert calls == ["mutated", "mutated", "mutated"]

    def test_json_round_trip(self, make_record):
        """Test persisted form parses back to the same records."""
        store = TransactionStore()
        store.add(make_record("income", 1000, "Salary", date(2025, 2, 1), "Pay"))
        store.add(make_record("expense", 12.75, "Food", date(2025, 2, 3), "ডাল"))

        text = store.to_json()
        assert "ডাল" in text
        assert TransactionStore.parse_json(text) == store.all()

    def test_parse_json_rejects_non_array(self):
        """Test that a non-array is rejected."""
        with pytest.raises(ValueError):
            TransactionStore.parse_json(json.dumps({"id": "a"}))

    def test_parse_json_rejects_bad_records(self):
        """Test that invalid records are rejected."""
        with pytest.raises(ValueError):
            TransactionStore.parse_json(json.dumps([{"id": "a", "type": "income"}]))


class TestProfileStore:
    """Tests for ProfileStore."""

    def test_default_profile(self):
        """Test a store starts with a default profile."""
        store = ProfileStore()
        assert store.get().name == "Guest"

    def test_update_display_fields(self):
        """Test currency and language updates."""
        store = ProfileStore()
        profile = store.update(currency="৳", language="bn")
        assert profile.currency == "৳"
        assert profile.language == Language.BN
        assert store.get() is profile

    def test_update_keeps_sync_id(self):
        """Test that display updates don't touch sync metadata."""
        store = ProfileStore()
        sync_id = store.get().sync_id
        store.update(name="Rafi")
        assert store.get().sync_id == sync_id

    def test_update_rejects_unknown_fields(self):
        """Test that sync metadata can't be set through update."""
        store = ProfileStore()
        with pytest.raises(ValueError, match="cannot be updated"):
            store.update(sync_id="HACKED")

    def test_update_validates_values(self):
        """Test that invalid languages are rejected and nothing changes."""
        store = ProfileStore()
        with pytest.raises(ValueError):
            store.update(language="fr")
        assert store.get().language == Language.EN

    def test_replace_overwrites_everything(self):
        """Test full overwrite."""
        store = ProfileStore()
        incoming = UserProfile(name="Other", currency="€", sync_id="OTHER123")
        store.replace(incoming)
        assert store.get() == incoming

    def test_mark_synced(self):
        """Test lastSync stamping."""
        store = ProfileStore()
        when = datetime(2025, 2, 15, 9, 0)
        store.mark_synced(when)
        assert store.get().last_sync == when

    def test_reset_regenerates_sync_id(self):
        """Test that reset gives a default profile with a new sync id."""
        ids = iter(["FIRST001", "SECOND02"])
        store = ProfileStore(
            default_factory=lambda: UserProfile(sync_id=next(ids)),
        )
        store.update(currency="¥")
        profile = store.reset()
        assert profile.currency == "$"
        assert profile.sync_id == "SECOND02"

    def test_observers(self):
        """Test the mutation hook fires for each change."""
        calls = []
        store = ProfileStore()
        store.subscribe(lambda: calls.append("mutated"))
        store.update(currency="€")
        store.update()
        store.mark_synced(datetime(2025, 1, 1))
        store.reset()
        assert len(calls) == 3

    def test_parse_json_merges_over_defaults(self):
        """Test that older saves without syncId still load."""
        store = ProfileStore(
            default_factory=lambda: UserProfile(sync_id="DEFAULT1"),
        )
        profile = store.parse_json(json.dumps({"name": "Guest", "currency": "€"}))
        assert profile.currency == "€"
        assert profile.sync_id == "DEFAULT1"

    def test_default_profile_factory(self):
        """Test factory built from settings values."""
        factory = default_profile_factory(
            name="Me", currency="৳", language=Language.BN, sync_id_length=6,
        )
        profile = factory()
        assert profile.name == "Me"
        assert profile.language == Language.BN
        assert len(profile.sync_id) == 6
