"""
Store contract: defaults, unique keys, idempotent inserts and transactions.
"""
from datetime import date

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.core.exceptions import DuplicateKey
from src.models.signals import Signal
from src.storage.memory_store import MemoryStore
from src.storage.sql_store import SqlAlchemyStore


def new_signal(event_id, **overrides):
    fields = dict(
        beacon_event_id=event_id,
        source_url=f"https://beaconbio.org/en/event?eventid={event_id}",
        disease="Cholera",
        country="Yemen",
        date_reported=date(2026, 1, 29),
    )
    fields.update(overrides)
    return Signal(**fields)


@pytest.fixture(params=["memory", "sql"])
def any_store(request):
    if request.param == "memory":
        return MemoryStore()
    return request.getfixturevalue("sql_store")


class TestStoreContract:

    def test_insert_applies_defaults(self, any_store):
        signal = any_store.insert(new_signal("e1"))

        assert signal.id
        assert signal.triage_status == "Pending Triage"
        assert signal.current_status == "New"
        assert signal.raw_data == {}

    def test_get_and_get_by(self, any_store):
        signal = any_store.insert(new_signal("e1"))

        assert any_store.get(Signal, signal.id) is signal
        assert any_store.get_by(Signal, "beacon_event_id", "e1") is signal
        assert any_store.get(Signal, "missing") is None

    def test_insert_if_absent(self, any_store):
        assert any_store.insert_if_absent(new_signal("e1"), "beacon_event_id") is True
        assert any_store.insert_if_absent(new_signal("e1", disease="Other"), "beacon_event_id") is False

        [stored] = any_store.list(Signal)
        assert stored.disease == "Cholera"

    def test_plain_insert_rejects_duplicate_key(self, any_store):
        any_store.insert(new_signal("e1"))
        with pytest.raises(DuplicateKey):
            any_store.insert(new_signal("e1"))

    def test_list_filters_orders_and_limits(self, any_store):
        any_store.insert(new_signal("e1", priority_score=50))
        any_store.insert(new_signal("e2", priority_score=90))
        any_store.insert(new_signal("e3", priority_score=70, triage_status="Rejected"))

        pending = any_store.list(Signal, order_by="priority_score", triage_status="Pending Triage")
        assert [s.beacon_event_id for s in pending] == ["e2", "e1"]

        top = any_store.list(Signal, order_by="priority_score", limit=1)
        assert [s.beacon_event_id for s in top] == ["e2"]

        ascending = any_store.list(Signal, order_by="priority_score", descending=False)
        assert [s.beacon_event_id for s in ascending] == ["e1", "e3", "e2"]

    def test_failed_transaction_leaves_no_trace(self, any_store):
        existing = any_store.insert(new_signal("e1"))

        with pytest.raises(RuntimeError):
            with any_store.transaction():
                any_store.update(existing, triage_status="Accepted")
                any_store.insert(new_signal("e2"))
                raise RuntimeError("boom")

        assert any_store.get(Signal, existing.id).triage_status == "Pending Triage"
        assert [s.beacon_event_id for s in any_store.list(Signal)] == ["e1"]

    def test_nested_transactions_commit_once(self, any_store):
        with any_store.transaction():
            any_store.insert(new_signal("e1"))
            with any_store.transaction():
                any_store.insert(new_signal("e2"))

        assert len(any_store.list(Signal)) == 2


class TestSqlRaces:

    def test_unique_constraint_resolves_concurrent_insert(self, db_session):
        class BlindStore(SqlAlchemyStore):
            """Simulates a writer whose existence check ran before the other insert."""
            checked = False

            def get_by(self, model, field, value):
                if not self.checked:
                    self.checked = True
                    return None
                return super().get_by(model, field, value)

        SqlAlchemyStore(db_session).insert(new_signal("e1"))

        assert BlindStore(db_session).insert_if_absent(new_signal("e1"), "beacon_event_id") is False
        assert len(SqlAlchemyStore(db_session).list(Signal)) == 1

    def test_collision_inside_transaction_raises(self, db_session):
        class BlindStore(SqlAlchemyStore):
            def get_by(self, model, field, value):
                return None

        SqlAlchemyStore(db_session).insert(new_signal("e1"))
        store = BlindStore(db_session)

        with pytest.raises(DuplicateKey):
            with store.transaction():
                store.insert_if_absent(new_signal("e1"), "beacon_event_id")


class TestSqlFailures:

    def test_other_constraint_violation_is_not_a_duplicate(self, db_session):
        store = SqlAlchemyStore(db_session)

        with pytest.raises(IntegrityError):
            store.insert_if_absent(new_signal("e1", disease=None), "beacon_event_id")

        assert store.insert_if_absent(new_signal("e2"), "beacon_event_id") is True
        assert [s.beacon_event_id for s in store.list(Signal)] == ["e2"]

    def test_failed_flush_leaves_session_usable(self, db_session):
        store = SqlAlchemyStore(db_session)

        with pytest.raises((OverflowError, SQLAlchemyError)):
            store.insert(new_signal("e1", cases=10 ** 20))

        assert store.insert_if_absent(new_signal("e2"), "beacon_event_id") is True
        assert store.get_by(Signal, "beacon_event_id", "e1") is None
