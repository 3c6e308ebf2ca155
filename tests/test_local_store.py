"""
Unit tests for the file-backed store.

Covers the stored JSON format, the artistId migration and the fallback to
the bundled dataset when stored content is unreadable.
"""

import json

import pytest

from arttrack.services.errors import StoreError
from arttrack.services.local_store import (
    COMMISSIONS_KEY,
    LocalCommissionStore,
    load_commissions,
    serialize_commissions,
)
from arttrack.services.pipeline import CommissionStatus
from arttrack.services.records import CommissionData

DEMO_IDS = ["c-101", "c-102", "c-103", "c-104"]


class TestLoadCommissions:
    """Tests for parsing stored collections."""

    def test_nothing_stored_gives_demo_data(self):
        assert [c.id for c in load_commissions(None)] == DEMO_IDS

    def test_malformed_json_gives_demo_data(self):
        assert [c.id for c in load_commissions("{not json")] == DEMO_IDS

    def test_non_array_gives_demo_data(self):
        assert [c.id for c in load_commissions('{"id": "c-1"}')] == DEMO_IDS

    def test_bad_status_gives_demo_data(self):
        raw = json.dumps([{
            "id": "c-1", "artistId": "a", "clientName": "b", "title": "t",
            "type": "半身", "status": "nope", "dateAdded": "2024-01-01", "lastUpdated": "2024-01-01",
        }])
        assert [c.id for c in load_commissions(raw)] == DEMO_IDS

    def test_missing_artist_migrates_to_unknown(self):
        raw = json.dumps([{
            "id": "c-1", "clientName": "b", "title": "t", "type": "半身",
            "status": "草稿", "dateAdded": "2024-01-01", "lastUpdated": "2024-01-01",
        }])
        records = load_commissions(raw)
        assert records[0].artist_id == "Unknown"
        assert records[0].status == CommissionStatus.SKETCH

    def test_serialized_form_uses_camel_case(self):
        payload = json.loads(serialize_commissions(load_commissions(None)))
        first = payload[0]
        assert first["artistId"] == "兔兔老師"
        assert first["status"] == "完稿精修"
        assert "artist_id" not in first


class TestLocalCommissionStore:
    """Tests for the CommissionStore operations."""

    def _data(self, **kwargs):
        fields = dict(
            artist_id="兔兔老師", client_name="小明", title="新委託", type="半身",
            date_added="2024-06-01", last_updated="2024-06-01",
        )
        fields.update(kwargs)
        return CommissionData(**fields)

    def test_first_read_is_demo_dataset(self, storage):
        store = LocalCommissionStore(storage)
        assert {c.id for c in store.list_all()} == set(DEMO_IDS)

    def test_create_persists_and_prepends(self, storage):
        store = LocalCommissionStore(storage)
        record = store.create(self._data())
        assert record.id.startswith("c-")
        stored = json.loads(storage.get_item(COMMISSIONS_KEY))
        assert stored[0]["id"] == record.id
        assert record.id in {c.id for c in store.query_owner("兔兔老師")}

    def test_ids_are_unique(self, storage):
        store = LocalCommissionStore(storage)
        first = store.create(self._data())
        second = store.create(self._data())
        assert first.id != second.id

    def test_set_status_is_idempotent(self, storage):
        store = LocalCommissionStore(storage)
        store.set_status("c-103", CommissionStatus.SKETCH)
        store.set_status("c-103", CommissionStatus.SKETCH)
        record = next(c for c in store.list_all() if c.id == "c-103")
        assert record.status == CommissionStatus.SKETCH

    def test_set_status_unknown_id(self, storage):
        with pytest.raises(StoreError):
            LocalCommissionStore(storage).set_status("c-999", CommissionStatus.DONE)

    def test_delete(self, storage):
        store = LocalCommissionStore(storage)
        store.delete("c-101")
        assert "c-101" not in {c.id for c in store.list_all()}
        with pytest.raises(StoreError):
            store.delete("c-101")

    def test_list_all_newest_first(self, storage):
        dates = [c.date_added for c in LocalCommissionStore(storage).list_all()]
        assert dates == sorted(dates, reverse=True)


class TestLocalStorage:
    def test_round_trip_and_remove(self, storage):
        assert storage.get_item("k") is None
        storage.set_item("k", "值")
        assert storage.get_item("k") == "值"
        storage.remove_item("k")
        assert storage.get_item("k") is None
        storage.remove_item("k")


class TestRoundTrip:
    def test_reload_reproduces_collection(self):
        records = load_commissions(None)
        records[1].artist_id = ""
        reloaded = load_commissions(serialize_commissions(records))
        assert reloaded[1].artist_id == "Unknown"
        reloaded[1].artist_id = ""
        assert [r.model_dump() for r in reloaded] == [r.model_dump() for r in records]
