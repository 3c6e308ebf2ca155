"""
Unit tests for the mutation coordinator.

Status changes and deletes apply locally first and roll back to the exact
pre-mutation snapshot when the store call fails. Creates only touch the
local list after the store succeeds.
"""

import pytest

from conftest import FakeProvider, FakeStore, direct_call, make_record

from arttrack.services.delete_confirm import DeleteConfirmations
from arttrack.services.errors import AdminRequiredError, LocalValidationError, OwnershipError, StoreError
from arttrack.services.mutations import (
    CREATE_FAILED,
    MutationCoordinator,
    run_optimistic,
)
from arttrack.services.pipeline import CommissionStatus
from arttrack.services.session_gate import SessionGate, ViewMode
from arttrack.services.type_registry import CommissionTypeRegistry


def build(artist, records=None, store=None, mode=ViewMode.ADMIN):
    store = store or FakeStore(records)
    gate = SessionGate(FakeProvider(artist))
    gate.mode = mode
    owned = [r.model_copy(deep=True) for r in (records or [])]
    coordinator = MutationCoordinator(
        store, gate, owned, DeleteConfirmations(), today=lambda: "2024-03-01", call=direct_call
    )
    return coordinator, store, owned


class TestRunOptimistic:
    """Ordering of apply, remote call and rollback."""

    @pytest.mark.asyncio
    async def test_success_skips_rollback(self):
        events = []

        async def remote():
            events.append("remote")
            return 42

        result = await run_optimistic(
            lambda: events.append("apply"), remote, lambda: events.append("rollback")
        )
        assert result.ok and result.value == 42
        assert events == ["apply", "remote"]

    @pytest.mark.asyncio
    async def test_failure_rolls_back_after_remote(self):
        events = []

        async def remote():
            events.append("remote")
            raise StoreError("boom")

        result = await run_optimistic(
            lambda: events.append("apply"), remote, lambda: events.append("rollback")
        )
        assert not result.ok
        assert isinstance(result.error, StoreError)
        assert events == ["apply", "remote", "rollback"]


class TestStatusChanges:
    """Tests for advance and retreat."""

    @pytest.mark.asyncio
    async def test_advance_updates_list_and_store(self, artist):
        coordinator, store, owned = build(artist, [make_record(status=CommissionStatus.SKETCH)])
        result = await coordinator.advance("c-1")
        assert result.ok
        assert owned[0].status == CommissionStatus.LINEART
        assert result.value is owned[0]
        assert owned[0].last_updated == "2024-03-01"
        assert store.calls == [("set_status", "c-1", CommissionStatus.LINEART)]

    @pytest.mark.asyncio
    async def test_advance_at_end_makes_no_call(self, artist):
        coordinator, store, owned = build(artist, [make_record(status=CommissionStatus.DONE)])
        result = await coordinator.advance("c-1")
        assert result.ok
        assert store.calls == []
        assert owned[0].status == CommissionStatus.DONE

    @pytest.mark.asyncio
    async def test_retreat_at_start_makes_no_call(self, artist):
        coordinator, store, _ = build(artist, [make_record(status=CommissionStatus.QUEUE)])
        await coordinator.retreat("c-1")
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_failure_restores_snapshot(self, artist):
        records = [
            make_record(id="c-1", status=CommissionStatus.COLOR),
            make_record(id="c-2", status=CommissionStatus.SKETCH),
        ]
        coordinator, store, owned = build(artist, records)
        before = [r.model_dump() for r in owned]
        store.fail = True

        result = await coordinator.retreat("c-1")

        assert not result.ok
        assert result.notice.startswith("更新進度失敗")
        assert [r.model_dump() for r in owned] == before

    @pytest.mark.asyncio
    async def test_last_updated_never_before_date_added(self, artist):
        record = make_record(status=CommissionStatus.QUEUE, date_added="2024-05-01")
        coordinator, _, owned = build(artist, [record])
        await coordinator.advance("c-1")
        assert owned[0].last_updated == "2024-05-01"


class TestGuards:
    """Mutations need admin mode and ownership."""

    @pytest.mark.asyncio
    async def test_client_mode_rejected(self, artist):
        coordinator, store, _ = build(artist, [make_record()], mode=ViewMode.CLIENT)
        with pytest.raises(AdminRequiredError):
            await coordinator.advance("c-1")
        assert store.calls == []

    @pytest.mark.asyncio
    async def test_no_identity_rejected(self):
        coordinator, _, _ = build(None, [make_record()])
        with pytest.raises(AdminRequiredError):
            await coordinator.delete("c-1")

    @pytest.mark.asyncio
    async def test_other_artists_commission_rejected(self, artist):
        coordinator, store, _ = build(artist, [make_record(artist_id="熊熊繪圖")])
        with pytest.raises(OwnershipError):
            await coordinator.advance("c-1")
        assert store.calls == []


class TestDelete:
    """Tests for the two-click delete."""

    @pytest.mark.asyncio
    async def test_first_click_only_arms(self, artist):
        coordinator, store, owned = build(artist, [make_record()])
        result = await coordinator.click_delete("c-1")
        assert result.armed
        assert store.calls == []
        assert len(owned) == 1

    @pytest.mark.asyncio
    async def test_second_click_deletes(self, artist):
        coordinator, store, owned = build(artist, [make_record()])
        await coordinator.click_delete("c-1")
        result = await coordinator.click_delete("c-1")
        assert result.ok and not result.armed
        assert owned == []
        assert store.calls == [("delete", "c-1")]

    @pytest.mark.asyncio
    async def test_failed_delete_restores_row(self, artist):
        records = [make_record(id="c-1"), make_record(id="c-2")]
        coordinator, store, owned = build(artist, records)
        store.fail = True
        result = await coordinator.delete("c-2")
        assert not result.ok
        assert [r.id for r in owned] == ["c-1", "c-2"]


class TestCreate:
    """Tests for create."""

    @pytest.mark.asyncio
    async def test_defaults_and_stamps(self, artist, storage):
        coordinator, store, owned = build(artist, [make_record(id="c-old")])
        registry = CommissionTypeRegistry(storage, artist.display_name)

        result = await coordinator.create({"client_name": "", "title": "", "price": "-5"}, registry)

        assert result.ok
        record = result.value
        assert record.client_name == "匿名委託人"
        assert record.title == "未命名委託"
        assert record.price == 0
        assert record.type == "半身"
        assert record.artist_id == "兔兔老師"
        assert record.user_id == "1"
        assert record.status == CommissionStatus.QUEUE
        assert record.date_added == record.last_updated == "2024-03-01"
        assert owned[0].id == record.id

    @pytest.mark.asyncio
    async def test_failure_leaves_list_untouched(self, artist, storage):
        coordinator, store, owned = build(artist, [make_record(id="c-old")])
        store.fail = True
        result = await coordinator.create({"title": "x"}, CommissionTypeRegistry(storage, artist.display_name))
        assert not result.ok
        assert result.notice.startswith(CREATE_FAILED)
        assert [r.id for r in owned] == ["c-old"]

    @pytest.mark.asyncio
    async def test_unknown_type_rejected_before_store(self, artist, storage):
        coordinator, store, _ = build(artist)
        with pytest.raises(LocalValidationError):
            await coordinator.create({"type": "壁畫"}, CommissionTypeRegistry(storage, artist.display_name))
        assert store.calls == []


class TestQueueScenario:
    """兔兔老師 advances c-101 from 完稿精修 to 結案."""

    @pytest.mark.asyncio
    async def test_stats_follow_advance(self, artist):
        from arttrack.demo_data import get_demo_commissions
        from arttrack.services.visibility import AdminMode, Stats, select_listing

        demo = get_demo_commissions()
        coordinator, _, owned = build(artist, [c for c in demo if c.artist_id == artist.display_name])
        before_c103 = next(c for c in owned if c.id == "c-103").model_dump()

        assert select_listing(AdminMode(artist, owned)).stats == Stats(queue=1, active=1, done=0)
        await coordinator.advance("c-101")

        assert next(c for c in owned if c.id == "c-101").status == CommissionStatus.DONE
        assert select_listing(AdminMode(artist, owned)).stats == Stats(queue=1, active=0, done=1)
        assert next(c for c in owned if c.id == "c-103").model_dump() == before_c103
