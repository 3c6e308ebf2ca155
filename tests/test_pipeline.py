"""
Unit tests for the status pipeline.

Rules:
1. Six stages in a fixed order
2. advance/retreat move exactly one stage
3. The ends clamp: advancing 結案 and retreating 排單中 are no-ops
"""

from arttrack.services.pipeline import (
    CommissionStatus,
    STATUS_STEPS,
    STATUS_FILTER_ALL,
    advance,
    retreat,
    can_advance,
    can_retreat,
    is_active,
    progress,
    parse_status_filter,
)


class TestStageOrder:
    """Tests for the stage list."""

    def test_order(self):
        assert [s.value for s in STATUS_STEPS] == ["排單中", "草稿", "線稿", "上色", "完稿精修", "結案"]

    def test_statuses_compare_to_stored_strings(self):
        """Stored JSON carries the Chinese label itself."""
        assert CommissionStatus("線稿") is CommissionStatus.LINEART
        assert CommissionStatus.COLOR == "上色"


class TestAdvanceRetreat:
    """Tests for advance and retreat."""

    def test_advance_moves_one_stage(self):
        for current, following in zip(STATUS_STEPS, STATUS_STEPS[1:]):
            assert advance(current) == following

    def test_retreat_moves_one_stage(self):
        for previous, current in zip(STATUS_STEPS, STATUS_STEPS[1:]):
            assert retreat(current) == previous

    def test_advance_at_last_stage_is_noop(self):
        assert advance(CommissionStatus.DONE) == CommissionStatus.DONE

    def test_retreat_at_first_stage_is_noop(self):
        assert retreat(CommissionStatus.QUEUE) == CommissionStatus.QUEUE

    def test_accepts_plain_strings(self):
        assert advance("上色") == CommissionStatus.RENDER

    def test_button_availability(self):
        assert not can_advance(CommissionStatus.DONE)
        assert can_advance(CommissionStatus.RENDER)
        assert not can_retreat(CommissionStatus.QUEUE)
        assert can_retreat(CommissionStatus.SKETCH)


class TestIsActive:
    """Active means in production: neither queued nor done."""

    def test_middle_stages_are_active(self):
        for stage in STATUS_STEPS[1:-1]:
            assert is_active(stage)

    def test_ends_are_not_active(self):
        assert not is_active(CommissionStatus.QUEUE)
        assert not is_active(CommissionStatus.DONE)


class TestProgress:
    def test_flags(self):
        steps = progress(CommissionStatus.LINEART)
        assert [s["completed"] for s in steps] == [True, True, False, False, False, False]
        assert [s["current"] for s in steps] == [False, False, True, False, False, False]


class TestParseStatusFilter:
    """Tests for query-string status filters."""

    def test_known_value(self):
        assert parse_status_filter("草稿") == CommissionStatus.SKETCH

    def test_enum_name(self):
        assert parse_status_filter("DONE") == CommissionStatus.DONE

    def test_unknown_means_all(self):
        assert parse_status_filter("bogus") == STATUS_FILTER_ALL
        assert parse_status_filter(None) == STATUS_FILTER_ALL
        assert parse_status_filter("all") == STATUS_FILTER_ALL
