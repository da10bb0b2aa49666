"""Unit tests for freeze window calculations."""

import datetime as dt

import pytest

from timesheet_engine.calculators.freeze_window import (
    effective_freeze_day,
    is_client_current_date_valid,
    not_yet_frozen_dates,
    open_window,
)


class TestEffectiveFreezeDay:
    """Tests for clamping the freeze day to the month length."""

    def test_freeze_day_within_month_is_kept(self):
        assert effective_freeze_day(dt.date(2024, 3, 5), 12) == 12

    @pytest.mark.parametrize(
        "reference,expected",
        [
            (dt.date(2023, 2, 10), 28),
            (dt.date(2024, 2, 10), 29),
            (dt.date(2024, 4, 10), 30),
        ],
    )
    def test_freeze_day_clamped_to_last_day(self, reference, expected):
        """Test that day 31 behaves as the month's last day."""
        assert effective_freeze_day(reference, 31) == expected

    def test_datetime_reference_uses_its_calendar_date(self):
        reference = dt.datetime(2023, 2, 28, 23, 0, tzinfo=dt.timezone(dt.timedelta(hours=5)))
        assert effective_freeze_day(reference, 30) == 28


class TestOpenWindow:
    """Tests for the range of not yet frozen dates."""

    def test_before_freeze_day_previous_month_open(self):
        first, last = open_window(dt.date(2024, 3, 11), 12)
        assert first == dt.date(2024, 2, 1)
        assert last == dt.date(2024, 3, 31)

    def test_on_freeze_day_previous_month_closed(self):
        first, last = open_window(dt.date(2024, 3, 12), 12)
        assert first == dt.date(2024, 3, 1)
        assert last == dt.date(2024, 3, 31)

    def test_january_opens_december_of_previous_year(self):
        first, _ = open_window(dt.date(2024, 1, 3), 12)
        assert first == dt.date(2023, 12, 1)


class TestNotYetFrozenDates:
    """Tests for filtering candidate dates."""

    def test_previous_month_excluded_after_freeze_day(self):
        candidates = [dt.date(2024, 2, 27), dt.date(2024, 3, 4), dt.date(2024, 3, 30)]
        result = not_yet_frozen_dates(candidates, dt.date(2024, 3, 15), 12)
        assert result == {dt.date(2024, 3, 4), dt.date(2024, 3, 30)}

    def test_previous_month_included_before_freeze_day(self):
        candidates = [dt.date(2024, 2, 27), dt.date(2024, 3, 4)]
        result = not_yet_frozen_dates(candidates, dt.date(2024, 3, 5), 12)
        assert result == set(candidates)

    def test_two_months_back_always_frozen(self):
        result = not_yet_frozen_dates([dt.date(2024, 1, 31)], dt.date(2024, 3, 1), 12)
        assert result == set()

    def test_next_month_is_not_open(self):
        result = not_yet_frozen_dates([dt.date(2024, 4, 1)], dt.date(2024, 3, 20), 12)
        assert result == set()

    def test_freeze_day_30_in_february_behaves_as_last_day(self):
        """February 2023 has 28 days: on the 28th January is frozen."""
        january = dt.date(2023, 1, 20)
        assert not_yet_frozen_dates([january], dt.date(2023, 2, 28), 30) == set()
        assert not_yet_frozen_dates([january], dt.date(2023, 2, 27), 30) == {january}

    def test_leap_february_clamps_to_29(self):
        january = dt.date(2024, 1, 20)
        assert not_yet_frozen_dates([january], dt.date(2024, 2, 28), 30) == {january}
        assert not_yet_frozen_dates([january], dt.date(2024, 2, 29), 30) == set()

    def test_empty_candidates(self):
        assert not_yet_frozen_dates([], dt.date(2024, 3, 20), 12) == set()


class TestClientCurrentDate:
    """Tests for the plausibility window of a client's today."""

    @pytest.fixture
    def utc_now(self):
        return dt.datetime(2024, 3, 10, 20, 0)

    def test_same_day_is_valid(self, utc_now):
        assert is_client_current_date_valid(dt.date(2024, 3, 10), utc_now)

    def test_ahead_by_up_to_fourteen_hours_is_valid(self, utc_now):
        assert is_client_current_date_valid(dt.date(2024, 3, 11), utc_now)

    def test_two_days_ahead_is_invalid(self, utc_now):
        assert not is_client_current_date_valid(dt.date(2024, 3, 12), utc_now)

    def test_yesterday_valid_only_within_twelve_hours(self):
        early = dt.datetime(2024, 3, 10, 6, 0)
        late = dt.datetime(2024, 3, 10, 13, 0)
        assert is_client_current_date_valid(dt.date(2024, 3, 9), early)
        assert not is_client_current_date_valid(dt.date(2024, 3, 9), late)

    def test_offset_aware_now_is_normalized_to_utc(self):
        # 01:00 at UTC+2 is 23:00 UTC the previous day
        now = dt.datetime(2024, 3, 11, 1, 0, tzinfo=dt.timezone(dt.timedelta(hours=2)))
        assert is_client_current_date_valid(dt.date(2024, 3, 10), now)
        assert not is_client_current_date_valid(dt.date(2024, 3, 12), now)
