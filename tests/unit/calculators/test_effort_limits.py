"""Unit tests for the effort limit validator and date helpers."""

import datetime as dt
import uuid

import pytest

from timesheet_engine.calculators.date_utils import (
    date_range,
    first_of_previous_month,
    group_into_date_runs,
    month_bounds,
    week_bounds,
)
from timesheet_engine.calculators.effort_limits import EffortLimitValidator
from timesheet_engine.config.effort_policy import EffortPolicy
from timesheet_engine.models.results import SkipReason
from timesheet_engine.models.timesheet import TimesheetEntry


def entry(date, hours):
    return TimesheetEntry(user_id=uuid.uuid4(), task_id=uuid.uuid4(), date=date, hours=hours)


class TestWeekBounds:
    """Tests for week windows."""

    def test_sunday_start_by_default(self):
        # 2024-03-20 is a Wednesday
        assert week_bounds(dt.date(2024, 3, 20)) == (dt.date(2024, 3, 17), dt.date(2024, 3, 23))

    def test_sunday_is_its_own_week_start(self):
        assert week_bounds(dt.date(2024, 3, 17))[0] == dt.date(2024, 3, 17)

    def test_monday_start(self):
        start, end = week_bounds(dt.date(2024, 3, 17), week_starts_on=0)
        assert (start, end) == (dt.date(2024, 3, 11), dt.date(2024, 3, 17))

    def test_week_spanning_month_end(self):
        assert week_bounds(dt.date(2024, 3, 1)) == (dt.date(2024, 2, 25), dt.date(2024, 3, 2))


class TestDateHelpers:
    """Tests for month helpers, ranges and date runs."""

    def test_month_bounds_leap_february(self):
        assert month_bounds(dt.date(2024, 2, 10)) == (dt.date(2024, 2, 1), dt.date(2024, 2, 29))

    def test_first_of_previous_month_across_year(self):
        assert first_of_previous_month(dt.date(2024, 1, 31)) == dt.date(2023, 12, 1)

    def test_date_range_inclusive_and_empty_when_inverted(self):
        assert len(date_range(dt.date(2024, 3, 1), dt.date(2024, 3, 7))) == 7
        assert date_range(dt.date(2024, 3, 7), dt.date(2024, 3, 1)) == []

    def test_runs_split_on_gaps(self):
        dates = [dt.date(2024, 3, d) for d in (8, 5, 6)]
        runs = group_into_date_runs(dates, key=lambda d: d)
        assert runs == [[dt.date(2024, 3, 5), dt.date(2024, 3, 6)], [dt.date(2024, 3, 8)]]

    def test_same_date_continues_run(self):
        dates = [dt.date(2024, 3, 5), dt.date(2024, 3, 5), dt.date(2024, 3, 6)]
        assert len(group_into_date_runs(dates, key=lambda d: d)) == 1

    def test_runs_cross_month_boundary(self):
        dates = [dt.date(2024, 2, 29), dt.date(2024, 3, 1)]
        assert len(group_into_date_runs(dates, key=lambda d: d)) == 1

    def test_no_items_no_runs(self):
        assert group_into_date_runs([], key=lambda d: d) == []


class TestEffortLimitValidator:
    """Tests for daily and weekly limit checks."""

    @pytest.fixture
    def validator(self):
        return EffortLimitValidator(EffortPolicy(daily_efforts_limit=9, weekly_efforts_limit=15))

    def test_daily_limit_is_inclusive(self, validator):
        assert not validator.exceeds_daily_limit(existing_hours=4, proposed_hours=5)
        assert validator.exceeds_daily_limit(existing_hours=4, proposed_hours=6)

    def test_weekly_limit_rejects_sixteen_hours(self, validator):
        """8 hours filled on Monday plus 8 on Tuesday exceeds 15."""
        week = [entry(dt.date(2024, 3, 18), 8)]
        assert validator.exceeds_weekly_limit(dt.date(2024, 3, 19), 8, week)

    def test_weekly_limit_allows_fifteen_hours(self, validator):
        week = [entry(dt.date(2024, 3, 18), 8)]
        assert not validator.exceeds_weekly_limit(dt.date(2024, 3, 19), 7, week)

    def test_weekly_hours_ignore_target_date(self, validator):
        target = dt.date(2024, 3, 19)
        week = [entry(target, 8), entry(dt.date(2024, 3, 18), 3)]
        assert validator.weekly_hours_excluding(target, week) == 3

    def test_weekly_hours_ignore_other_weeks(self, validator):
        week = [entry(dt.date(2024, 3, 16), 8), entry(dt.date(2024, 3, 24), 8)]
        assert validator.weekly_hours_excluding(dt.date(2024, 3, 19), week) == 0

    def test_check_reports_daily_before_weekly(self, validator):
        week = [entry(dt.date(2024, 3, 18), 8)]
        reason = validator.check(dt.date(2024, 3, 19), 0, 10, week)
        assert reason == SkipReason.DAILY_LIMIT_EXCEEDED

    def test_check_weekly_only(self, validator):
        week = [entry(dt.date(2024, 3, 18), 8)]
        reason = validator.check(dt.date(2024, 3, 19), 0, 10, week, check_daily=False)
        assert reason == SkipReason.WEEKLY_LIMIT_EXCEEDED

    def test_check_weekly_counts_untouched_hours_on_date(self, validator):
        week = [entry(dt.date(2024, 3, 18), 8)]
        assert validator.check(dt.date(2024, 3, 19), 4, 4, week) == SkipReason.WEEKLY_LIMIT_EXCEEDED

    def test_check_passes_within_limits(self, validator):
        assert validator.check(dt.date(2024, 3, 19), 2, 6, []) is None

    def test_monday_week_start_moves_window(self):
        validator = EffortLimitValidator(
            EffortPolicy(daily_efforts_limit=9, weekly_efforts_limit=15, week_starts_on="monday")
        )
        # Sunday 17th belongs to the week of Monday 11th
        week = [entry(dt.date(2024, 3, 17), 8)]
        assert not validator.exceeds_weekly_limit(dt.date(2024, 3, 18), 8, week)
