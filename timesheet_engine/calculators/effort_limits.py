"""Daily and weekly effort-limit checks.

A date whose hours would push the user over the daily or weekly limit is
skipped rather than failing the whole batch; the checks here only decide,
the caller records the skip.
"""

import datetime as dt
import logging
from typing import Iterable, Optional, Tuple

from timesheet_engine.calculators.date_utils import week_bounds
from timesheet_engine.config.effort_policy import EffortPolicy
from timesheet_engine.models.results import SkipReason
from timesheet_engine.models.timesheet import TimesheetEntry

logger = logging.getLogger(__name__)


class EffortLimitValidator:
    """Applies an EffortPolicy's daily and weekly caps.

    Example:
        >>> validator = EffortLimitValidator(
        ...     EffortPolicy(daily_efforts_limit=9, weekly_efforts_limit=15)
        ... )
        >>> validator.exceeds_daily_limit(existing_hours=4, proposed_hours=6)
        True
    """

    def __init__(self, policy: EffortPolicy):
        self.policy = policy

    def week_of(self, date: dt.date) -> Tuple[dt.date, dt.date]:
        """Inclusive week window containing ``date``."""
        return week_bounds(date, self.policy.week_starts_on)

    def exceeds_daily_limit(self, existing_hours: int, proposed_hours: int) -> bool:
        """Whether a date would end up above the daily limit.

        Args:
            existing_hours: Hours already filled on the date that the request
                does not replace
            proposed_hours: Hours the request would record on the date
        """
        return existing_hours + proposed_hours > self.policy.daily_efforts_limit

    def weekly_hours_excluding(
        self, target_date: dt.date, week_entries: Iterable[TimesheetEntry]
    ) -> int:
        """Hours filled in the target date's week on every other date."""
        week_start, week_end = self.week_of(target_date)
        return sum(
            entry.hours
            for entry in week_entries
            if week_start <= entry.date <= week_end and entry.date != target_date
        )

    def exceeds_weekly_limit(
        self,
        target_date: dt.date,
        proposed_hours: int,
        week_entries: Iterable[TimesheetEntry],
    ) -> bool:
        """Whether the week would end up above the weekly limit.

        Args:
            target_date: Date the hours are recorded on
            proposed_hours: Total hours the date would hold afterwards
            week_entries: The user's entries in the target date's week;
                entries on the target date itself are ignored
        """
        filled = self.weekly_hours_excluding(target_date, week_entries)
        return filled + proposed_hours > self.policy.weekly_efforts_limit

    def check(
        self,
        target_date: dt.date,
        existing_hours: int,
        proposed_hours: int,
        week_entries: Iterable[TimesheetEntry],
        check_daily: bool = True,
    ) -> Optional[SkipReason]:
        """Run the daily then weekly check for one date.

        Args:
            target_date: Date under consideration
            existing_hours: Hours on the date that remain untouched
            proposed_hours: Hours the operation would write on the date
            week_entries: The user's entries in the date's week
            check_daily: Set False to apply only the weekly limit

        Returns:
            The violated limit, or None if the date is within both limits
        """
        if check_daily and self.exceeds_daily_limit(existing_hours, proposed_hours):
            logger.info(
                f"Daily efforts limit ({self.policy.daily_efforts_limit}) exceeded "
                f"for {target_date}: {existing_hours} filled + {proposed_hours} requested"
            )
            return SkipReason.DAILY_LIMIT_EXCEEDED

        if self.exceeds_weekly_limit(
            target_date, existing_hours + proposed_hours, week_entries
        ):
            logger.info(
                f"Weekly efforts limit ({self.policy.weekly_efforts_limit}) exceeded "
                f"for week of {target_date}"
            )
            return SkipReason.WEEKLY_LIMIT_EXCEEDED

        return None
