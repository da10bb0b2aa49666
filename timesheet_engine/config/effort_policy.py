"""Effort policy value object.

The freeze day and the effort limits are passed into the engine explicitly
as an immutable EffortPolicy rather than read from global state, so every
rule can be exercised with any combination of limits.
"""

import calendar

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

_WEEKDAY_NAMES = {name.lower(): index for index, name in enumerate(calendar.day_name)}


class EffortPolicy(BaseModel):
    """Limits and freeze rules applied to every timesheet operation.

    Attributes:
        daily_efforts_limit: Maximum hours per user per calendar date
        weekly_efforts_limit: Maximum hours per user per week
        freeze_day_of_month: Day of month from which the previous month is frozen
        week_starts_on: First day of the week, as ``date.weekday()`` (6 = Sunday)

    Example:
        >>> policy = EffortPolicy(daily_efforts_limit=9, weekly_efforts_limit=15)
        >>> policy.freeze_day_of_month
        12
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    daily_efforts_limit: int = Field(12, ge=1, le=24)
    weekly_efforts_limit: int = Field(44, ge=1, le=168)
    freeze_day_of_month: int = Field(12, ge=1, le=31)
    week_starts_on: int = Field(6, ge=0, le=6)

    @field_validator("week_starts_on", mode="before")
    @classmethod
    def parse_weekday(cls, v):
        """Accept weekday names ("sunday") as well as weekday numbers."""
        if isinstance(v, str) and not v.strip().isdigit():
            name = v.strip().lower()
            if name not in _WEEKDAY_NAMES:
                raise ValueError(f"Unknown weekday: {v}")
            return _WEEKDAY_NAMES[name]
        return v

    @model_validator(mode="after")
    def validate_limits(self) -> "EffortPolicy":
        """The weekly limit cannot be lower than a single day's limit."""
        if self.weekly_efforts_limit < self.daily_efforts_limit:
            raise ValueError(
                f"weekly_efforts_limit ({self.weekly_efforts_limit}) must be at "
                f"least daily_efforts_limit ({self.daily_efforts_limit})"
            )
        return self
