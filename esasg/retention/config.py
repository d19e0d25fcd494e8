"""Retention configuration and the fixed durations it is built on."""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Optional

# Calendar units are approximated: a year is 365.2425 days and a month
# is a twelfth of that.
HOUR = timedelta(hours=1)
DAY = 24 * HOUR
WEEK = 7 * DAY
YEAR = timedelta(seconds=31_556_952)
MONTH = YEAR / 12


@dataclass(frozen=True)
class Config:
    """Number of snapshots to retain at each granularity."""

    hourly: int = 0
    daily: int = 0
    weekly: int = 0
    monthly: int = 0
    yearly: int = 0

    def __post_init__(self) -> None:
        for f in fields(self):
            if getattr(self, f.name) < 0:
                raise ValueError(f"{f.name} must not be negative")

    def min_interval(self) -> Optional[timedelta]:
        """Return the smallest configured interval, or None if none is set.

        This is the interval at which snapshot jobs should run.
        """
        intervals = (
            (HOUR, self.hourly),
            (DAY, self.daily),
            (WEEK, self.weekly),
            (MONTH, self.monthly),
            (YEAR, self.yearly),
        )
        return next((width for width, count in intervals if count), None)

    def __len__(self) -> int:
        return self.hourly + self.daily + self.weekly + self.monthly + self.yearly