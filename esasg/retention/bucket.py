"""Time windows that snapshots are assigned to."""

from __future__ import annotations

from bisect import bisect_left
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from operator import attrgetter
from typing import Iterable, Iterator, Optional

from esasg.retention.config import DAY, HOUR, MONTH, WEEK, YEAR, Config
from esasg.retention.timeseries import Timeseries


@dataclass
class Bucket:
    """A window of time ending at ``end`` and ``width`` long.

    The snapshots held need not fall inside the window: they may be moved
    to neighbouring buckets to spread snapshots evenly over time.
    """

    width: timedelta
    end: datetime
    snapshots: Timeseries = field(default_factory=Timeseries)

    def start(self) -> datetime:
        """Return the start of the window."""
        return self.end - self.width

    def is_catchall(self) -> bool:
        """True for the bucket holding everything older than the others."""
        return self.width == timedelta(0)


class Buckets:
    """Buckets ordered from oldest to newest, catch-all first."""

    def __init__(self, buckets: Iterable[Bucket] = ()) -> None:
        self._buckets = list(buckets)

    @classmethod
    def from_config(cls, config: Config, end: datetime) -> "Buckets":
        """Build the buckets a config defines, the newest ending at ``end``.

        A catch-all bucket of width zero is put before the oldest one.
        A config with no buckets gives an empty result.
        """
        counts = (
            (HOUR, config.hourly),
            (DAY, config.daily),
            (WEEK, config.weekly),
            (MONTH, config.monthly),
            (YEAR, config.yearly),
        )
        widths = [width for width, count in counts for _ in range(count)]
        if not widths:
            return cls()
        newest_first = []
        for width in widths:
            newest_first.append(Bucket(width=width, end=end))
            end -= width
        newest_first.append(Bucket(width=timedelta(0), end=end))
        newest_first.reverse()
        return cls(newest_first)

    def for_time(self, t: datetime) -> Optional[Bucket]:
        """Return the bucket whose window holds ``t``, or None if it is too new."""
        idx = bisect_left(self._buckets, t, key=attrgetter("end"))
        if idx == len(self._buckets):
            return None
        if idx == 0 and len(self._buckets) > 1 and t == self._buckets[0].end:
            return self._buckets[1]
        return self._buckets[idx]

    def containing(self, snapshot: datetime) -> Optional[Bucket]:
        """Return the bucket that actually holds ``snapshot``."""
        return next((b for b in self._buckets if b.snapshots.find(snapshot) != -1), None)

    def assign(self, times: Iterable[datetime]) -> None:
        """Put each time into the bucket whose window holds it."""
        for t in times:
            bucket = self.for_time(t)
            if bucket is None:
                raise ValueError(f"time {t} is after the newest bucket")
            bucket.snapshots.push(t)

    def start(self) -> Optional[datetime]:
        """Return the oldest boundary, or None when there are no buckets."""
        return self._buckets[0].start() if self._buckets else None

    def end(self) -> Optional[datetime]:
        """Return the newest boundary, or None when there are no buckets."""
        return self._buckets[-1].end if self._buckets else None

    def __len__(self) -> int:
        return len(self._buckets)

    def __iter__(self) -> Iterator[Bucket]:
        return iter(self._buckets)

    def __getitem__(self, index):
        return self._buckets[index]

    def __repr__(self) -> str:
        return f"Buckets({self._buckets!r})"