"""A sorted, duplicate-free series of snapshot times."""

from __future__ import annotations

from bisect import bisect_left
from datetime import datetime
from typing import Iterable, Iterator, Optional


class Timeseries:
    """Unique snapshot times kept in ascending order."""

    __slots__ = ("_times",)

    def __init__(self, times: Iterable[datetime] = ()) -> None:
        self._times: list[datetime] = sorted(set(times))

    def push(self, *times: datetime) -> None:
        """Insert times, keeping the series sorted and unique."""
        if times:
            self._times = sorted(set(self._times).union(times))

    def pop(self, index: int) -> datetime:
        """Remove and return the time at ``index``."""
        if not 0 <= index < len(self._times):
            raise IndexError(f"timeseries index {index} out of range")
        return self._times.pop(index)

    def discard(self, *times: datetime) -> None:
        """Remove the given times where present."""
        for t in times:
            i = self.find(t)
            if i != -1:
                del self._times[i]

    def pop_oldest(self) -> Optional[datetime]:
        """Remove and return the oldest time, or None if empty."""
        return self._times.pop(0) if self._times else None

    def peek_oldest(self) -> Optional[datetime]:
        """Return the oldest time, or None if empty."""
        return self._times[0] if self._times else None

    def pop_newest(self) -> Optional[datetime]:
        """Remove and return the newest time, or None if empty."""
        return self._times.pop() if self._times else None

    def peek_newest(self) -> Optional[datetime]:
        """Return the newest time, or None if empty."""
        return self._times[-1] if self._times else None

    def find(self, t: datetime) -> int:
        """Return the index of ``t``, or -1 if it is absent."""
        i = bisect_left(self._times, t)
        if i < len(self._times) and self._times[i] == t:
            return i
        return -1

    def __len__(self) -> int:
        return len(self._times)

    def __iter__(self) -> Iterator[datetime]:
        return iter(self._times)

    def __getitem__(self, index):
        return self._times[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Timeseries):
            return self._times == other._times
        if isinstance(other, list):
            return self._times == other
        return NotImplemented

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Timeseries({self._times!r})"