"""Decide which snapshots to keep with decreasing granularity over time.

Based on the retention scheme of the Acronis Disaster Recovery Service.
The policy depends on the newest snapshot time, not on the current time.
"""

from __future__ import annotations

import math
from datetime import datetime
from itertools import pairwise
from typing import Iterable

from esasg.retention.bucket import Buckets
from esasg.retention.config import HOUR, Config
from esasg.retention.timeseries import Timeseries


def keep(config: Config, snapshots: Iterable[datetime]) -> list[datetime]:
    """Return the snapshot times to keep, in ascending order."""
    shots = Timeseries(snapshots)
    newest = shots.peek_newest()
    if newest is None:
        return []
    buckets = Buckets.from_config(config, newest)
    if not len(buckets):
        raise ValueError("retention config defines no buckets")
    buckets.assign(shots)
    redistribute(buckets)

    kept = Timeseries()
    last = buckets[-1]
    for bucket in buckets:
        if bucket.is_catchall():
            continue
        if bucket.width == HOUR:
            kept.push(*bucket.snapshots)
            continue
        oldest = bucket.snapshots.peek_oldest()
        if oldest is not None:
            kept.push(oldest)
        if bucket is last:
            newest_in_bucket = bucket.snapshots.peek_newest()
            if newest_in_bucket is not None:
                kept.push(newest_in_bucket)

    # Between two kept snapshots at least 1.5 bucket lengths apart, also keep
    # the one nearest the middle, but no closer than half a bucket length to
    # either end. Across buckets of different sizes the length used is the
    # geometric mean of the two widths.
    extra = []
    for left, right in pairwise(list(kept)):
        left_bucket, right_bucket = buckets.containing(left), buckets.containing(right)
        if left_bucket is right_bucket:
            continue
        bucket_length = math.sqrt(
            left_bucket.width.total_seconds() * right_bucket.width.total_seconds()
        )
        distance = right - left
        if distance.total_seconds() < 1.5 * bucket_length:
            continue
        center = left + distance / 2
        half = 0.5 * bucket_length
        candidates = [
            s
            for s in shots[shots.find(left) + 1 : shots.find(right)]
            if (s - left).total_seconds() >= half and (right - s).total_seconds() >= half
        ]
        closest = min(candidates, key=lambda s: abs(center - s), default=None)
        if closest is not None:
            extra.append(closest)

    kept.push(*extra)
    return list(kept)


def delete(config: Config, snapshots: Iterable[datetime]) -> list[datetime]:
    """Return the snapshot times to delete: the complement of keep()."""
    snapshots = list(snapshots)
    shots = Timeseries(snapshots)
    shots.discard(*keep(config, snapshots))
    return list(shots)


def redistribute(buckets: Buckets) -> None:
    """Move snapshots across bucket boundaries to spread them evenly.

    A snapshot within a quarter of the smallest bucket width of a boundary
    moves to an empty older neighbour, or away from a crowded bucket.
    """
    if not len(buckets):
        return
    close = buckets[-1].width / 4
    for bucket, newer in pairwise(buckets):
        if not bucket.snapshots:
            if newer.snapshots and newer.snapshots.peek_oldest() - bucket.end <= close:
                bucket.snapshots.push(newer.snapshots.pop_oldest())
        elif len(bucket.snapshots) > 1:
            if bucket.end - bucket.snapshots.peek_newest() <= close:
                newer.snapshots.push(bucket.snapshots.pop_newest())