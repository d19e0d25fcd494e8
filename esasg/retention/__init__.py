"""Snapshot retention with decreasing granularity over time."""