"""
Snapshot freshness check.

The engine never enforces staleness itself: every quote carries the
timestamp of the snapshot it was computed from, and the caller decides
whether to discard it before submission.
"""

from __future__ import annotations


def is_fresh(snapshot_timestamp: int, current_timestamp: int, max_staleness_seconds: int) -> bool:
    """Return True if the snapshot is within the max staleness window."""
    if current_timestamp < 0:
        raise ValueError(f"current_timestamp must be non-negative: {current_timestamp}")
    if max_staleness_seconds <= 0:
        raise ValueError(f"max_staleness_seconds must be positive: {max_staleness_seconds}")
    if snapshot_timestamp > current_timestamp:
        return False
    return (current_timestamp - snapshot_timestamp) <= max_staleness_seconds
