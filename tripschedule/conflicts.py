"""
Conflict detection.

Given activities grouped by stop, detect overlapping pairs inside each stop.
Overlap rule:
    start < other_end AND other_start < end

Touching endpoints (end == other_start) are not a conflict.
Activities missing a start or end time never take part in a conflict.
Activities of different stops are never compared.
"""

from __future__ import annotations

from typing import Iterable, Mapping, Sequence

from tripschedule.grouping import group_by_stop
from tripschedule.model import Activity, ConflictPair


def _overlaps(a: Activity, b: Activity) -> bool:
    # callers guarantee both activities are fully timed
    return a.start_time < b.end_time and b.start_time < a.end_time


def detect_conflicts(groups: Mapping[str, Sequence[Activity]]) -> list[ConflictPair]:
    """
    Find overlapping activity pairs, each pair appears once (i<j) per stop.
    """
    conflicts: list[ConflictPair] = []

    for activities in groups.values():
        timed = [a for a in activities if a.is_timed]

        # O(n^2) is fine for typical per-stop activity counts
        for i in range(len(timed)):
            a = timed[i]
            for j in range(i + 1, len(timed)):
                b = timed[j]
                if _overlaps(a, b):
                    conflicts.append(ConflictPair(first=a, second=b))

    return conflicts


def has_conflict(conflicts: Iterable[ConflictPair], activity_id: str) -> bool:
    """
    True if the activity is either member of any conflict pair.
    """
    return any(pair.involves(activity_id) for pair in conflicts)


def conflicted_activity_ids(conflicts: Iterable[ConflictPair]) -> set[str]:
    out: set[str] = set()
    for pair in conflicts:
        out.add(pair.first.id)
        out.add(pair.second.id)
    return out


def find_conflicts(activities: Iterable[Activity]) -> list[ConflictPair]:
    """
    Group a flat activity list by stop and detect conflicts in one step.
    """
    return detect_conflicts(group_by_stop(activities))
