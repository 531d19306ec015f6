"""
Grouping of tasks into per-minute notes.
"""
from collections import defaultdict
from datetime import datetime, tzinfo
from typing import Dict, Iterable, List, Mapping, Optional

from .common.models import Task

# Minute resolution; lexicographic order matches chronological order.
FILENAME_TIME_FORMAT = "%Y%m%d%H%M"


def group_key(when: datetime, tz: Optional[tzinfo]) -> str:
    """Format a timestamp as a note key in the given zone (None = local)."""
    return when.astimezone(tz).strftime(FILENAME_TIME_FORMAT)


def group_tasks_by_minute(tz: Optional[tzinfo], tasks: Iterable[Task]) -> Dict[str, List[Task]]:
    """
    Bucket tasks by their creation time truncated to the minute.

    Tasks within a bucket are ordered by exact creation time; ties keep
    their input order.
    """
    grouped: Dict[str, List[Task]] = defaultdict(list)
    for task in tasks:
        grouped[group_key(task.created_at, tz)].append(task)
    for bucket in grouped.values():
        bucket.sort(key=lambda t: t.created_at)
    return dict(grouped)


def sorted_keys(grouped: Mapping[str, object]) -> List[str]:
    """Group keys in the order notes are written: oldest minute first."""
    return sorted(grouped)
