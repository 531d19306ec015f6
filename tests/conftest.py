from datetime import datetime, timedelta, timezone
from typing import Dict, List, Tuple

import pytest

from asana_notes.common.models import Task
from asana_notes.writers import validate_name

# Fixed UTC-8, so tests do not depend on the host's zone database.
PACIFIC = timezone(timedelta(hours=-8), "America/Los_Angeles")


def utc(*args) -> datetime:
    return datetime(*args, tzinfo=timezone.utc)


class MemorySink:
    """Records writes and keeps per-name contents, header only on first write."""

    def __init__(self):
        self.calls: List[Tuple[str, str, str]] = []
        self.files: Dict[str, str] = {}

    def write_file(self, name: str, header: str, body: str) -> None:
        validate_name(name)
        self.calls.append((name, header, body))
        if name in self.files:
            self.files[name] += body
        else:
            self.files[name] = header + body


@pytest.fixture
def tz():
    return PACIFIC


@pytest.fixture
def memory_sink():
    return MemorySink()


@pytest.fixture
def brush_teeth():
    return Task(name="Brush teeth", created_at=utc(2024, 1, 4, 16, 5, 0))


@pytest.fixture
def morning_tasks():
    """Two tasks created in the same minute, listed newest first."""
    return [
        Task(name="Buy train ticket", created_at=utc(2024, 1, 4, 1, 30, 20)),
        Task(name="Set alarm", created_at=utc(2024, 1, 4, 1, 30, 10)),
    ]
