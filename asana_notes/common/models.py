"""
Task record model and conversion from decoded JSON.
"""
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class Task:
    """
    A single task exported from Asana.

    Fields:
        name: Display name of the task.
        created_at: Timezone-aware creation time; decides the note it lands in.
        due_at: Due time, when the task has one.
        due_on: Due calendar date, when the task has no due time.
        description: Free-form notes, possibly spanning several lines.
    """
    name: str
    created_at: datetime
    due_at: Optional[datetime] = None
    due_on: Optional[date] = None
    description: str = ""


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp that must carry a UTC offset."""
    parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if parsed.tzinfo is None:
        raise ValueError(f"timestamp {value!r} has no time zone")
    return parsed


def check_encodable(field: str, value: Optional[str]) -> None:
    """Reject text that cannot be written out as UTF-8, such as lone surrogates."""
    if value is None:
        return
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        raise ValueError(f"{field}: not valid UTF-8 text ({e.reason})") from e


def task_from_record(record: Dict[str, Any]) -> Task:
    """
    Build a Task from a record already checked against the task schema.

    Raises:
        ValueError: if a timestamp or date field cannot be parsed, or a text
            field cannot be encoded as UTF-8.
    """
    for field in ("name", "created_at", "due_at", "due_on", "notes"):
        check_encodable(field, record.get(field))
    due_at = record.get("due_at")
    due_on = record.get("due_on")
    return Task(
        name=record["name"],
        created_at=parse_timestamp(record["created_at"]),
        due_at=parse_timestamp(due_at) if due_at else None,
        due_on=date.fromisoformat(due_on) if due_on else None,
        description=record.get("notes") or "",
    )
