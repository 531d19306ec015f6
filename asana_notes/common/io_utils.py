"""
IO utilities for reading line-delimited task records.
"""
import json
import logging
from typing import Any, Dict, IO, Iterator, List, Tuple, Union

from .errors import DecodeError
from .models import Task, task_from_record
from .schema_validator import validate_task_record

logger = logging.getLogger(__name__)


def read_jsonl_stream(stream: Union[IO[bytes], IO[str]]) -> Iterator[Tuple[int, Dict[str, Any]]]:
    """
    Read a JSONL stream and yield (line_number, data) tuples.

    Binary streams are decoded as UTF-8 one line at a time. Blank lines are
    skipped. A line that is not valid UTF-8 or not valid JSON yields a dict
    with an "error" key instead of raising, so the caller can keep scanning.

    Yields:
        Tuple of (line_number, parsed_json_data)
    """
    for line_num, raw in enumerate(stream, 1):
        if isinstance(raw, bytes):
            try:
                raw = raw.decode("utf-8")
            except UnicodeDecodeError as e:
                yield line_num, {"error": f"invalid UTF-8: {e}", "raw_line": raw.decode("utf-8", "replace")}
                continue
        line = raw.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            yield line_num, {"error": f"JSON decode error: {e}", "raw_line": line}
            continue
        if not isinstance(data, dict):
            yield line_num, {"error": f"expected a JSON object, got {type(data).__name__}", "raw_line": line}
            continue
        yield line_num, {"record": data}


def decode_tasks(stream: Union[IO[bytes], IO[str]]) -> Tuple[List[Task], List[DecodeError]]:
    """
    Decode every task in a JSONL stream.

    Malformed records are logged with their line number and skipped.

    Returns:
        Tuple of (tasks, decode_errors)
    """
    tasks: List[Task] = []
    errors: List[DecodeError] = []

    for line_num, entry in read_jsonl_stream(stream):
        if "error" in entry:
            errors.append(DecodeError(line_num, entry["error"]))
            logger.error(f"line {line_num}: {entry['error']}")
            continue

        record = entry["record"]
        is_valid, error_msg = validate_task_record(record)
        if not is_valid:
            errors.append(DecodeError(line_num, f"schema validation failed: {error_msg}"))
            logger.error(f"line {line_num}: schema validation failed: {error_msg}")
            continue

        try:
            tasks.append(task_from_record(record))
        except ValueError as e:
            errors.append(DecodeError(line_num, str(e)))
            logger.error(f"line {line_num}: {e}")

    logger.info(f"Decoded {len(tasks)} tasks, {len(errors)} rejected")
    return tasks, errors
