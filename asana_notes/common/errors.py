"""
Error types raised while decoding tasks and writing notes.
"""
from typing import Optional


class TaskNotesError(Exception):
    """Base class for errors reported by the notes pipeline."""


class DecodeError(TaskNotesError):
    """A single input line could not be decoded into a task."""

    def __init__(self, line_num: int, reason: str):
        super().__init__(f"line {line_num}: {reason}")
        self.line_num = line_num
        self.reason = reason


class InvalidPathError(TaskNotesError, ValueError):
    """A note name is empty or would escape the output directory."""

    def __init__(self, op: str, name: str):
        super().__init__(f"{op} {name!r}: invalid argument")
        self.op = op
        self.name = name


class SinkError(TaskNotesError):
    """A file system operation failed while writing a note."""

    def __init__(self, op: str, name: str, cause: Optional[BaseException] = None):
        message = f"{op} {name}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.op = op
        self.name = name
        self.cause = cause
