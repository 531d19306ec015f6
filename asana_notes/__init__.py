"""
Convert Asana task exports into per-minute Markdown notes.
"""
from .common.errors import DecodeError, InvalidPathError, SinkError, TaskNotesError
from .common.models import Task
from .engine import NoteEngine, WriteOptions
from .writers import DirectorySink, LoggingSink, NopSink

__all__ = [
    "DecodeError",
    "DirectorySink",
    "InvalidPathError",
    "LoggingSink",
    "NopSink",
    "NoteEngine",
    "SinkError",
    "Task",
    "TaskNotesError",
    "WriteOptions",
]
