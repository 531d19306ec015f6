from .note_writer import (
    DirectorySink,
    FileEnd,
    LoggingSink,
    NopSink,
    NoteSink,
    validate_name,
)

__all__ = [
    "DirectorySink",
    "FileEnd",
    "LoggingSink",
    "NopSink",
    "NoteSink",
    "validate_name",
]
