"""
Note sinks: where rendered notes end up.

Every sink exposes ``write_file(name, header, body)``. ``DirectorySink`` appends
to Markdown files under a directory, ``LoggingSink`` reports each write before
handing it to another sink, and ``NopSink`` only validates names (dry runs).
"""
import enum
import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, Protocol, TextIO, Union

from ..common.errors import InvalidPathError, SinkError

logger = logging.getLogger(__name__)

BLANK_LINE = b"\n\n"


class NoteSink(Protocol):
    def write_file(self, name: str, header: str, body: str) -> None:
        ...


class FileEnd(enum.Enum):
    """How the existing content of a note file ends."""
    EMPTY = "empty"
    BLANK_LINE = "blank_line"
    NEEDS_SEPARATOR = "needs_separator"


def validate_name(name: str, op: str = "write") -> None:
    """
    Check that a note name is a clean relative path with "/" separators.

    Raises:
        InvalidPathError: for empty or absolute names, "." and ".." elements,
            empty elements, backslashes or NUL characters.
    """
    if not isinstance(name, str) or not name or name == ".":
        raise InvalidPathError(op, str(name))
    if "\\" in name or "\x00" in name or name.startswith("/"):
        raise InvalidPathError(op, name)
    for element in name.split("/"):
        if element in ("", ".", ".."):
            raise InvalidPathError(op, name)


def file_end_state(f: BinaryIO) -> FileEnd:
    """
    Classify the end of an open file.

    A file whose last two bytes cannot be read back is treated as needing a
    separator.
    """
    try:
        size = f.seek(0, 2)
    except OSError:
        return FileEnd.NEEDS_SEPARATOR
    if size == 0:
        return FileEnd.EMPTY
    if size < len(BLANK_LINE):
        return FileEnd.NEEDS_SEPARATOR
    try:
        f.seek(size - len(BLANK_LINE))
        tail = f.read(len(BLANK_LINE))
    except OSError:
        return FileEnd.NEEDS_SEPARATOR
    if tail == BLANK_LINE:
        return FileEnd.BLANK_LINE
    return FileEnd.NEEDS_SEPARATOR


def append_payload(state: FileEnd, header: bytes, body: bytes) -> bytes:
    """Bytes to append given the current end of the file."""
    if state is FileEnd.EMPTY:
        return header + body
    if state is FileEnd.BLANK_LINE:
        return body
    return BLANK_LINE + body


class DirectorySink:
    """
    Appends notes to Markdown files under a root directory.

    Re-running against the same directory never overwrites existing content:
    a header is written only into an empty file, and appended content is
    always separated from earlier content by a blank line.
    """

    def __init__(self, root: Union[str, Path]):
        self.root = Path(root)

    def path_for(self, name: str) -> Path:
        return self.root.joinpath(*name.split("/"))

    def write_file(self, name: str, header: str, body: str) -> None:
        validate_name(name)
        path = self.path_for(name)

        # Encode before touching the file system so a bad string leaves no file behind.
        try:
            header_bytes = header.encode("utf-8")
            body_bytes = body.encode("utf-8")
        except UnicodeEncodeError as e:
            raise SinkError("encode", name, e) from e

        try:
            path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise SinkError("mkdir", name, e) from e

        try:
            f = open(path, "a+b")
        except OSError as e:
            raise SinkError("open", name, e) from e

        try:
            with f:
                state = file_end_state(f)
                data = append_payload(state, header_bytes, body_bytes)
                f.write(data)
        except OSError as e:
            raise SinkError("write", name, e) from e

        logger.debug(f"Appended {len(data)} bytes to {path} ({state.value})")


class LoggingSink:
    """Prints one line per write, then delegates to another sink."""

    def __init__(self, root: Union[str, Path], delegate: NoteSink, stream: Optional[TextIO] = None):
        self.root = Path(root)
        self.delegate = delegate
        self.stream = stream

    def write_file(self, name: str, header: str, body: str) -> None:
        validate_name(name)
        path = self.root.joinpath(*name.split("/"))

        marker = " (append)" if path.is_file() else ""
        line_count = body.count("\n")
        print(f"{path}\t{line_count} lines{marker}", file=self.stream or sys.stdout)

        self.delegate.write_file(name, header, body)


class NopSink:
    """Validates names like DirectorySink but writes nothing."""

    def write_file(self, name: str, header: str, body: str) -> None:
        validate_name(name)
