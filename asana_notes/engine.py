"""
Core engine for turning decoded tasks into notes written through a sink.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import Any, Callable, Dict, Iterable, Optional

from .common.errors import TaskNotesError
from .common.models import Task
from .grouping import group_tasks_by_minute, sorted_keys
from .render import DEFAULT_TAG, DUE_DATE_GLYPH, RenderOptions, index_name, render_index, render_note
from .writers import NoteSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class WriteOptions:
    """
    Options for a single run of the engine.

    Fields:
        tz: Zone used for note names and due dates (None = local time).
        index: Also write an index note named after the current time.
        omit_checkboxes: Render plain bullets instead of "- [ ]" tasks.
        report_error: Called with every write failure; the run continues.
        now: Clock used to name the index note.
    """
    tz: Optional[tzinfo] = None
    index: bool = False
    omit_checkboxes: bool = False
    tag: str = DEFAULT_TAG
    due_glyph: str = DUE_DATE_GLYPH
    report_error: Optional[Callable[[TaskNotesError], None]] = None
    now: Callable[[], datetime] = datetime.now

    def render_options(self) -> RenderOptions:
        return RenderOptions(
            tz=self.tz,
            omit_checkboxes=self.omit_checkboxes,
            tag=self.tag,
            due_glyph=self.due_glyph,
        )


class NoteEngine:
    """Engine for grouping tasks into notes and writing them out."""

    def __init__(self, sink: NoteSink, options: Optional[WriteOptions] = None):
        """
        Initialize note engine.

        Args:
            sink: Destination for rendered notes
            options: Rendering and indexing options
        """
        self.sink = sink
        self.options = options or WriteOptions()

    def _write(self, name: str, header: str, body: str, stats: Dict[str, Any]) -> bool:
        try:
            self.sink.write_file(name, header, body)
        except TaskNotesError as e:
            logger.error(f"Failed to write {name}: {e}")
            stats["errors"].append(str(e))
            if self.options.report_error is not None:
                self.options.report_error(e)
            return False
        return True

    def write_tasks(self, tasks: Iterable[Task]) -> Dict[str, Any]:
        """
        Write one note per creation minute, then the index if requested.

        A failed write is reported and skipped; remaining notes are still
        written.

        Returns:
            Dictionary with write statistics
        """
        stats: Dict[str, Any] = {
            "notes_written": 0,
            "tasks_written": 0,
            "index_written": False,
            "errors": [],
        }

        render_options = self.options.render_options()
        grouped = group_tasks_by_minute(self.options.tz, tasks)
        logger.info(f"Writing {len(grouped)} notes")

        for key in sorted_keys(grouped):
            group = grouped[key]
            note = render_note(group, render_options)
            if self._write(f"{key}.md", note.header, note.body, stats):
                stats["notes_written"] += 1
                stats["tasks_written"] += len(group)

        if self.options.index:
            index = render_index(grouped, render_options)
            name = index_name(self.options.now(), self.options.tz)
            stats["index_written"] = self._write(name, index.header, index.body, stats)

        stats["ok"] = not stats["errors"]
        logger.info(
            f"Completed write: {stats['notes_written']} notes, "
            f"{stats['tasks_written']} tasks, {len(stats['errors'])} errors"
        )
        return stats
