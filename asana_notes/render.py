"""
Markdown rendering for task notes and the optional index note.
"""
from dataclasses import dataclass
from datetime import datetime, tzinfo
from typing import List, Mapping, Optional, Sequence

from .common.models import Task
from .grouping import FILENAME_TIME_FORMAT, sorted_keys

DEFAULT_TAG = "inbox"
DUE_DATE_GLYPH = "\U0001F4C5"  # 📅, understood by the Obsidian Tasks plugin


@dataclass(frozen=True)
class RenderOptions:
    tz: Optional[tzinfo] = None
    omit_checkboxes: bool = False
    tag: str = DEFAULT_TAG
    due_glyph: str = DUE_DATE_GLYPH


@dataclass(frozen=True)
class RenderedNote:
    """Front matter (possibly empty) and Markdown body of one note."""
    header: str
    body: str


def format_due(task: Task, options: RenderOptions) -> str:
    """Return the due annotation for a task, or "" when it has none."""
    if task.due_at is not None:
        return f" {options.due_glyph} {task.due_at.astimezone(options.tz):%Y-%m-%d}"
    if task.due_on is not None:
        return f" {options.due_glyph} {task.due_on.isoformat()}"
    return ""


def render_task(task: Task, options: RenderOptions) -> str:
    parts = ["- "]
    if not options.omit_checkboxes:
        parts.append("[ ] ")
    parts.append(f"{task.name} #{options.tag}")
    parts.append(format_due(task, options))
    parts.append("\n")
    if task.description:
        parts.append(f"\n{task.description}\n\n")
    return "".join(parts)


def render_header(title: Optional[str], tag: str) -> str:
    # Titles are written verbatim; quotes in a name are not escaped.
    lines = ["---"]
    if title is not None:
        lines.append(f'title: "{title}"')
    lines.extend(["tags:", f"  - {tag}", "---"])
    return "\n".join(lines) + "\n\n"


def render_note(tasks: Sequence[Task], options: RenderOptions) -> RenderedNote:
    """
    Render one group of tasks as a note.

    Only a group holding exactly one task gets front matter, titled after
    that task.
    """
    body = "".join(render_task(task, options) for task in tasks)
    header = render_header(tasks[0].name, options.tag) if len(tasks) == 1 else ""
    return RenderedNote(header=header, body=body)


def render_index(grouped: Mapping[str, Sequence[Task]], options: RenderOptions) -> RenderedNote:
    """Render a note linking every task to the note it was written to."""
    lines: List[str] = []
    for key in sorted_keys(grouped):
        for task in grouped[key]:
            lines.append(f"- [{task.name}]({key}.md)\n")
    return RenderedNote(header=render_header(None, options.tag), body="".join(lines))


def index_name(now: datetime, tz: Optional[tzinfo]) -> str:
    """Name of the index note for a run started at ``now``."""
    return now.astimezone(tz).strftime(FILENAME_TIME_FORMAT) + ".md"
