"""
Tests for the note engine.
"""
from datetime import datetime, timezone

import pytest

from asana_notes.common.errors import InvalidPathError, SinkError
from asana_notes.common.models import Task
from asana_notes.engine import NoteEngine, WriteOptions
from asana_notes.writers import DirectorySink

from conftest import MemorySink, utc

NOW = datetime(2024, 1, 5, 18, 0, 30, tzinfo=timezone.utc)


class FailingSink(MemorySink):
    """Fails every write whose name is in ``fail_on``."""

    def __init__(self, fail_on):
        super().__init__()
        self.fail_on = set(fail_on)

    def write_file(self, name, header, body):
        if name in self.fail_on:
            raise SinkError("write", name, OSError("disk full"))
        super().write_file(name, header, body)


class TestWriteTasks:
    """Test grouping, rendering and writing together."""

    def test_empty(self, memory_sink, tz):
        stats = NoteEngine(memory_sink, WriteOptions(tz=tz)).write_tasks([])
        assert memory_sink.files == {}
        assert stats["notes_written"] == 0
        assert stats["ok"]

    def test_single_task(self, memory_sink, tz, brush_teeth):
        NoteEngine(memory_sink, WriteOptions(tz=tz)).write_tasks([brush_teeth])
        assert memory_sink.calls == [(
            "202401040805.md",
            '---\ntitle: "Brush teeth"\ntags:\n  - inbox\n---\n\n',
            "- [ ] Brush teeth #inbox\n",
        )]

    def test_multiple_groups_in_key_order(self, memory_sink, tz, brush_teeth, morning_tasks):
        stats = NoteEngine(memory_sink, WriteOptions(tz=tz)).write_tasks([brush_teeth] + morning_tasks)
        assert [name for name, _, _ in memory_sink.calls] == ["202401031730.md", "202401040805.md"]
        assert memory_sink.files["202401031730.md"] == (
            "- [ ] Set alarm #inbox\n"
            "- [ ] Buy train ticket #inbox\n"
        )
        assert stats["notes_written"] == 2
        assert stats["tasks_written"] == 3
        assert stats["index_written"] is False

    def test_each_task_rendered_once(self, memory_sink, tz, brush_teeth, morning_tasks):
        NoteEngine(memory_sink, WriteOptions(tz=tz)).write_tasks(morning_tasks + [brush_teeth])
        bodies = "".join(body for _, _, body in memory_sink.calls)
        for task in morning_tasks + [brush_teeth]:
            assert bodies.count(f"] {task.name} #inbox") == 1

    def test_omit_checkboxes(self, memory_sink, tz, brush_teeth):
        NoteEngine(memory_sink, WriteOptions(tz=tz, omit_checkboxes=True)).write_tasks([brush_teeth])
        assert memory_sink.calls[0][2] == "- Brush teeth #inbox\n"

    def test_index_named_after_now(self, memory_sink, tz, brush_teeth, morning_tasks):
        options = WriteOptions(tz=tz, index=True, now=lambda: NOW)
        stats = NoteEngine(memory_sink, options).write_tasks([brush_teeth] + morning_tasks)
        name, header, body = memory_sink.calls[-1]
        assert name == "202401051000.md"
        assert header == "---\ntags:\n  - inbox\n---\n\n"
        assert body == (
            "- [Set alarm](202401031730.md)\n"
            "- [Buy train ticket](202401031730.md)\n"
            "- [Brush teeth](202401040805.md)\n"
        )
        assert stats["index_written"] is True


class TestErrorHandling:
    """Test that a failed write does not stop the run."""

    def test_failure_reported_and_run_continues(self, tz, brush_teeth, morning_tasks):
        sink = FailingSink({"202401031730.md"})
        reported = []
        options = WriteOptions(tz=tz, index=True, report_error=reported.append, now=lambda: NOW)
        stats = NoteEngine(sink, options).write_tasks([brush_teeth] + morning_tasks)

        assert [name for name, _, _ in sink.calls] == ["202401040805.md", "202401051000.md"]
        assert len(reported) == 1
        assert isinstance(reported[0], SinkError)
        assert reported[0].name == "202401031730.md"
        assert stats["notes_written"] == 1
        assert stats["tasks_written"] == 1
        assert stats["ok"] is False
        assert len(stats["errors"]) == 1

    def test_index_failure_reported(self, tz, brush_teeth):
        sink = FailingSink({"202401051000.md"})
        reported = []
        options = WriteOptions(tz=tz, index=True, report_error=reported.append, now=lambda: NOW)
        stats = NoteEngine(sink, options).write_tasks([brush_teeth])
        assert stats["index_written"] is False
        assert [e.name for e in reported] == ["202401051000.md"]

    def test_without_callback(self, tz, brush_teeth):
        stats = NoteEngine(FailingSink({"202401040805.md"}), WriteOptions(tz=tz)).write_tasks([brush_teeth])
        assert stats["ok"] is False

    def test_unencodable_task_reported_and_run_continues(self, tmp_path, tz, brush_teeth):
        """Test that a task the sink cannot encode fails only its own note."""
        bad = Task(name="bad \ud800", created_at=utc(2024, 1, 4, 1, 30, 10))
        reported = []
        stats = NoteEngine(
            DirectorySink(tmp_path), WriteOptions(tz=tz, report_error=reported.append)
        ).write_tasks([bad, brush_teeth])

        assert [type(e) for e in reported] == [SinkError]
        assert reported[0].name == "202401031730.md"
        assert not (tmp_path / "202401031730.md").exists()
        assert (tmp_path / "202401040805.md").is_file()
        assert stats["notes_written"] == 1
        assert stats["ok"] is False

    def test_invalid_path_reported(self, tmp_path, tz, brush_teeth):
        class RenamingSink(DirectorySink):
            def write_file(self, name, header, body):
                super().write_file("../" + name, header, body)

        reported = []
        stats = NoteEngine(
            RenamingSink(tmp_path / "out"), WriteOptions(tz=tz, report_error=reported.append)
        ).write_tasks([brush_teeth])
        assert isinstance(reported[0], InvalidPathError)
        assert not (tmp_path / "out").exists()
        assert not stats["ok"]


class TestDirectoryRuns:
    """Test repeated runs against a real directory."""

    def test_rerun_appends_with_blank_line(self, tmp_path, tz, brush_teeth, morning_tasks):
        engine = NoteEngine(DirectorySink(tmp_path), WriteOptions(tz=tz))
        engine.write_tasks([brush_teeth] + morning_tasks)
        engine.write_tasks([brush_teeth] + morning_tasks)

        single = (tmp_path / "202401040805.md").read_text(encoding="utf-8")
        assert single == (
            '---\ntitle: "Brush teeth"\ntags:\n  - inbox\n---\n\n'
            "- [ ] Brush teeth #inbox\n"
            "\n\n"
            "- [ ] Brush teeth #inbox\n"
        )
        multi = (tmp_path / "202401031730.md").read_text(encoding="utf-8")
        body = "- [ ] Set alarm #inbox\n- [ ] Buy train ticket #inbox\n"
        assert multi == body + "\n\n" + body

    def test_manual_edits_preserved(self, tmp_path, tz, brush_teeth):
        note = tmp_path / "202401040805.md"
        note.write_text("# My edits\n\nKeep me.\n\n", encoding="utf-8")
        NoteEngine(DirectorySink(tmp_path), WriteOptions(tz=tz)).write_tasks([brush_teeth])
        assert note.read_text(encoding="utf-8") == "# My edits\n\nKeep me.\n\n- [ ] Brush teeth #inbox\n"

    def test_description_ending_keeps_next_run_flush(self, tmp_path, tz):
        task = Task(name="Plan", created_at=utc(2024, 1, 4, 16, 5), description="Details")
        engine = NoteEngine(DirectorySink(tmp_path), WriteOptions(tz=tz))
        engine.write_tasks([task])
        engine.write_tasks([task])
        content = (tmp_path / "202401040805.md").read_text(encoding="utf-8")
        body = "- [ ] Plan #inbox\n\nDetails\n\n"
        assert content.endswith(body + body)


if __name__ == "__main__":
    pytest.main([__file__])
