"""
Command-line entry point: convert Asana task JSONL into Markdown notes.

Typical use, with the task export piped in:

    asana-my-tasks.sh | asana-to-md --index ~/Notes/Inbox
"""
import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .common.errors import TaskNotesError
from .common.io_utils import decode_tasks
from .config import ConfigError, apply_overrides, load_config
from .engine import NoteEngine, WriteOptions
from .writers import DirectorySink, LoggingSink, NopSink, NoteSink

logger = logging.getLogger("asana_notes")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging configuration."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.StreamHandler(sys.stderr)]
    )


def build_sink(output_dir: str, dry_run: bool, verbose: bool) -> NoteSink:
    """Pick the sink for a run: report-only, reporting, or silent."""
    if dry_run:
        return LoggingSink(output_dir, NopSink())
    if verbose:
        return LoggingSink(output_dir, DirectorySink(output_dir))
    return DirectorySink(output_dir)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="asana-to-md",
        description="Convert Asana tasks (one JSON object per line) into Markdown notes.",
    )
    parser.add_argument("output_dir", nargs="?", help="Directory to write notes into (default: current directory)")
    parser.add_argument("-n", "--dry-run", action="store_true", help="Report what would be written without writing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Report every write and enable debug logging")
    parser.add_argument("--index", action="store_true", default=None, help="Also write an index note linking every task")
    parser.add_argument(
        "--actionable",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Render tasks as checkboxes (default: on)",
    )
    parser.add_argument("-i", "--input", help="Read tasks from this file instead of standard input")
    parser.add_argument("-c", "--config", help="YAML configuration file")
    parser.add_argument("--timezone", help="IANA time zone for note names and due dates (default: local)")
    parser.add_argument("--tag", help="Tag attached to every task (default: inbox)")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)
    setup_logging(args.verbose)

    try:
        config = apply_overrides(
            load_config(args.config),
            output_dir=args.output_dir,
            timezone=args.timezone,
            tag=args.tag,
            index=args.index,
            actionable=args.actionable,
        )
        tz = config.tzinfo()
    except ConfigError as e:
        logger.error(str(e))
        return 1

    try:
        if args.input:
            with open(Path(args.input), 'rb') as f:
                tasks, decode_errors = decode_tasks(f)
        else:
            tasks, decode_errors = decode_tasks(sys.stdin.buffer)
    except OSError as e:
        logger.error(f"Cannot read input: {e}")
        return 1

    if decode_errors and not args.dry_run:
        # Appends are not idempotent, so a partial run would leave notes
        # that a corrected re-run would duplicate.
        logger.error(f"{len(decode_errors)} records failed to decode; nothing written")
        return 1

    write_errors: List[TaskNotesError] = []
    options = WriteOptions(
        tz=tz,
        index=config.index,
        omit_checkboxes=not config.actionable,
        tag=config.tag,
        due_glyph=config.due_glyph,
        report_error=write_errors.append,
    )
    sink = build_sink(config.output_dir, args.dry_run, args.verbose)
    NoteEngine(sink, options).write_tasks(tasks)

    if decode_errors or write_errors:
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
