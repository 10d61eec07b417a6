from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError

from .commands import check as cmd_check
from .commands import listing as cmd_listing
from .config import Settings, load_settings
from .errors import MetadataError
from .fs_utils import read_metadata, write_metadata
from .groups import GroupPath
from .metadata_file import MetadataFile
from .models import SongEntry

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(levelname).1s | %(name)s | %(message)s"

C_RESET = "\033[0m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",  # Cyan
    logging.INFO: "\033[37m",  # Light gray
    logging.WARNING: "\033[33m",  # Yellow
    logging.ERROR: "\033[31m",  # Red
    logging.CRITICAL: "\033[35m",  # Magenta
}


class ColorFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        color = LEVEL_COLORS.get(record.levelno)
        if not color:
            return message
        return f"{color}{message}{C_RESET}"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Edit Synthesia metadata files")
    parser.add_argument("--config", type=Path, help="Path to synthesia-meta.yaml")
    parser.add_argument("--log-level", default="WARNING", help="Python logging level")
    parser.add_argument("file", type=Path, help="Synthesia metadata XML file")

    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser("init", help="Write an empty metadata file")
    init_parser.add_argument("--force", action="store_true", help="Overwrite an existing file")

    for name in ("songs", "groups"):
        listing = subparsers.add_parser(name, help=f"List {name}")
        listing.add_argument("--json", action="store_true", help="Emit JSON to stdout")

    song_parser = subparsers.add_parser("set-song", help="Add or update a song record")
    song_parser.add_argument("unique_id")
    for field in ("title", "subtitle", "composer", "arranger", "copyright", "license"):
        song_parser.add_argument(f"--{field}", default=None)
    song_parser.add_argument("--rating", type=int, default=None)
    song_parser.add_argument("--difficulty", type=int, default=None)
    song_parser.add_argument(
        "--tag", action="append", default=[], dest="tags", help="Append a tag (repeatable)"
    )
    song_parser.add_argument(
        "--clear-tags", action="store_true", help="Drop existing tags before appending"
    )

    remove_song = subparsers.add_parser("remove-song", help="Remove a song record")
    remove_song.add_argument("unique_id")

    add_group = subparsers.add_parser("add-group", help="Create a group under an existing parent")
    add_group.add_argument("path")

    rename_group = subparsers.add_parser("rename-group", help="Rename a group")
    rename_group.add_argument("path")
    rename_group.add_argument("new_name")

    remove_group = subparsers.add_parser("remove-group", help="Remove a group and its subtree")
    remove_group.add_argument("path")

    swap_groups = subparsers.add_parser("swap-groups", help="Swap two sibling groups")
    swap_groups.add_argument("parent", help="Parent path ('' for top level)")
    swap_groups.add_argument("name_a")
    swap_groups.add_argument("name_b")

    add_to_group = subparsers.add_parser("add-to-group", help="Reference songs from a group")
    add_to_group.add_argument("path")
    add_to_group.add_argument("unique_ids", nargs="+")

    remove_from_group = subparsers.add_parser(
        "remove-from-group", help="Drop every reference to a song from a group"
    )
    remove_from_group.add_argument("path")
    remove_from_group.add_argument("unique_id")

    clear_group = subparsers.add_parser("clear-group", help="Drop all song references from a group")
    clear_group.add_argument("path")

    subparsers.add_parser("check", help="Report problems in the metadata file")
    return parser


def split_path(raw: str, separator: str) -> GroupPath:
    if raw == "":
        return ()
    return tuple(raw.split(separator))


def _configure_logging(level_name: str) -> None:
    log_level = getattr(logging, level_name.upper(), logging.WARNING)
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.setLevel(log_level)
    handler = logging.StreamHandler()
    handler.setFormatter(ColorFormatter(LOG_FORMAT))
    root_logger.addHandler(handler)


def _set_song(metadata: MetadataFile, args: argparse.Namespace) -> None:
    entry = metadata.get_song(args.unique_id) or SongEntry(unique_id=args.unique_id)
    for field in (
        "title",
        "subtitle",
        "composer",
        "arranger",
        "copyright",
        "license",
        "rating",
        "difficulty",
    ):
        value = getattr(args, field)
        if value is not None:
            setattr(entry, field, value)
    if args.clear_tags:
        entry.clear_tags()
    for tag in args.tags:
        entry.add_tag(tag)
    metadata.add_song(entry)


def _apply(metadata: MetadataFile, args: argparse.Namespace, settings: Settings) -> None:
    sep = settings.paths.separator
    match args.command:
        case "set-song":
            _set_song(metadata, args)
        case "remove-song":
            metadata.remove_song(args.unique_id)
        case "add-group":
            name = metadata.add_group(split_path(args.path, sep))
            print(name)
        case "rename-group":
            name = metadata.rename_group(split_path(args.path, sep), args.new_name)
            print(name)
        case "remove-group":
            metadata.remove_group(split_path(args.path, sep))
        case "swap-groups":
            metadata.swap_groups(split_path(args.parent, sep), args.name_a, args.name_b)
        case "add-to-group":
            path = split_path(args.path, sep)
            for unique_id in args.unique_ids:
                metadata.add_song_to_group(path, unique_id)
        case "remove-from-group":
            metadata.remove_song_from_group(split_path(args.path, sep), args.unique_id)
        case "clear-group":
            metadata.remove_all_songs_from_group(split_path(args.path, sep))
        case _:
            raise ValueError(f"Unknown command {args.command!r}")


def run(args: argparse.Namespace, settings: Settings) -> int:
    path: Path = args.file
    if args.command == "init":
        if path.exists() and not args.force:
            print(f"error: {path} already exists (use --force to overwrite)", file=sys.stderr)
            return 2
        write_metadata(path, MetadataFile(), settings.output)
        logger.info("Wrote empty metadata file %s", path)
        return 0

    metadata = read_metadata(path)
    logger.info("Loaded %s", path)
    if args.command in {"songs", "groups"}:
        cmd_listing.run(metadata, what=args.command, json_output=args.json)
        return 0
    if args.command == "check":
        report = cmd_check.run(metadata, settings.check)
        for line in report.checks:
            print(line)
        return 0 if report.ok else 1

    _apply(metadata, args, settings)
    write_metadata(path, metadata, settings.output)
    logger.info("Saved %s", path)
    return 0


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    try:
        settings = load_settings(args.config)
        code = run(args, settings)
    except (yaml.YAMLError, ValidationError) as exc:
        print(f"error: invalid configuration: {exc}", file=sys.stderr)
        raise SystemExit(2)
    except (MetadataError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        raise SystemExit(2)
    if code:
        raise SystemExit(code)


if __name__ == "__main__":
    main()
