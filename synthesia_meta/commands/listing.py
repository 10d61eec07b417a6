from __future__ import annotations

import json
from typing import Iterable

from ..metadata_file import MetadataFile
from ..models import GroupEntry, SongEntry


def song_lines(songs: Iterable[SongEntry]) -> list[str]:
    lines: list[str] = []
    for song in songs:
        title = song.title or "<untitled>"
        parts = [f"{song.unique_id or '<no id>'}  {title}"]
        if song.composer:
            parts.append(f"by {song.composer}")
        if song.rating is not None:
            parts.append(f"rating={song.rating}")
        if song.difficulty is not None:
            parts.append(f"difficulty={song.difficulty}")
        if song.tags:
            parts.append(f"[{', '.join(song.tags)}]")
        lines.append("  ".join(parts))
    return lines


def group_lines(groups: Iterable[GroupEntry], depth: int = 0) -> list[str]:
    lines: list[str] = []
    indent = "  " * depth
    for group in groups:
        count = len(group.songs)
        lines.append(f"{indent}{group.name or '<unnamed>'} ({count} song{'s' if count != 1 else ''})")
        for song_id in group.songs:
            lines.append(f"{indent}  - {song_id}")
        lines.extend(group_lines(group.groups, depth + 1))
    return lines


def run(metadata: MetadataFile, *, what: str, json_output: bool = False) -> None:
    if what == "songs":
        if json_output:
            print(json.dumps([song.to_record() for song in metadata.songs], indent=2))
            return
        for line in song_lines(metadata.songs):
            print(line)
        return
    if what == "groups":
        if json_output:
            print(json.dumps([group.to_record() for group in metadata.groups], indent=2))
            return
        for line in group_lines(metadata.groups):
            print(line)
        return
    raise ValueError(f"Unknown listing {what!r}")
