from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass
from typing import Iterable, Optional

from ..config import CheckSettings
from ..meta_keys import FORMAT_VERSION
from ..metadata_file import MetadataFile
from ..models import GroupEntry
from .output import ERROR, WARNING, error, ok as ok_line, preview, warning

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class CheckReport:
    ok: bool
    checks: list[str]


def _walk(groups: Iterable[GroupEntry], prefix: tuple[str, ...] = ()):
    for group in groups:
        path = prefix + (group.name or "",)
        yield path, group
        yield from _walk(group.groups, path)


def _duplicate_names(groups: list[GroupEntry], prefix: tuple[str, ...]) -> list[str]:
    found: list[str] = []
    counts = Counter(group.name for group in groups)
    for name, count in counts.items():
        if count > 1:
            found.append("/".join(prefix + (name or "",)))
    for group in groups:
        found.extend(_duplicate_names(group.groups, prefix + (group.name or "",)))
    return found


def run(metadata: MetadataFile, settings: Optional[CheckSettings] = None) -> CheckReport:
    settings = settings or CheckSettings()
    checks: list[str] = []
    ok = True

    version = metadata.document.version
    if version is None:
        checks.append(warning("Version", f"missing, read as {FORMAT_VERSION}"))
    else:
        checks.append(ok_line("Version", version))

    songs = list(metadata.songs)
    checks.append(ok_line("Songs", f"{len(songs)} record(s)"))
    ids = [song.unique_id for song in songs if song.unique_id]
    missing_ids = len(songs) - len(ids)
    if missing_ids and settings.warn_missing_unique_id:
        checks.append(warning("Song ids", f"{missing_ids} record(s) without UniqueId"))
    duplicates = sorted(uid for uid, count in Counter(ids).items() if count > 1)
    if duplicates:
        ok = False
        checks.append(error("Song ids", f"duplicated: {preview(duplicates)}"))

    top_level = list(metadata.groups)
    all_groups = list(_walk(top_level))
    checks.append(ok_line("Groups", f"{len(all_groups)} group(s)"))
    clashes = _duplicate_names(top_level, ())
    if clashes:
        ok = False
        checks.append(error("Group names", f"duplicate siblings: {preview(clashes)}"))

    if settings.warn_dangling_references:
        known = set(ids)
        dangling = sorted(
            {
                song_id
                for _path, group in all_groups
                for song_id in group.songs
                if song_id is not None and song_id not in known
            }
        )
        if dangling:
            checks.append(
                warning("Group references", f"{len(dangling)} unknown song id(s): {preview(dangling)}")
            )
        else:
            checks.append(ok_line("Group references", "all resolve"))

    for line in checks:
        if line.split(": ", 1)[1].startswith((WARNING, ERROR)):
            logger.warning(line)
    return CheckReport(ok=ok, checks=checks)
