from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Sequence
from typing import List, Optional

from . import meta_keys as keys
from .errors import GroupNotFoundError, InvalidArgumentError
from .groups import GroupPath, GroupTree, format_path, validate_path

logger = logging.getLogger(__name__)


def _validate_song_id(song_id: Optional[str]) -> str:
    if song_id is None or not song_id.strip():
        raise InvalidArgumentError("Bad song UniqueId")
    return song_id


class GroupMembership:
    """Song references directly under a group. Nested groups are never touched."""

    def __init__(self, tree: GroupTree) -> None:
        self.tree = tree

    def add_song(self, path: Sequence[str], song_id: str) -> None:
        path = validate_path(path)
        song_id = _validate_song_id(song_id)
        group = self._require(path)
        if any(ref.get(keys.UNIQUE_ID) == song_id for ref in group.findall(keys.SONG)):
            return
        ET.SubElement(group, keys.SONG, {keys.UNIQUE_ID: song_id})
        logger.debug("Added song %s to group %s", song_id, format_path(path))

    def remove_song(self, path: Sequence[str], song_id: str) -> None:
        path = validate_path(path)
        song_id = _validate_song_id(song_id)
        group = self._require(path)
        matches = [ref for ref in group.findall(keys.SONG) if ref.get(keys.UNIQUE_ID) == song_id]
        for ref in matches:
            group.remove(ref)
        if matches:
            logger.debug(
                "Removed %d reference(s) to %s from group %s",
                len(matches),
                song_id,
                format_path(path),
            )

    def remove_all_songs(self, path: Sequence[str]) -> None:
        path = validate_path(path)
        group = self._require(path)
        for ref in group.findall(keys.SONG):
            group.remove(ref)

    def groups_containing(self, song_id: str) -> List[GroupPath]:
        found: List[GroupPath] = []
        container = self.tree.document.groups_container()
        if container is None:
            return found

        def walk(element: ET.Element, path: GroupPath) -> None:
            for group in element.findall(keys.GROUP):
                group_path = path + (group.get(keys.NAME) or "",)
                if any(ref.get(keys.UNIQUE_ID) == song_id for ref in group.findall(keys.SONG)):
                    found.append(group_path)
                walk(group, group_path)

        walk(container, ())
        return found

    def _require(self, path: GroupPath) -> ET.Element:
        group = self.tree.resolve(path)
        if group is None:
            raise GroupNotFoundError(f"Couldn't find group {format_path(path)}")
        return group
