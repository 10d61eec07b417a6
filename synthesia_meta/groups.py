"""Group tree stored under ``<Groups>`` and addressed by name paths.

A path such as ``("Classical", "Bach")`` names a walk from the implicit root
through nested ``<Group Name=...>`` elements. Paths are handled as tuples so
that building ``parent + (name,)`` for two siblings never shares a list.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterator, Sequence
from typing import Optional, Tuple

from . import meta_keys as keys
from .document import MetadataDocument
from .errors import (
    GroupNotFoundError,
    InvalidArgumentError,
    InvalidPathError,
    MissingParentError,
)
from .models import GroupEntry

logger = logging.getLogger(__name__)

GroupPath = Tuple[str, ...]


def validate_path(path: Sequence[str]) -> GroupPath:
    path = tuple(path)
    if not path:
        raise InvalidPathError("Group path cannot be empty.")
    for name in path:
        if name is None or not name.strip():
            raise InvalidPathError("Group names cannot be empty.")
    return path


def format_path(path: Sequence[str]) -> str:
    return "/".join(path)


def disambiguate_name(parent: Optional[ET.Element], desired: str) -> str:
    """Return ``desired`` or the first of ``"desired 2"``, ``"desired 3"``, ...
    not already used by a ``Group`` child of ``parent``."""
    if parent is None:
        raise InvalidArgumentError("Bad parent.")
    if desired is None or not desired.strip():
        raise InvalidArgumentError("Empty name.")
    taken = {child.get(keys.NAME) for child in parent.findall(keys.GROUP)}
    attempt = 1
    final = desired
    while final in taken:
        attempt += 1
        final = f"{desired} {attempt}"
    return final


def load_group(element: ET.Element) -> GroupEntry:
    entry = GroupEntry(name=element.get(keys.NAME))
    for song in element.findall(keys.SONG):
        entry.songs.append(song.get(keys.UNIQUE_ID))
    for child in element.findall(keys.GROUP):
        entry.groups.append(load_group(child))
    return entry


def _child_group(parent: ET.Element, name: str) -> Optional[ET.Element]:
    for child in parent.findall(keys.GROUP):
        if child.get(keys.NAME) == name:
            return child
    return None


class GroupTree:
    def __init__(self, document: MetadataDocument) -> None:
        self.document = document

    def __iter__(self) -> Iterator[GroupEntry]:
        groups = self.document.groups_container()
        if groups is None:
            return
        for element in groups.findall(keys.GROUP):
            yield load_group(element)

    def resolve(self, path: Sequence[str]) -> Optional[ET.Element]:
        return self._resolve_with_parent(path)[1]

    def find(self, path: Sequence[str]) -> Optional[GroupEntry]:
        element = self.resolve(path)
        if element is None:
            return None
        return load_group(element)

    def add(self, path: Sequence[str]) -> str:
        """Create a group; everything but the last segment must already exist.

        The name is suffixed when a sibling already uses it, so the final name
        is returned.
        """
        path = validate_path(path)
        if len(path) == 1:
            parent = self.document.groups_container(create=True)
        else:
            parent = self.resolve(path[:-1])
        if parent is None:
            raise MissingParentError(
                "All but the last element must already exist when adding a group. "
                f"Path: {format_path(path)}"
            )
        name = disambiguate_name(parent, path[-1])
        ET.SubElement(parent, keys.GROUP, {keys.NAME: name})
        logger.debug("Added group %s", format_path(path[:-1] + (name,)))
        return name

    def rename(self, path: Sequence[str], new_name: str) -> str:
        path = validate_path(path)
        if path[-1] == new_name:
            return new_name
        parent, group = self._resolve_with_parent(path)
        if group is None:
            raise GroupNotFoundError(f"Couldn't find group to rename: {format_path(path)}")
        name = disambiguate_name(parent, new_name)
        group.set(keys.NAME, name)
        logger.debug("Renamed group %s to %r", format_path(path), name)
        return name

    def remove(self, path: Sequence[str]) -> None:
        path = validate_path(path)
        parent, group = self._resolve_with_parent(path)
        if group is None:
            return
        parent.remove(group)
        logger.debug("Removed group %s", format_path(path))

    def swap(self, parent_path: Sequence[str], name_a: str, name_b: str) -> None:
        base = tuple(parent_path)
        path_a = validate_path(base + (name_a,))
        path_b = validate_path(base + (name_b,))
        parent, group_a = self._resolve_with_parent(path_a)
        _, group_b = self._resolve_with_parent(path_b)
        if group_a is None or group_b is None:
            raise GroupNotFoundError(
                f"Couldn't find a group for swapping: {format_path(path_a)} / {format_path(path_b)}"
            )
        if group_a is group_b:
            return
        children = list(parent)
        index_a = children.index(group_a)
        index_b = children.index(group_b)
        # Tails stay with their slot so the surrounding whitespace does not move.
        group_a.tail, group_b.tail = group_b.tail, group_a.tail
        parent[index_a] = group_b
        parent[index_b] = group_a
        logger.debug("Swapped groups %s and %s", format_path(path_a), format_path(path_b))

    def _resolve_with_parent(
        self, path: Sequence[str]
    ) -> Tuple[Optional[ET.Element], Optional[ET.Element]]:
        if not path:
            return None, None
        parent: Optional[ET.Element] = None
        current = self.document.groups_container()
        for name in path:
            if current is None:
                return None, None
            parent, current = current, _child_group(current, name)
        if current is None:
            return None, None
        return parent, current
