from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import BinaryIO, List, Optional

from .document import MetadataDocument
from .groups import GroupPath, GroupTree
from .membership import GroupMembership
from .models import GroupEntry, SongEntry
from .songs import SongRegistry


class MetadataFile:
    """Non-destructive Synthesia metadata reader/writer.

    Only songs and groups are exposed for editing; any other content of a
    loaded file is carried through to ``save`` unchanged.

    Usage::

        with open("metadata.xml", "rb") as fh:
            meta = MetadataFile.load(fh)
        meta.add_group(["Practice"])
        meta.add_song_to_group(["Practice"], "song-id")
        with open("metadata.xml", "wb") as fh:
            meta.save(fh)
    """

    def __init__(self, document: Optional[MetadataDocument] = None) -> None:
        self.document = document or MetadataDocument()
        self._songs = SongRegistry(self.document)
        self._groups = GroupTree(self.document)
        self._membership = GroupMembership(self._groups)

    @classmethod
    def load(cls, channel: BinaryIO) -> "MetadataFile":
        return cls(MetadataDocument.load(channel))

    def save(self, channel: BinaryIO, **options) -> None:
        self.document.save(channel, **options)

    def to_bytes(self, **options) -> bytes:
        return self.document.to_bytes(**options)

    @property
    def songs(self) -> SongRegistry:
        return self._songs

    @songs.setter
    def songs(self, entries: Iterable[SongEntry]) -> None:
        self._songs.replace_all(entries)

    def add_song(self, entry: SongEntry) -> None:
        self._songs.add(entry)

    def remove_song(self, unique_id: Optional[str]) -> None:
        self._songs.remove(unique_id)

    def get_song(self, unique_id: Optional[str]) -> Optional[SongEntry]:
        return self._songs.get(unique_id)

    @property
    def groups(self) -> GroupTree:
        return self._groups

    def find_group(self, path: Sequence[str]) -> Optional[GroupEntry]:
        return self._groups.find(path)

    def add_group(self, path: Sequence[str]) -> str:
        return self._groups.add(path)

    def rename_group(self, path: Sequence[str], new_name: str) -> str:
        return self._groups.rename(path, new_name)

    def remove_group(self, path: Sequence[str]) -> None:
        self._groups.remove(path)

    def swap_groups(self, parent_path: Sequence[str], name_a: str, name_b: str) -> None:
        self._groups.swap(parent_path, name_a, name_b)

    def add_song_to_group(self, path: Sequence[str], song_id: str) -> None:
        self._membership.add_song(path, song_id)

    def remove_song_from_group(self, path: Sequence[str], song_id: str) -> None:
        self._membership.remove_song(path, song_id)

    def remove_all_songs_from_group(self, path: Sequence[str]) -> None:
        self._membership.remove_all_songs(path)

    def groups_containing(self, song_id: str) -> List[GroupPath]:
        return self._membership.groups_containing(song_id)
