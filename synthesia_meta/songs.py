from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from collections.abc import Iterable, Iterator
from typing import Optional

from . import meta_keys as keys
from .document import MetadataDocument
from .models import SongEntry, parse_int

logger = logging.getLogger(__name__)

_STRING_FIELDS = (
    ("unique_id", keys.UNIQUE_ID),
    ("title", keys.TITLE),
    ("subtitle", keys.SUBTITLE),
    ("composer", keys.COMPOSER),
    ("arranger", keys.ARRANGER),
    ("copyright", keys.COPYRIGHT),
    ("license", keys.LICENSE),
    ("finger_hints", keys.FINGER_HINTS),
    ("hand_parts", keys.HAND_PARTS),
)

_INT_FIELDS = (
    ("rating", keys.RATING),
    ("difficulty", keys.DIFFICULTY),
)


def decode_song(element: ET.Element) -> SongEntry:
    entry = SongEntry()
    for attr, key in _STRING_FIELDS:
        setattr(entry, attr, element.get(key))
    for attr, key in _INT_FIELDS:
        raw = element.get(key)
        value = parse_int(raw)
        if raw is not None and value is None:
            logger.debug(
                "Ignoring unparseable %s=%r on song %s", key, raw, entry.unique_id
            )
        setattr(entry, attr, value)
    tags = element.get(keys.TAGS)
    if tags is not None:
        entry.clear_tags()
        for tag in tags.split(keys.TAG_SEPARATOR):
            if tag:
                entry.add_tag(tag)
    return entry


def encode_song(element: ET.Element, entry: SongEntry) -> None:
    """Write the fields owned by ``SongEntry`` onto ``element``.

    ``None`` removes the attribute. Attributes and children that are not part
    of ``SongEntry`` are left alone.
    """
    for attr, key in _STRING_FIELDS:
        _set_or_remove(element, key, getattr(entry, attr))
    for attr, key in _INT_FIELDS:
        value = getattr(entry, attr)
        _set_or_remove(element, key, None if value is None else str(value))
    # No escaping: a tag containing ';' splits into several tags on reload.
    element.set(keys.TAGS, keys.TAG_SEPARATOR.join(entry.tags))


def _set_or_remove(element: ET.Element, key: str, value: Optional[str]) -> None:
    if value is None:
        element.attrib.pop(key, None)
    else:
        element.set(key, value)


class SongRegistry:
    """Flat song records under the ``<Songs>`` container, keyed by ``UniqueId``.

    Iterating the registry walks the current document every time, so it can be
    enumerated repeatedly and always reflects the latest edits.
    """

    def __init__(self, document: MetadataDocument) -> None:
        self.document = document

    def __iter__(self) -> Iterator[SongEntry]:
        for element in self._elements():
            yield decode_song(element)

    def __len__(self) -> int:
        return sum(1 for _ in self._elements())

    def __contains__(self, unique_id: object) -> bool:
        if not isinstance(unique_id, str):
            return False
        return self._find(unique_id) is not None

    def get(self, unique_id: Optional[str]) -> Optional[SongEntry]:
        if unique_id is None:
            return None
        element = self._find(unique_id)
        if element is None:
            return None
        return decode_song(element)

    def add(self, entry: SongEntry) -> None:
        songs = self.document.songs_container(create=True)
        self._upsert(songs, entry)

    def replace_all(self, entries: Iterable[SongEntry]) -> None:
        # Additive: records missing from ``entries`` are kept.
        songs = self.document.songs_container(create=True)
        for entry in entries:
            self._upsert(songs, entry)

    def remove(self, unique_id: Optional[str]) -> None:
        if unique_id is None:
            return
        songs = self.document.songs_container()
        if songs is None:
            return
        for element in songs.findall(keys.SONG):
            if element.get(keys.UNIQUE_ID) != unique_id:
                continue
            songs.remove(element)
            logger.debug("Removed song %s", unique_id)
            break

    def _upsert(self, songs: ET.Element, entry: SongEntry) -> None:
        element = self._match(songs, entry.unique_id)
        if element is None:
            element = ET.SubElement(songs, keys.SONG)
            logger.debug("Added song %s", entry.unique_id)
        else:
            logger.debug("Updated song %s", entry.unique_id)
        encode_song(element, entry)

    def _elements(self) -> Iterator[ET.Element]:
        songs = self.document.songs_container()
        if songs is None:
            return
        yield from songs.findall(keys.SONG)

    def _find(self, unique_id: str) -> Optional[ET.Element]:
        songs = self.document.songs_container()
        if songs is None:
            return None
        return self._match(songs, unique_id)

    @staticmethod
    def _match(songs: ET.Element, unique_id: Optional[str]) -> Optional[ET.Element]:
        for element in songs.findall(keys.SONG):
            if element.get(keys.UNIQUE_ID) == unique_id:
                return element
        return None
