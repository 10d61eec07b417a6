from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, List, Optional

INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1

_INT_RE = re.compile(r"[+-]?[0-9]+")


@dataclass(slots=True)
class SongEntry:
    unique_id: Optional[str] = None
    title: Optional[str] = None
    subtitle: Optional[str] = None
    composer: Optional[str] = None
    arranger: Optional[str] = None
    copyright: Optional[str] = None
    license: Optional[str] = None
    rating: Optional[int] = None
    difficulty: Optional[int] = None
    # Opaque blobs owned by the Synthesia client; passed through untouched.
    finger_hints: Optional[str] = None
    hand_parts: Optional[str] = None
    tags: List[str] = field(default_factory=list)

    def add_tag(self, tag: str) -> None:
        self.tags.append(tag)

    def clear_tags(self) -> None:
        self.tags.clear()

    def to_record(self) -> Dict[str, object]:
        return {
            "unique_id": self.unique_id,
            "title": self.title,
            "subtitle": self.subtitle,
            "composer": self.composer,
            "arranger": self.arranger,
            "copyright": self.copyright,
            "license": self.license,
            "rating": self.rating,
            "difficulty": self.difficulty,
            "finger_hints": self.finger_hints,
            "hand_parts": self.hand_parts,
            "tags": list(self.tags),
        }


@dataclass(slots=True)
class GroupEntry:
    """Materialized copy of one group and everything below it.

    ``songs`` holds the ``UniqueId`` of each direct song reference, in document
    order. A reference element without the attribute shows up as ``None``.
    """

    name: Optional[str] = None
    songs: List[Optional[str]] = field(default_factory=list)
    groups: List["GroupEntry"] = field(default_factory=list)

    def to_record(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "songs": list(self.songs),
            "groups": [group.to_record() for group in self.groups],
        }


def parse_int(value: Optional[str]) -> Optional[int]:
    """Lenient integer parse: surrounding whitespace and a sign are accepted,
    anything else (including values outside the 32-bit range) gives ``None``."""
    if value is None:
        return None
    cleaned = value.strip()
    if not _INT_RE.fullmatch(cleaned):
        return None
    number = int(cleaned)
    if number < INT32_MIN or number > INT32_MAX:
        return None
    return number
