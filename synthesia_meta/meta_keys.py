from __future__ import annotations

# Element and attribute names of the Synthesia metadata format.
# Keep these centralized to reduce magic strings and accidental divergence.

FORMAT_VERSION = "1"

ROOT = "SynthesiaMetadata"
SONGS = "Songs"
SONG = "Song"
GROUPS = "Groups"
GROUP = "Group"

VERSION = "Version"
UNIQUE_ID = "UniqueId"
NAME = "Name"

TITLE = "Title"
SUBTITLE = "Subtitle"
COMPOSER = "Composer"
ARRANGER = "Arranger"
COPYRIGHT = "Copyright"
LICENSE = "License"
RATING = "Rating"
DIFFICULTY = "Difficulty"
FINGER_HINTS = "FingerHints"
HAND_PARTS = "HandParts"
TAGS = "Tags"

TAG_SEPARATOR = ";"
