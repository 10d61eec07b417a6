from __future__ import annotations


class MetadataError(Exception):
    """Base class for everything the metadata model raises."""


class FormatError(MetadataError):
    """Raised when a channel does not contain a Synthesia metadata document."""


class UnsupportedVersionError(MetadataError):
    """Raised when the document declares a format version this package cannot read."""

    def __init__(self, version: str) -> None:
        super().__init__(
            f"Unknown Synthesia metadata version {version!r}. "
            "A newer version of this tool may be available."
        )
        self.version = version


class InvalidPathError(MetadataError, ValueError):
    """Raised for an empty group path or a blank path segment."""


class MissingParentError(MetadataError, LookupError):
    """Raised when a new group's parent path does not exist."""


class GroupNotFoundError(MetadataError, LookupError):
    """Raised when an operation needs a group that the path does not reach."""


class InvalidArgumentError(MetadataError, ValueError):
    """Raised for a blank song id or group name, or a missing parent group."""
