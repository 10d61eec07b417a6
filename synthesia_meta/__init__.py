"Non-destructive reader/writer for Synthesia metadata files."

from importlib import metadata

from .errors import (
    FormatError,
    GroupNotFoundError,
    InvalidArgumentError,
    InvalidPathError,
    MetadataError,
    MissingParentError,
    UnsupportedVersionError,
)
from .metadata_file import MetadataFile
from .models import GroupEntry, SongEntry

__all__ = [
    "__version__",
    "FormatError",
    "GroupEntry",
    "GroupNotFoundError",
    "InvalidArgumentError",
    "InvalidPathError",
    "MetadataError",
    "MetadataFile",
    "MissingParentError",
    "SongEntry",
    "UnsupportedVersionError",
]


def __getattr__(name: str) -> str:
    if name == "__version__":
        try:
            return metadata.version("synthesia-meta")
        except metadata.PackageNotFoundError:  # pragma: no cover - during editable dev installs
            return "0.0.0"
    raise AttributeError(name)
