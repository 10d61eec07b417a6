from __future__ import annotations

import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Optional

from .config import OutputSettings
from .metadata_file import MetadataFile

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".bak"


def read_metadata(path: Path) -> MetadataFile:
    with path.open("rb") as fh:
        return MetadataFile.load(fh)


def write_metadata(
    path: Path, metadata: MetadataFile, settings: Optional[OutputSettings] = None
) -> None:
    """Save next to ``path`` and move the result into place.

    The target is only replaced once the whole document has been written, so a
    failing save leaves the previous file intact.
    """
    settings = settings or OutputSettings()
    path.parent.mkdir(parents=True, exist_ok=True)
    if settings.backup and path.exists():
        backup = path.with_name(path.name + BACKUP_SUFFIX)
        shutil.copy2(path, backup)
        logger.debug("Backed up %s to %s", path, backup)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            metadata.save(fh, **settings.save_options())
        os.replace(tmp_path, path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
