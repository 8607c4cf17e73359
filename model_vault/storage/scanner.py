"""
Builds catalog records from the contents of the artifact root.

The directory listing is the only persisted state: there is no index file and no
metadata sidecar, so every scan re-derives the catalog from file metadata.
"""

import logging
import os
from pathlib import Path

from model_vault.exceptions import ScanFailedError
from model_vault.models.artifact import ARTIFACT_EXTENSION, ArtifactRecord
from model_vault.utils.path import create_dir, has_extension

log = logging.getLogger(__name__)

PARTIAL_SUFFIX = ".part"


def _read_entries(root: Path) -> list[os.DirEntry]:
    try:
        create_dir(root)
        with os.scandir(root) as it:
            return list(it)
    except OSError as e:
        raise ScanFailedError(f"Cannot read artifact root '{root}': {e}") from e


def scan_artifacts(
    root: Path, extension: str = ARTIFACT_EXTENSION, strict: bool = False
) -> list[ArtifactRecord]:
    """
    Lists the artifact root and returns one record per recognized artifact file.

    The root is created if it does not exist. Subdirectories, files with other
    extensions and in-progress downloads are skipped.

    Args:
        root: The artifact root directory.
        extension: The recognized artifact extension.
        strict: Re-raise enumeration failures instead of returning an empty list.

    Returns:
        Records sorted by name. Empty if the directory could not be read.
    """
    try:
        entries = _read_entries(root)
    except ScanFailedError as e:
        if strict:
            raise
        log.warning(f"{e}. Starting with an empty catalog.")
        return []

    records = []
    for entry in entries:
        if not has_extension(entry.name, extension):
            continue
        try:
            if not entry.is_file(follow_symlinks=True):
                continue
            size = entry.stat(follow_symlinks=True).st_size
        except OSError as e:
            log.debug(f"Skipping '{entry.name}' while scanning: {e}")
            continue
        records.append(ArtifactRecord.from_file(Path(entry.path), size, extension))

    records.sort(key=lambda r: r.name.lower())
    log.debug(f"Scanned '{root}': {len(records)} artifact(s) found.")
    return records


def purge_partial_downloads(root: Path) -> int:
    """
    Removes temporary files left behind by an interrupted download.

    Returns:
        The number of files removed.
    """
    removed = 0
    try:
        candidates = list(root.glob(f".*{PARTIAL_SUFFIX}"))
    except OSError as e:
        log.warning(f"Could not look for partial downloads in '{root}': {e}")
        return 0

    for partial in candidates:
        try:
            if partial.is_file():
                partial.unlink()
                removed += 1
        except OSError as e:
            log.warning(f"Failed to remove partial download '{partial.name}': {e}")
    if removed:
        log.info(f"Removed {removed} leftover partial download(s).")
    return removed
