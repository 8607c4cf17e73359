"""
Removes artifact files from disk.
"""

import logging
import os
from pathlib import Path

from model_vault.exceptions import DeleteFailedError

log = logging.getLogger(__name__)


def delete_artifact_file(path: str | Path) -> bool:
    """
    Deletes an artifact file.

    Returns:
        True if the file was deleted, False if it did not exist.

    Raises:
        DeleteFailedError: If the file exists but could not be removed.
    """
    artifact_path = Path(path)
    if not artifact_path.exists():
        log.warning(f"Artifact file '{artifact_path}' does not exist.")
        return False

    try:
        os.unlink(artifact_path)
    except FileNotFoundError:
        log.debug(f"Artifact file '{artifact_path}' disappeared before deletion.")
        return False
    except OSError as e:
        raise DeleteFailedError(
            f"Could not delete artifact '{artifact_path.name}': {e}", cause=e
        ) from e

    log.info(f"Deleted artifact '{artifact_path.name}'.")
    return True
