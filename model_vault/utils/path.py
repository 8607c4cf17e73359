"""
Utilities for handling artifact file names, directories, and URL parsing.
"""

from pathlib import Path
from typing import Optional
from urllib.parse import unquote, urlparse

from pathvalidate import sanitize_filename

from model_vault.models.artifact import ARTIFACT_EXTENSION

FALLBACK_ARTIFACT_NAME = "unnamed-model"


def create_dir(directory_path: Path) -> None:
    """Creates a directory if it does not already exist."""
    directory_path.mkdir(parents=True, exist_ok=True)


def has_extension(file_name: str, extension: str = ARTIFACT_EXTENSION) -> bool:
    """Checks whether a file name carries the artifact extension (case-insensitive)."""
    return len(file_name) > len(extension) and file_name.lower().endswith(extension)


def strip_extension(file_name: str, extension: str = ARTIFACT_EXTENSION) -> str:
    if has_extension(file_name, extension):
        return file_name[: -len(extension)]
    return file_name


def filename_from_url(url: str) -> Optional[str]:
    """
    Returns the last path segment of a URL, ignoring query strings and fragments.
    """
    parsed = urlparse(url.strip())
    segment = unquote(parsed.path.rstrip("/").rsplit("/", 1)[-1])
    return segment or None


def is_artifact_url(url: str, extension: str = ARTIFACT_EXTENSION) -> bool:
    """
    Checks that a URL is an http(s) URL whose path points at an artifact file.
    """
    parsed = urlparse(url.strip())
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return False
    file_name = filename_from_url(url)
    return bool(file_name) and has_extension(file_name, extension)


def normalize_artifact_name(
    requested_name: str | None,
    url: str | None = None,
    extension: str = ARTIFACT_EXTENSION,
) -> str:
    """
    Produces the final on-disk file name for an artifact.

    Falls back to the URL's file name when no name is requested, sanitizes the
    result so it cannot escape the artifact root, and appends the extension
    exactly once.
    """
    name = (requested_name or "").strip()
    if not name and url:
        name = strip_extension(filename_from_url(url) or "", extension)

    name = sanitize_filename(name, platform="universal").strip(" .")
    stem = strip_extension(name, extension).rstrip(" .")
    if not stem:
        stem = FALLBACK_ARTIFACT_NAME
    return f"{stem}{extension}"
