"""
Resolves the platform-appropriate directories used by the application.
"""

import functools
import os
import sys
from collections.abc import Mapping
from pathlib import Path

APP_DIR_NAME = "model-vault"
ARTIFACT_DIR_NAME = "gguf-models"


def get_data_dir(
    platform: str = sys.platform, environ: Mapping[str, str] = os.environ
) -> Path:
    """Returns the per-user application data directory for a platform."""
    if platform.startswith("win"):
        base_dir = Path(environ.get("LOCALAPPDATA", "~\\AppData\\Local"))
    elif platform == "darwin":
        base_dir = Path("~/Library/Application Support")
    else:
        base_dir = Path(environ.get("XDG_DATA_HOME") or "~/.local/share")
    return base_dir.expanduser() / APP_DIR_NAME


def get_config_dir(
    platform: str = sys.platform, environ: Mapping[str, str] = os.environ
) -> Path:
    """Returns the per-user configuration directory for a platform."""
    if platform.startswith("win"):
        base_dir = Path(environ.get("APPDATA", "~\\AppData\\Roaming"))
    else:
        base_dir = Path(environ.get("XDG_CONFIG_HOME") or "~/.config")
    return base_dir.expanduser() / APP_DIR_NAME


@functools.lru_cache(maxsize=1)
def resolve_artifact_root() -> Path:
    """
    Returns the single directory under which all artifacts live.

    The result is computed once and reused for the lifetime of the process.
    """
    return get_data_dir() / ARTIFACT_DIR_NAME
