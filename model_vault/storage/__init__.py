"""
Storage Layer.

This package handles everything that touches the artifact root and the
configuration file: locating directories, scanning and deleting artifacts, and
the in-memory catalog built from them.
"""

from .catalog import CatalogStore
from .config_manager import ConfigManager
from .location import get_config_dir, get_data_dir, resolve_artifact_root
from .removal import delete_artifact_file
from .scanner import purge_partial_downloads, scan_artifacts

__all__ = [
    "CatalogStore",
    "ConfigManager",
    "delete_artifact_file",
    "get_config_dir",
    "get_data_dir",
    "purge_partial_downloads",
    "resolve_artifact_root",
    "scan_artifacts",
]
