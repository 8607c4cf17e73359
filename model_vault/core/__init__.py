"""
Core application engine for acquiring artifacts and keeping the catalog.

The `ModelVault` facade is what collaborators talk to. It delegates transfers to
the `DownloadManager`, which in turn streams each body through the
`ArtifactWriter`.
"""

from .download_manager import DownloadManager
from .vault import ModelVault

__all__ = ["DownloadManager", "ModelVault"]
