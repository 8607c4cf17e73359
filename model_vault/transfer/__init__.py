"""
Transfer Layer.

This package is responsible for fetching artifacts over HTTP and writing them
into the artifact root without ever exposing a partially written file.
"""

from .session import create_session
from .writer import ArtifactWriter, ProgressCallback

__all__ = ["ArtifactWriter", "ProgressCallback", "create_session"]
