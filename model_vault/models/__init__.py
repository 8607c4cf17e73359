"""
Data Models Layer.

This package contains the core data structures used throughout the application:
the artifact record and the validated configuration model.
"""

from .artifact import ARTIFACT_EXTENSION, ArtifactRecord
from .config import VaultConfig

__all__ = ["ARTIFACT_EXTENSION", "ArtifactRecord", "VaultConfig"]
