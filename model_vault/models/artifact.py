"""
Record describing one model artifact stored in the artifact root.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any

ARTIFACT_EXTENSION = ".gguf"


def artifact_id_for(path: str | Path) -> str:
    """Derives a stable identifier from the absolute artifact path."""
    return str(uuid.uuid5(uuid.NAMESPACE_URL, Path(path).absolute().as_posix()))


@dataclass(frozen=True)
class ArtifactRecord:
    """A locally stored artifact, as materialized from disk."""

    name: str
    path: str
    size_bytes: int
    acquired_at: datetime = field(default_factory=datetime.now)
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", artifact_id_for(self.path))

    @property
    def file_name(self) -> str:
        return Path(self.path).name

    @classmethod
    def from_file(
        cls, path: Path, size_bytes: int, extension: str = ARTIFACT_EXTENSION
    ) -> "ArtifactRecord":
        """Builds a record for a file, stripping the extension from its name."""
        file_name = path.name
        name = file_name[: -len(extension)] if extension else file_name
        return cls(name=name, path=str(path.absolute()), size_bytes=size_bytes)

    def to_dict(self) -> dict[str, Any]:
        """Returns a JSON-friendly representation with an ISO-8601 timestamp."""
        return {
            "id": self.id,
            "name": self.name,
            "path": self.path,
            "size_bytes": self.size_bytes,
            "acquired_at": self.acquired_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ArtifactRecord":
        return cls(
            id=data.get("id", ""),
            name=data["name"],
            path=data["path"],
            size_bytes=int(data["size_bytes"]),
            acquired_at=datetime.fromisoformat(data["acquired_at"]),
        )
