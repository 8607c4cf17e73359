"""
In-memory view of the artifacts known to be present on disk.
"""

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from model_vault.models.artifact import ArtifactRecord

log = logging.getLogger(__name__)


class CatalogStore:
    """
    Holds the ordered list of ArtifactRecords for the lifetime of a process.

    The store is not persisted; it is rebuilt from a directory scan on startup and
    then kept in step with downloads and deletions.
    """

    def __init__(self, records: Iterable[ArtifactRecord] | None = None):
        self._records: list[ArtifactRecord] = list(records or [])

    @property
    def records(self) -> list[ArtifactRecord]:
        """A copy of the current records, in catalog order."""
        return list(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ArtifactRecord]:
        return iter(self.records)

    def __contains__(self, record_id: object) -> bool:
        return any(r.id == record_id for r in self._records)

    def replace_all(self, records: Iterable[ArtifactRecord]) -> None:
        self._records = list(records)
        log.debug(f"Catalog populated with {len(self._records)} record(s).")

    def append(self, record: ArtifactRecord) -> None:
        """Adds a record, replacing any existing record for the same path."""
        self._records = [r for r in self._records if r.path != record.path]
        self._records.append(record)

    def remove(self, record_id: str) -> bool:
        """Removes the record with the given id. Returns False if it was absent."""
        before = len(self._records)
        self._records = [r for r in self._records if r.id != record_id]
        return len(self._records) != before

    def get(self, record_id: str) -> ArtifactRecord | None:
        return next((r for r in self._records if r.id == record_id), None)

    def find(self, key: str) -> ArtifactRecord | None:
        """Looks a record up by id, name, file name or path."""
        if record := self.get(key):
            return record
        for record in self._records:
            if key in (record.name, record.file_name):
                return record
        key_path = Path(key).absolute()
        return next((r for r in self._records if Path(r.path) == key_path), None)
