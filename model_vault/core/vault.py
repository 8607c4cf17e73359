"""
The catalog manager exposed to the rest of the application.

`ModelVault` wires the location resolver, scanner, catalog store and download
orchestrator together so that the in-memory catalog and the artifact root stay in
step after every operation.
"""

import asyncio
import logging
from pathlib import Path

import aiohttp

from model_vault.exceptions import InvalidInputError
from model_vault.models.artifact import ArtifactRecord
from model_vault.models.config import VaultConfig
from model_vault.storage.catalog import CatalogStore
from model_vault.storage.location import resolve_artifact_root
from model_vault.storage.removal import delete_artifact_file
from model_vault.storage.scanner import purge_partial_downloads, scan_artifacts
from model_vault.transfer import ProgressCallback

from .download_manager import DownloadManager

log = logging.getLogger(__name__)


class ModelVault:
    """High-level facade for listing, downloading and deleting artifacts."""

    def __init__(
        self,
        config: VaultConfig | None = None,
        store: CatalogStore | None = None,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config or VaultConfig()
        if self.config.artifact_root:
            self.root = Path(self.config.artifact_root).expanduser().absolute()
        else:
            self.root = resolve_artifact_root()
        self.store = store if store is not None else CatalogStore()
        self.downloads = DownloadManager(self.config, self.root, session=session)

    async def __aenter__(self) -> "ModelVault":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        await self.downloads.close()

    async def load(self) -> list[ArtifactRecord]:
        """Rebuilds the catalog from the artifact root. Never raises on scan errors."""
        if not self.downloads.active_downloads:
            await asyncio.to_thread(purge_partial_downloads, self.root)
        records = await asyncio.to_thread(
            scan_artifacts, self.root, self.config.extension
        )
        self.store.replace_all(records)
        log.debug(f"Catalog holds {len(self.store)} artifact(s) in '{self.root}'.")
        return self.store.records

    def list_artifacts(self) -> list[ArtifactRecord]:
        return self.store.records

    async def download(
        self,
        url: str,
        name: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ArtifactRecord:
        """Downloads an artifact and adds it to the catalog."""
        record = await self.downloads.download(url, name, on_progress)
        self.store.append(record)
        return record

    async def delete(self, key: str) -> bool:
        """
        Deletes an artifact by id, name, file name or path and drops it from the
        catalog.

        Returns:
            True if a file was removed, False if it was already gone from disk.

        Raises:
            InvalidInputError: If no catalog record matches `key`.
            DeleteFailedError: If the file exists but could not be removed.
        """
        record = self.store.find(key)
        if record is None:
            raise InvalidInputError(f"No artifact matching '{key}' in the catalog.")

        deleted = await asyncio.to_thread(delete_artifact_file, record.path)
        self.store.remove(record.id)
        return deleted
