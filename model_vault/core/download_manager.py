"""
The orchestrator for acquiring a single artifact: validates the request, reserves
the destination name, opens the HTTP transfer and hands the body to the writer.
"""

import asyncio
import logging
from pathlib import Path

import aiohttp

from model_vault.exceptions import (
    DownloadFailedError,
    InvalidInputError,
    NameCollisionError,
)
from model_vault.models.artifact import ArtifactRecord
from model_vault.models.config import VaultConfig
from model_vault.transfer import ArtifactWriter, ProgressCallback, create_session
from model_vault.utils.path import create_dir, is_artifact_url, normalize_artifact_name

log = logging.getLogger(__name__)


class DownloadManager:
    """
    Orchestrates the download of artifacts into the artifact root.

    Owns the HTTP session; close it with `close()` or use the manager as an async
    context manager. Only one transfer may target a given file name at a time.
    """

    def __init__(
        self,
        config: VaultConfig,
        root: Path,
        session: aiohttp.ClientSession | None = None,
    ):
        self.config = config
        self.root = root
        self.writer = ArtifactWriter(root, config.extension)
        self._session = session
        self._owns_session = session is None
        self._reserved_names: set[str] = set()

    async def __aenter__(self) -> "DownloadManager":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def close(self) -> None:
        """Closes the HTTP session if this manager created it."""
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()
            log.debug("Download session closed.")
        self._session = None

    def _get_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = create_session(
                self.config.connect_timeout, self.config.read_timeout
            )
            self._owns_session = True
        return self._session

    @property
    def active_downloads(self) -> frozenset[str]:
        return frozenset(self._reserved_names)

    def validate_url(self, url: str) -> str:
        """
        Checks that the URL is non-empty and points at an artifact file.

        Raises:
            InvalidInputError: If the URL is empty or not an artifact URL.
        """
        url = (url or "").strip()
        if not url:
            raise InvalidInputError("Please provide a download URL.")
        if not is_artifact_url(url, self.config.extension):
            raise InvalidInputError(
                f"URL must be an http(s) link to a '{self.config.extension}' file: "
                f"{url}"
            )
        return url

    async def _reserve(self, file_name: str) -> None:
        key = file_name.lower()
        if key in self._reserved_names:
            raise NameCollisionError(
                f"A download for '{file_name}' is already in progress."
            )
        # Reserved before the first await so a concurrent call sees it
        self._reserved_names.add(key)
        try:
            await asyncio.to_thread(create_dir, self.root)
            occupant = await asyncio.to_thread(self.writer.find_occupant, file_name)
        except OSError as e:
            self._reserved_names.discard(key)
            raise DownloadFailedError(
                f"Cannot prepare artifact root '{self.root}': {e}", cause=e
            ) from e
        except BaseException:
            self._reserved_names.discard(key)
            raise
        if occupant is not None:
            self._reserved_names.discard(key)
            raise NameCollisionError(
                f"An artifact named '{occupant.name}' already exists."
            )

    def _release(self, file_name: str) -> None:
        self._reserved_names.discard(file_name.lower())

    async def download(
        self,
        url: str,
        requested_name: str | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ArtifactRecord:
        """
        Downloads an artifact into the artifact root.

        Args:
            url: An http(s) URL whose path ends with the artifact extension.
            requested_name: Name for the artifact. Derived from the URL if empty.
            on_progress: Receives the completed fraction as bytes arrive.

        Returns:
            The record for the newly stored artifact.

        Raises:
            InvalidInputError: If the URL is malformed.
            NameCollisionError: If the name is taken or already being downloaded.
            DownloadFailedError: If the transfer or the local write fails.
        """
        url = self.validate_url(url)
        file_name = normalize_artifact_name(requested_name, url, self.config.extension)

        await self._reserve(file_name)
        try:
            log.info(f"Downloading '{file_name}' from [dim]{url}[/dim]")
            session = self._get_session()
            try:
                async with session.get(url, allow_redirects=True) as response:
                    response.raise_for_status()
                    record = await self.writer.write(
                        response.content.iter_chunked(self.config.chunk_size),
                        file_name,
                        total_size=response.content_length,
                        on_progress=on_progress,
                    )
            except (aiohttp.ClientError, asyncio.TimeoutError) as e:
                raise DownloadFailedError(
                    f"Download of '{file_name}' failed: {e}", cause=e
                ) from e
        finally:
            self._release(file_name)

        log.info(
            f"[green]✓ Stored '{record.name}' ({record.size_bytes} bytes).[/green]"
        )
        return record
