"""
Writes a streamed artifact into the artifact root.

Bytes are written to a hidden temporary file next to the destination and promoted
to the final name with a single rename once the transfer is complete. A file under
the final name is therefore either absent or complete.
"""

import asyncio
import logging
import os
from collections.abc import AsyncIterable, Callable
from pathlib import Path

import aiofiles
import aiohttp

from model_vault.exceptions import DownloadFailedError, NameCollisionError
from model_vault.models.artifact import ARTIFACT_EXTENSION, ArtifactRecord
from model_vault.storage.scanner import PARTIAL_SUFFIX

log = logging.getLogger(__name__)

ProgressCallback = Callable[[float], None]

TRANSFER_ERRORS = (aiohttp.ClientError, asyncio.TimeoutError, OSError)


class _ProgressReporter:
    """Turns byte counts into non-decreasing fractions in [0.0, 1.0]."""

    def __init__(self, total_size: int | None, callback: ProgressCallback | None):
        self.total_size = total_size if total_size and total_size > 0 else None
        self.callback = callback
        self.last_fraction = 0.0

    def _emit(self, fraction: float) -> None:
        if self.callback and fraction > self.last_fraction:
            self.last_fraction = fraction
            self.callback(fraction)

    def update(self, bytes_written: int) -> None:
        if self.total_size:
            self._emit(min(bytes_written / self.total_size, 1.0))

    def finish(self) -> None:
        self._emit(1.0)


class ArtifactWriter:
    """Streams artifact bytes to disk and promotes the finished file."""

    def __init__(self, root: Path, extension: str = ARTIFACT_EXTENSION):
        self.root = root
        self.extension = extension

    def destination_for(self, file_name: str) -> Path:
        return self.root / file_name

    def partial_path_for(self, file_name: str) -> Path:
        return self.root / f".{file_name}{PARTIAL_SUFFIX}"

    async def write(
        self,
        chunks: AsyncIterable[bytes],
        file_name: str,
        total_size: int | None = None,
        on_progress: ProgressCallback | None = None,
    ) -> ArtifactRecord:
        """
        Consumes `chunks` into `file_name` under the artifact root.

        Args:
            chunks: The response body as an async iterable of byte chunks.
            file_name: The final file name, extension included.
            total_size: Expected byte length, if the source advertised one.
            on_progress: Called with the completed fraction as bytes arrive.

        Returns:
            The record for the promoted file.

        Raises:
            NameCollisionError: If `file_name` already exists. No chunk is consumed.
            DownloadFailedError: On transport or local write errors, or when the
            source ends before `total_size` bytes arrived.
        """
        destination = self.destination_for(file_name)
        try:
            occupant = await asyncio.to_thread(self.find_occupant, file_name)
        except OSError as e:
            raise DownloadFailedError(
                f"Cannot inspect artifact root '{self.root}': {e}", cause=e
            ) from e
        if occupant is not None:
            raise NameCollisionError(
                f"An artifact named '{occupant.name}' already exists."
            )

        partial = self.partial_path_for(file_name)
        reporter = _ProgressReporter(total_size, on_progress)
        bytes_written = 0

        try:
            async with aiofiles.open(partial, "wb") as f:
                async for chunk in chunks:
                    if not chunk:
                        continue
                    await f.write(chunk)
                    bytes_written += len(chunk)
                    reporter.update(bytes_written)

            if reporter.total_size and bytes_written < reporter.total_size:
                raise DownloadFailedError(
                    f"Transfer of '{file_name}' ended after {bytes_written} of "
                    f"{reporter.total_size} bytes."
                )

            size_bytes = (await asyncio.to_thread(partial.stat)).st_size
            reporter.finish()
            await asyncio.to_thread(self._promote, partial, destination)
        except BaseException as e:
            self._discard(partial)
            if isinstance(e, TRANSFER_ERRORS):
                raise DownloadFailedError(
                    f"Download of '{file_name}' failed: {e}", cause=e
                ) from e
            raise

        log.debug(f"Promoted '{file_name}' ({size_bytes} bytes).")
        return ArtifactRecord.from_file(destination, size_bytes, self.extension)

    def find_occupant(self, file_name: str) -> Path | None:
        """
        Returns the root entry whose name equals `file_name` ignoring case, or None.

        Names differing only in case would be listed as the same artifact.
        """
        wanted = file_name.lower()
        try:
            with os.scandir(self.root) as it:
                for entry in it:
                    if entry.name.lower() == wanted:
                        return Path(entry.path)
        except FileNotFoundError:
            return None
        return None

    def _promote(self, partial: Path, destination: Path) -> None:
        # Single writer per name; the orchestrator reserves names before writing
        if (occupant := self.find_occupant(destination.name)) is not None:
            raise NameCollisionError(
                f"An artifact named '{occupant.name}' appeared during download."
            )
        os.replace(partial, destination)

    def _discard(self, partial: Path) -> None:
        try:
            partial.unlink(missing_ok=True)
        except OSError as e:
            log.warning(f"Could not remove partial download '{partial.name}': {e}")
