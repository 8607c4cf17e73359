import asyncio

import pytest

from model_vault.core.download_manager import DownloadManager
from model_vault.exceptions import (
    DownloadFailedError,
    InvalidInputError,
    NameCollisionError,
)

from .conftest import MODEL_BODY


@pytest.mark.asyncio
async def test_successful_download(config, artifact_root, model_server):
    seen = []
    async with DownloadManager(config, artifact_root) as manager:
        record = await manager.download(
            model_server.url("/models/tiny.gguf"), "tiny", seen.append
        )

    destination = artifact_root / "tiny.gguf"
    assert record.name == "tiny"
    assert record.path == str(destination.absolute())
    assert destination.stat().st_size == record.size_bytes == len(MODEL_BODY)
    assert destination.read_bytes() == MODEL_BODY
    assert seen == sorted(seen)
    assert seen[-1] == 1.0
    assert sorted(p.name for p in artifact_root.iterdir()) == ["tiny.gguf"]


@pytest.mark.asyncio
@pytest.mark.parametrize("requested", ["tiny", "tiny.gguf", "tiny.GGUF"])
async def test_extension_is_added_exactly_once(config, artifact_root, model_server, requested):
    async with DownloadManager(config, artifact_root) as manager:
        record = await manager.download(model_server.url("/models/x.gguf"), requested)

    assert record.file_name == "tiny.gguf"


@pytest.mark.asyncio
async def test_name_is_derived_from_url(config, artifact_root, model_server):
    async with DownloadManager(config, artifact_root) as manager:
        record = await manager.download(
            model_server.url("/models/Qwen3-0.6B-Q4_K_M.gguf?download=true"), ""
        )

    assert record.name == "Qwen3-0.6B-Q4_K_M"


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "url",
    ["", "   ", "ftp://example.com/model.gguf", "not a url", "/models/model.bin"],
)
async def test_invalid_urls_are_rejected_before_io(config, artifact_root, model_server, url):
    if url.startswith("/"):
        url = model_server.url(url)
    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(InvalidInputError):
            await manager.download(url, "model")

    assert model_server.requests == []


@pytest.mark.asyncio
async def test_collision_performs_no_network_io(config, artifact_root, model_server):
    artifact_root.mkdir()
    (artifact_root / "tiny.gguf").write_bytes(b"existing")

    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(NameCollisionError):
            await manager.download(model_server.url("/models/tiny.gguf"), "tiny")

    assert model_server.requests == []
    assert (artifact_root / "tiny.gguf").read_bytes() == b"existing"


@pytest.mark.asyncio
async def test_http_error_status_fails_without_file(config, artifact_root, model_server):
    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(DownloadFailedError) as exc_info:
            await manager.download(model_server.url("/missing/tiny.gguf"), "tiny")

    assert exc_info.value.cause is not None
    assert list(artifact_root.iterdir()) == []


@pytest.mark.asyncio
async def test_truncated_transfer_fails_without_file(config, artifact_root, model_server):
    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(DownloadFailedError):
            await manager.download(model_server.url("/truncated/tiny.gguf"), "tiny")

    assert list(artifact_root.iterdir()) == []


@pytest.mark.asyncio
async def test_unreachable_host_fails(config, artifact_root):
    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(DownloadFailedError):
            await manager.download("http://127.0.0.1:1/model.gguf", "model")

    assert not (artifact_root / "model.gguf").exists()


@pytest.mark.asyncio
async def test_concurrent_downloads_of_same_name_collide(config, artifact_root, model_server):
    url = model_server.url("/models/tiny.gguf")
    async with DownloadManager(config, artifact_root) as manager:
        results = await asyncio.gather(
            manager.download(url, "tiny"),
            manager.download(url, "tiny"),
            return_exceptions=True,
        )
        assert manager.active_downloads == frozenset()

    collisions = [r for r in results if isinstance(r, NameCollisionError)]
    assert len(collisions) == 1
    assert model_server.requests == ["/models/tiny.gguf"]
    assert (artifact_root / "tiny.gguf").stat().st_size == len(MODEL_BODY)


@pytest.mark.asyncio
async def test_name_is_released_after_failure(config, artifact_root, model_server):
    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(DownloadFailedError):
            await manager.download(model_server.url("/missing/tiny.gguf"), "tiny")
        record = await manager.download(model_server.url("/models/tiny.gguf"), "tiny")

    assert record.size_bytes == len(MODEL_BODY)


@pytest.mark.asyncio
async def test_collision_with_differently_cased_file(config, artifact_root, model_server):
    artifact_root.mkdir()
    (artifact_root / "Tiny.GGUF").write_bytes(b"existing")

    async with DownloadManager(config, artifact_root) as manager:
        with pytest.raises(NameCollisionError):
            await manager.download(model_server.url("/models/tiny.gguf"), "tiny")
        assert manager.active_downloads == frozenset()

    assert model_server.requests == []
    assert [p.name for p in artifact_root.iterdir()] == ["Tiny.GGUF"]


@pytest.mark.asyncio
async def test_unusable_root_fails_and_releases_name(config, tmp_path, model_server):
    blocker = tmp_path / "blocker"
    blocker.write_bytes(b"not a directory")

    async with DownloadManager(config, blocker / "root") as manager:
        with pytest.raises(DownloadFailedError) as exc_info:
            await manager.download(model_server.url("/models/tiny.gguf"), "tiny")
        assert manager.active_downloads == frozenset()

    assert isinstance(exc_info.value.cause, OSError)
    assert model_server.requests == []
