import asyncio

import aiohttp
import pytest

from model_vault.exceptions import DownloadFailedError, NameCollisionError
from model_vault.transfer.writer import ArtifactWriter


async def _chunks(*parts, fail_with=None):
    for part in parts:
        yield part
    if fail_with is not None:
        raise fail_with


@pytest.fixture
def writer(artifact_root):
    artifact_root.mkdir()
    return ArtifactWriter(artifact_root)


@pytest.mark.asyncio
async def test_two_chunk_transfer_reports_progress(writer, artifact_root):
    seen = []

    record = await writer.write(
        _chunks(b"a" * 600, b"b" * 400), "model.gguf", 1000, seen.append
    )

    assert seen == [0.6, 1.0]
    assert record.size_bytes == 1000
    assert record.name == "model"
    assert (artifact_root / "model.gguf").stat().st_size == 1000
    assert sorted(p.name for p in artifact_root.iterdir()) == ["model.gguf"]


@pytest.mark.asyncio
async def test_unknown_size_reports_completion_only(writer):
    seen = []

    record = await writer.write(_chunks(b"x" * 10, b"y" * 5), "m.gguf", None, seen.append)

    assert seen == [1.0]
    assert record.size_bytes == 15


@pytest.mark.asyncio
async def test_progress_is_non_decreasing_and_capped(writer):
    seen = []

    await writer.write(
        _chunks(b"1" * 100, b"", b"2" * 100, b"3" * 300), "m.gguf", 400, seen.append
    )

    assert seen == sorted(seen)
    assert seen[-1] == 1.0
    assert all(0.0 <= f <= 1.0 for f in seen)
    assert seen.count(1.0) == 1


@pytest.mark.asyncio
async def test_mid_stream_failure_leaves_no_file(writer, artifact_root):
    seen = []
    cause = aiohttp.ClientPayloadError("connection lost")

    with pytest.raises(DownloadFailedError) as exc_info:
        await writer.write(
            _chunks(b"a" * 600, fail_with=cause), "model.gguf", 1000, seen.append
        )

    assert exc_info.value.cause is cause
    assert seen == [0.6]
    assert list(artifact_root.iterdir()) == []


@pytest.mark.asyncio
async def test_short_body_is_a_failure(writer, artifact_root):
    seen = []

    with pytest.raises(DownloadFailedError):
        await writer.write(_chunks(b"a" * 600), "model.gguf", 1000, seen.append)

    assert 1.0 not in seen
    assert list(artifact_root.iterdir()) == []


@pytest.mark.asyncio
async def test_collision_consumes_nothing(writer, artifact_root):
    (artifact_root / "model.gguf").write_bytes(b"original")
    consumed = []

    async def source():
        consumed.append(True)
        yield b"new"

    with pytest.raises(NameCollisionError):
        await writer.write(source(), "model.gguf", 3)

    assert consumed == []
    assert (artifact_root / "model.gguf").read_bytes() == b"original"


@pytest.mark.asyncio
async def test_collision_ignores_case(writer, artifact_root):
    (artifact_root / "model.GGUF").write_bytes(b"original")

    with pytest.raises(NameCollisionError, match="model.GGUF"):
        await writer.write(_chunks(b"new"), "model.gguf", 3)

    assert [p.name for p in artifact_root.iterdir()] == ["model.GGUF"]


@pytest.mark.asyncio
async def test_failing_progress_callback_discards_partial(writer, artifact_root):
    def explode(fraction):
        raise RuntimeError("display went away")

    with pytest.raises(RuntimeError):
        await writer.write(_chunks(b"a" * 10), "model.gguf", 10, explode)

    assert list(artifact_root.iterdir()) == []


@pytest.mark.asyncio
async def test_local_write_error_becomes_download_failed(artifact_root):
    # The root is never created, so opening the partial file fails
    writer = ArtifactWriter(artifact_root / "missing")

    with pytest.raises(DownloadFailedError) as exc_info:
        await writer.write(_chunks(b"a"), "model.gguf", 1)

    assert isinstance(exc_info.value.cause, OSError)


@pytest.mark.asyncio
async def test_cancellation_removes_partial(writer, artifact_root):
    first_chunk_written = asyncio.Event()
    never = asyncio.Event()

    async def stalled():
        yield b"a" * 100
        first_chunk_written.set()
        await never.wait()
        yield b"b"

    task = asyncio.create_task(writer.write(stalled(), "model.gguf", 200))
    await first_chunk_written.wait()
    task.cancel()

    with pytest.raises(asyncio.CancelledError):
        await task

    assert list(artifact_root.iterdir()) == []
