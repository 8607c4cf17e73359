"""
Shared fixtures: an artifact root under tmp_path and a local HTTP server that
serves model files.
"""

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

from model_vault.models.config import VaultConfig

MODEL_BODY = bytes(range(256)) * 4  # 1024 bytes


@pytest.fixture
def artifact_root(tmp_path):
    return tmp_path / "gguf-models"


@pytest.fixture
def config(artifact_root):
    return VaultConfig(artifact_root=str(artifact_root), chunk_size=65536)


def make_model_app(requests: list[str]) -> web.Application:
    async def serve_model(request: web.Request) -> web.Response:
        requests.append(request.path)
        return web.Response(body=MODEL_BODY, content_type="application/octet-stream")

    async def serve_missing(request: web.Request) -> web.Response:
        requests.append(request.path)
        return web.Response(status=404, text="not found")

    async def serve_truncated(request: web.Request) -> web.StreamResponse:
        requests.append(request.path)
        response = web.StreamResponse(
            headers={
                "Content-Type": "application/octet-stream",
                "Content-Length": str(len(MODEL_BODY)),
            }
        )
        await response.prepare(request)
        await response.write(MODEL_BODY[:600])
        request.transport.close()
        return response

    app = web.Application()
    app.router.add_get("/models/{name}", serve_model)
    app.router.add_get("/missing/{name}", serve_missing)
    app.router.add_get("/truncated/{name}", serve_truncated)
    return app


class ModelServer:
    def __init__(self, server: TestServer, requests: list[str]):
        self.server = server
        self.requests = requests

    def url(self, path: str) -> str:
        return str(self.server.make_url(path))


@pytest_asyncio.fixture
async def model_server():
    requests: list[str] = []
    server = TestServer(make_model_app(requests))
    await server.start_server()
    try:
        yield ModelServer(server, requests)
    finally:
        await server.close()
