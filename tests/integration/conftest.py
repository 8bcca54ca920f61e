"""Integration test fixtures for quorumkeeper.

These tests run full reconcile cycles against local HTTP servers that
stand in for cluster members.
"""

from collections.abc import AsyncIterator

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

PEERING_PORT = 8107


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "integration: marks tests as running local cluster nodes")


class FakeNode:
    """Local member answering ``/health`` according to a toggle."""

    def __init__(self) -> None:
        self.healthy = True
        self.resource_error = ""
        app = web.Application()
        app.router.add_get("/health", self._health)
        self.server = TestServer(app)

    async def _health(self, request: web.Request) -> web.StreamResponse:
        if self.healthy:
            return web.json_response({"ok": True})
        return web.json_response(
            {"ok": False, "resource_error": self.resource_error}, status=503
        )

    @property
    def address(self) -> str:
        return f"127.0.0.1:{PEERING_PORT}:{self.server.port}"


@pytest.fixture
async def cluster_nodes() -> AsyncIterator[list[FakeNode]]:
    """Three running members."""
    nodes = [FakeNode() for _ in range(3)]
    for node in nodes:
        await node.server.start_server()

    yield nodes

    for node in nodes:
        await node.server.close()
