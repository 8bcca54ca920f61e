"""Pytest configuration for quorumkeeper tests."""

from collections.abc import AsyncIterator, Awaitable, Callable, Iterable
from typing import Any

import aiohttp
import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from quorumkeeper.models import ClusterSpec
from quorumkeeper.probe import NodeHealth, NodeHealthProbe

HealthHandler = Callable[[web.Request], Awaitable[web.StreamResponse]]
StartServer = Callable[[HealthHandler], Awaitable[TestServer]]

PEERING_PORT = 8107


class FakeProbe(NodeHealthProbe):
    """Probe that reports the configured addresses as unhealthy."""

    def __init__(self, failing: Iterable[str] = ()) -> None:
        super().__init__()
        self.failing = set(failing)
        self.calls: list[str] = []

    async def check(
        self,
        address: str,
        peering_port: int,
        session: aiohttp.ClientSession,
    ) -> NodeHealth:
        self.calls.append(address)
        if address in self.failing:
            return NodeHealth(address=address, ok=False, error="connection refused")
        return NodeHealth(address=address, ok=True)


@pytest.fixture
def fake_probe() -> Callable[..., FakeProbe]:
    """Factory for probes failing a given set of addresses."""

    def factory(failing: Iterable[str] = ()) -> FakeProbe:
        return FakeProbe(failing)

    return factory


@pytest.fixture
def spec() -> ClusterSpec:
    """Five-member cluster spec."""
    return ClusterSpec(name="search", replicas=5, peering_port=PEERING_PORT)


@pytest.fixture
def json_handler() -> Callable[..., HealthHandler]:
    """Factory for health handlers answering with a fixed JSON payload."""

    def factory(payload: Any, status: int = 200) -> HealthHandler:
        async def handler(request: web.Request) -> web.StreamResponse:
            return web.json_response(payload, status=status)

        return handler

    return factory


@pytest.fixture
async def health_server() -> AsyncIterator[StartServer]:
    """Start local servers exposing ``/health`` with the given handler."""
    servers: list[TestServer] = []

    async def start(handler: HealthHandler) -> TestServer:
        app = web.Application()
        app.router.add_get("/health", handler)
        server = TestServer(app)
        await server.start_server()
        servers.append(server)
        return server

    yield start

    for server in servers:
        await server.close()


@pytest.fixture
def address_of() -> Callable[[TestServer], str]:
    """Roster address of a local server, in ``host:peering:api`` form."""

    def address(server: TestServer) -> str:
        return f"127.0.0.1:{PEERING_PORT}:{server.port}"

    return address
