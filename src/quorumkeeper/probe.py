"""Liveness probing of a single cluster member."""

from dataclasses import dataclass
from typing import Any

import aiohttp
import structlog

from quorumkeeper.exceptions import ProbeError

DEFAULT_PROBE_TIMEOUT = 0.5
HEALTH_PATH = "/health"

logger = structlog.get_logger(__name__)


@dataclass
class NodeHealth:
    """Health of one roster member."""

    address: str
    ok: bool
    resource_error: str = ""
    error: str | None = None


def normalize_address(address: str, peering_port: int) -> str:
    """Drop the peering port from a roster address.

    Roster entries look like ``host:peering`` or ``host:peering:api``; the
    first port segment equal to ``peering_port`` is removed.
    """
    host, *ports = address.strip().split(":")
    token = str(peering_port)
    if token in ports:
        ports.remove(token)
    return ":".join([host, *ports])


class NodeHealthProbe:
    """Bounded-timeout health check against a node's ``/health`` endpoint."""

    def __init__(self, *, timeout: float = DEFAULT_PROBE_TIMEOUT) -> None:
        """Initialize probe.

        Args:
            timeout: Total time allowed per request in seconds
        """
        if timeout <= 0:
            raise ValueError(f"timeout must be positive, got {timeout}")
        self._timeout = timeout

    @property
    def timeout(self) -> float:
        return self._timeout

    def health_url(self, address: str, peering_port: int) -> str:
        return f"http://{normalize_address(address, peering_port)}{HEALTH_PATH}"

    async def check(
        self,
        address: str,
        peering_port: int,
        session: aiohttp.ClientSession,
    ) -> NodeHealth:
        """Probe one node. Failures are reported as an unhealthy result."""
        try:
            payload = await self._fetch(self.health_url(address, peering_port), session)
        except ProbeError as e:
            logger.warning("health check failed", node=address, error=str(e))
            return NodeHealth(address=address, ok=False, error=str(e))

        ok = payload.get("ok", False)
        resource_error = payload.get("resource_error")
        if resource_error is None:
            resource_error = ""
        if not isinstance(ok, bool) or not isinstance(resource_error, str):
            logger.warning("health check returned malformed payload", node=address)
            return NodeHealth(address=address, ok=False, error="malformed health payload")

        if not ok and resource_error:
            logger.error(
                "health check reported a node error",
                node=address,
                resource_error=resource_error,
            )
        return NodeHealth(address=address, ok=ok, resource_error=resource_error)

    async def _fetch(self, url: str, session: aiohttp.ClientSession) -> dict[str, Any]:
        try:
            async with session.get(
                url, timeout=aiohttp.ClientTimeout(total=self._timeout)
            ) as resp:
                status = resp.status
                payload = await resp.json(content_type=None)
        except TimeoutError as e:
            raise ProbeError(f"{url} timed out after {self._timeout}s") from e
        except aiohttp.ClientError as e:
            raise ProbeError(f"request to {url} failed: {e}") from e
        except ValueError as e:
            raise ProbeError(f"invalid health response from {url}: {e}") from e

        if not isinstance(payload, dict):
            raise ProbeError(f"health response from {url} is not an object")
        # An unhealthy node may answer with an error status and an ok=false body.
        if status >= 300 and payload.get("ok") is not False:
            raise ProbeError(f"{url} returned HTTP {status}")
        return payload


async def probe_node(
    address: str,
    *,
    peering_port: int,
    timeout: float = DEFAULT_PROBE_TIMEOUT,
) -> NodeHealth:
    """Probe a single node with a dedicated session."""
    probe = NodeHealthProbe(timeout=timeout)
    async with aiohttp.ClientSession() as session:
        return await probe.check(address, peering_port, session)
