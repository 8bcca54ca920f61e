"""Quorum evaluation across the roster."""

import asyncio
from collections.abc import Sequence
from dataclasses import dataclass, field

import aiohttp

from quorumkeeper.majority import compute_min_required
from quorumkeeper.probe import NodeHealth, NodeHealthProbe

DEFAULT_MAX_CONCURRENCY = 16


@dataclass
class QuorumEvaluation:
    """Aggregated health of a roster."""

    min_required: int
    healthy_count: int
    results: list[NodeHealth] = field(default_factory=list)

    @property
    def has_quorum(self) -> bool:
        return self.healthy_count >= self.min_required

    @property
    def unhealthy(self) -> list[str]:
        return [r.address for r in self.results if not r.ok]


class QuorumEvaluator:
    """Probes every roster member concurrently and counts the healthy ones."""

    def __init__(
        self,
        probe: NodeHealthProbe | None = None,
        *,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
    ) -> None:
        """Initialize evaluator.

        Args:
            probe: Probe used per member, a default ``NodeHealthProbe`` if omitted
            max_concurrency: Maximum number of probes in flight
        """
        if max_concurrency < 1:
            raise ValueError(f"max_concurrency must be positive, got {max_concurrency}")
        self._probe = probe or NodeHealthProbe()
        self._max_concurrency = max_concurrency

    async def evaluate(self, addresses: Sequence[str], peering_port: int) -> QuorumEvaluation:
        """Probe all members and compare the healthy count with the majority.

        Probe failures count as unhealthy members; this never raises for them.
        """
        min_required = compute_min_required(len(addresses))
        if not addresses:
            return QuorumEvaluation(min_required=min_required, healthy_count=0)

        semaphore = asyncio.Semaphore(self._max_concurrency)

        async with aiohttp.ClientSession() as session:

            async def bounded_check(address: str) -> NodeHealth:
                async with semaphore:
                    return await self._probe.check(address, peering_port, session)

            results = await asyncio.gather(*(bounded_check(a) for a in addresses))

        healthy = sum(1 for r in results if r.ok)
        return QuorumEvaluation(
            min_required=min_required,
            healthy_count=healthy,
            results=list(results),
        )
