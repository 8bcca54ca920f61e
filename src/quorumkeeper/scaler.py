"""Replica scaling of the underlying workload."""

from abc import ABC, abstractmethod

import structlog

from quorumkeeper.exceptions import ScaleError

logger = structlog.get_logger(__name__)


class ReplicaScaler(ABC):
    """Abstract interface for adjusting a workload's desired replica count."""

    @abstractmethod
    async def get_replicas(self, workload_ref: str) -> int | None:
        """Get the current desired replica count, or None if unset."""
        ...

    @abstractmethod
    async def write_replicas(self, workload_ref: str, replicas: int) -> None:
        """Write a new desired replica count."""
        ...

    async def set_replicas(self, workload_ref: str, replicas: int) -> bool:
        """Scale the workload, skipping the write if already at ``replicas``.

        Returns True if a write was issued. Failures raise ScaleError and are
        not retried.
        """
        if replicas < 1:
            raise ValueError(f"replicas must be positive, got {replicas}")

        try:
            current = await self.get_replicas(workload_ref)
            if current == replicas:
                logger.debug(
                    "workload already scaled to desired replicas",
                    name=workload_ref,
                    replicas=replicas,
                )
                return False

            await self.write_replicas(workload_ref, replicas)
        except ScaleError:
            raise
        except Exception as e:
            logger.error("updating workload replicas failed", name=workload_ref, error=str(e))
            raise ScaleError(f"scaling {workload_ref} to {replicas} failed: {e}") from e

        return True


class MemoryReplicaScaler(ReplicaScaler):
    """In-memory scaler that records every write."""

    def __init__(self, replicas: dict[str, int] | None = None) -> None:
        self._replicas: dict[str, int] = dict(replicas or {})
        self.writes: list[tuple[str, int]] = []

    async def get_replicas(self, workload_ref: str) -> int | None:
        return self._replicas.get(workload_ref)

    async def write_replicas(self, workload_ref: str, replicas: int) -> None:
        self._replicas[workload_ref] = replicas
        self.writes.append((workload_ref, replicas))
