"""Roster store interfaces for cluster membership."""

from abc import ABC, abstractmethod
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field

from quorumkeeper.exceptions import (
    QuorumError,
    RosterConflictError,
    RosterUnavailableError,
    ScaleError,
)

NODES_FIELD = "nodes"


@dataclass
class Roster:
    """Ordered member addresses plus the version they were read at."""

    addresses: list[str] = field(default_factory=list)
    version: int | None = None

    def __len__(self) -> int:
        return len(self.addresses)


def parse_nodes(value: str) -> list[str]:
    """Split a comma-separated nodes list, dropping blank entries."""
    return [part.strip() for part in value.split(",") if part.strip()]


def format_nodes(addresses: Iterable[str]) -> str:
    return ",".join(addresses)


class RosterStore(ABC):
    """Abstract interface for the persisted cluster roster."""

    @abstractmethod
    async def get(self, cluster_id: str) -> Roster:
        """Read the roster.

        Raises RosterUnavailableError if the record cannot be read.
        """
        ...

    @abstractmethod
    async def put(
        self,
        cluster_id: str,
        addresses: list[str],
        *,
        expected_version: int | None = None,
    ) -> Roster:
        """Persist the roster.

        Raises RosterConflictError if ``expected_version`` is given and the
        stored record has a different version.
        """
        ...

    async def resize(
        self,
        cluster_id: str,
        desired_size: int,
        *,
        address_for: Callable[[int], str],
        expected_version: int | None = None,
    ) -> Roster:
        """Truncate or extend the roster to ``desired_size`` members.

        New members get the address ``address_for(index)``. Storage failures
        raise ScaleError.
        """
        if desired_size < 1:
            raise ValueError(f"desired roster size must be positive, got {desired_size}")

        try:
            current = await self.get(cluster_id)
            addresses = current.addresses[:desired_size]
            addresses.extend(address_for(i) for i in range(len(addresses), desired_size))
            return await self.put(cluster_id, addresses, expected_version=expected_version)
        except QuorumError:
            raise
        except Exception as e:
            raise ScaleError(f"resizing roster {cluster_id} to {desired_size} failed: {e}") from e


class MemoryRosterStore(RosterStore):
    """In-memory roster store keyed by cluster identity."""

    def __init__(self, records: dict[str, list[str]] | None = None) -> None:
        self._records: dict[str, dict[str, str]] = {}
        self._versions: dict[str, int] = {}
        for cluster_id, addresses in (records or {}).items():
            self._records[cluster_id] = {NODES_FIELD: format_nodes(addresses)}
            self._versions[cluster_id] = 1

    async def get(self, cluster_id: str) -> Roster:
        """Read the roster."""
        record = self._records.get(cluster_id)
        if record is None:
            raise RosterUnavailableError(f"roster {cluster_id} not found")
        return Roster(
            addresses=parse_nodes(record.get(NODES_FIELD, "")),
            version=self._versions[cluster_id],
        )

    async def put(
        self,
        cluster_id: str,
        addresses: list[str],
        *,
        expected_version: int | None = None,
    ) -> Roster:
        """Persist the roster."""
        actual = self._versions.get(cluster_id)
        if expected_version is not None and expected_version != actual:
            raise RosterConflictError(cluster_id, expected_version, actual)

        version = (actual or 0) + 1
        self._records[cluster_id] = {NODES_FIELD: format_nodes(addresses)}
        self._versions[cluster_id] = version
        return Roster(addresses=list(addresses), version=version)

    def record(self, cluster_id: str) -> dict[str, str] | None:
        """Raw persisted record, as a copy."""
        record = self._records.get(cluster_id)
        return dict(record) if record is not None else None
