"""Inputs and outputs of a quorum reconcile cycle."""

from dataclasses import dataclass
from enum import Enum
from typing import NamedTuple

from quorumkeeper.exceptions import QuorumError

DEFAULT_PEERING_PORT = 8107
DEFAULT_API_PORT = 8108


class QuorumCondition(str, Enum):
    """Outcome of one reconcile cycle."""

    WORKLOAD_NOT_READY = "WorkloadNotReady"
    QUORUM_NOT_READY = "QuorumNotReady"
    QUORUM_DOWNGRADED = "QuorumDowngraded"
    QUORUM_UPGRADED = "QuorumUpgraded"
    QUORUM_READY = "QuorumReady"


@dataclass(frozen=True)
class ClusterSpec:
    """Desired state of a cluster.

    Attributes:
        name: Cluster identity, used to key the roster and the workload
        replicas: Desired member count
        peering_port: Inter-member port, stripped from roster addresses before probing
        api_port: Port serving the health endpoint
    """

    name: str
    replicas: int
    peering_port: int = DEFAULT_PEERING_PORT
    api_port: int = DEFAULT_API_PORT

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("cluster name must not be empty")
        if self.replicas < 1:
            raise ValueError(f"replicas must be positive, got {self.replicas}")
        if self.peering_port < 1 or self.api_port < 1:
            raise ValueError("ports must be positive")

    @property
    def roster_key(self) -> str:
        return f"{self.name}-nodeslist"

    @property
    def workload_ref(self) -> str:
        return f"{self.name}-sts"

    def node_address(self, index: int) -> str:
        """Roster address of the member with the given ordinal."""
        return (
            f"{self.name}-sts-{index}.{self.name}-sts-svc"
            f":{self.peering_port}:{self.api_port}"
        )


@dataclass(frozen=True)
class WorkloadStatus:
    """Member counts reported by the workload controller."""

    replicas: int
    ready_replicas: int

    def __post_init__(self) -> None:
        if self.replicas < 0 or self.ready_replicas < 0:
            raise ValueError("replica counts must be non-negative")
        if self.ready_replicas > self.replicas:
            raise ValueError(
                f"ready replicas ({self.ready_replicas}) exceed total ({self.replicas})"
            )

    @property
    def is_ready(self) -> bool:
        return self.ready_replicas == self.replicas


class ReconcileResult(NamedTuple):
    """Condition, resulting size and error (if any) of a reconcile cycle."""

    condition: QuorumCondition
    size: int
    error: QuorumError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None
