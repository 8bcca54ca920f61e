"""Quorum maintenance for replicated clusters."""

from quorumkeeper.controller import QuorumController, reconcile_quorum
from quorumkeeper.evaluator import QuorumEvaluation, QuorumEvaluator
from quorumkeeper.exceptions import (
    ProbeError,
    QuorumError,
    QuorumInsufficientError,
    RosterConflictError,
    RosterUnavailableError,
    ScaleError,
    WorkloadNotReadyError,
)
from quorumkeeper.majority import compute_min_required, has_quorum
from quorumkeeper.models import ClusterSpec, QuorumCondition, ReconcileResult, WorkloadStatus
from quorumkeeper.probe import NodeHealth, NodeHealthProbe, normalize_address, probe_node
from quorumkeeper.roster import MemoryRosterStore, Roster, RosterStore
from quorumkeeper.scaler import MemoryReplicaScaler, ReplicaScaler

__all__ = [
    "reconcile_quorum",
    "probe_node",
    "compute_min_required",
    "has_quorum",
    "normalize_address",
    "QuorumController",
    "QuorumEvaluator",
    "QuorumEvaluation",
    "NodeHealthProbe",
    "NodeHealth",
    "ClusterSpec",
    "WorkloadStatus",
    "QuorumCondition",
    "ReconcileResult",
    "Roster",
    "RosterStore",
    "MemoryRosterStore",
    "ReplicaScaler",
    "MemoryReplicaScaler",
    "QuorumError",
    "WorkloadNotReadyError",
    "RosterUnavailableError",
    "RosterConflictError",
    "QuorumInsufficientError",
    "ProbeError",
    "ScaleError",
]

__version__ = "0.1.0"
