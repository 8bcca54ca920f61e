"""Reconcile-once quorum state machine."""

import structlog

from quorumkeeper.evaluator import QuorumEvaluator
from quorumkeeper.exceptions import (
    QuorumError,
    QuorumInsufficientError,
    RosterUnavailableError,
    WorkloadNotReadyError,
)
from quorumkeeper.majority import compute_min_required
from quorumkeeper.models import ClusterSpec, QuorumCondition, ReconcileResult, WorkloadStatus
from quorumkeeper.roster import Roster, RosterStore
from quorumkeeper.scaler import ReplicaScaler

logger = structlog.get_logger(__name__)


class QuorumController:
    """Keeps a majority of cluster members healthy by scaling the workload.

    Each call to ``reconcile`` recomputes everything from its inputs, the
    persisted roster and live probes; nothing is kept between calls. Callers
    must not run two reconciles for the same cluster concurrently.
    """

    def __init__(
        self,
        roster_store: RosterStore,
        scaler: ReplicaScaler,
        evaluator: QuorumEvaluator | None = None,
    ) -> None:
        """Initialize controller.

        Args:
            roster_store: Store holding the persisted member addresses
            scaler: Scaler for the underlying workload
            evaluator: Health evaluator, a default ``QuorumEvaluator`` if omitted
        """
        self._roster_store = roster_store
        self._scaler = scaler
        self._evaluator = evaluator or QuorumEvaluator()

    async def reconcile(self, spec: ClusterSpec, status: WorkloadStatus) -> ReconcileResult:
        """Run one reconcile cycle.

        Returns the resulting condition and size. ``error`` is set for
        WorkloadNotReady and QuorumNotReady.
        """
        log = logger.bind(cluster=spec.name)
        log.info("reconciling quorum")

        if not status.is_ready:
            return ReconcileResult(
                QuorumCondition.WORKLOAD_NOT_READY,
                0,
                WorkloadNotReadyError(status.ready_replicas, status.replicas),
            )

        result = await self._reconcile_quorum(spec, status)
        log.info(
            "reconciling quorum completed",
            condition=result.condition.value,
            size=result.size,
            error=str(result.error) if result.error else None,
        )
        return result

    async def _reconcile_quorum(
        self, spec: ClusterSpec, status: WorkloadStatus
    ) -> ReconcileResult:
        try:
            roster = await self._roster_store.get(spec.roster_key)
        except RosterUnavailableError as e:
            logger.error("unable to fetch roster", roster=spec.roster_key, error=str(e))
            return ReconcileResult(QuorumCondition.QUORUM_NOT_READY, 0, e)

        available = len(roster)
        min_required = compute_min_required(available)
        if available < min_required:
            return ReconcileResult(
                QuorumCondition.QUORUM_NOT_READY,
                available,
                QuorumInsufficientError(
                    f"quorum has less than minimum {min_required} available nodes",
                    available=available,
                    min_required=min_required,
                ),
            )

        evaluation = await self._evaluator.evaluate(roster.addresses, spec.peering_port)
        healthy = evaluation.healthy_count

        if healthy < min_required:
            if status.ready_replicas > 1:
                logger.info(
                    "downgrading quorum",
                    cluster=spec.name,
                    healthy=healthy,
                    min_required=min_required,
                    unhealthy=evaluation.unhealthy,
                )
                return await self._scale(spec, roster, 1, QuorumCondition.QUORUM_DOWNGRADED)

            return ReconcileResult(
                QuorumCondition.QUORUM_NOT_READY,
                healthy,
                QuorumInsufficientError(
                    f"quorum has {healthy} healthy nodes, minimum required {min_required}",
                    available=healthy,
                    min_required=min_required,
                ),
            )

        if status.ready_replicas < spec.replicas:
            logger.info(
                "upgrading quorum",
                cluster=spec.name,
                ready=status.ready_replicas,
                desired=spec.replicas,
            )
            return await self._scale(
                spec, roster, spec.replicas, QuorumCondition.QUORUM_UPGRADED
            )

        return ReconcileResult(QuorumCondition.QUORUM_READY, healthy)

    async def _scale(
        self,
        spec: ClusterSpec,
        roster: Roster,
        size: int,
        condition: QuorumCondition,
    ) -> ReconcileResult:
        """Resize the roster, then the workload."""
        try:
            resized = await self._roster_store.resize(
                spec.roster_key,
                size,
                address_for=spec.node_address,
                expected_version=roster.version,
            )
            await self._scaler.set_replicas(spec.workload_ref, size)
        except QuorumError as e:
            logger.error("scaling quorum failed", cluster=spec.name, size=size, error=str(e))
            return ReconcileResult(QuorumCondition.QUORUM_NOT_READY, 0, e)

        return ReconcileResult(condition, len(resized))


async def reconcile_quorum(
    spec: ClusterSpec,
    status: WorkloadStatus,
    *,
    roster_store: RosterStore,
    scaler: ReplicaScaler,
    evaluator: QuorumEvaluator | None = None,
) -> ReconcileResult:
    """Run a single reconcile cycle with a throwaway controller."""
    controller = QuorumController(roster_store, scaler, evaluator)
    return await controller.reconcile(spec, status)
