"""Exceptions for quorum reconciliation."""


class QuorumError(Exception):
    """Base exception for quorum reconciliation errors."""

    pass


class WorkloadNotReadyError(QuorumError):
    """Workload is mid-rollout; quorum is not evaluated."""

    ready: int
    total: int

    def __init__(self, ready: int, total: int) -> None:
        self.ready = ready
        self.total = total
        super().__init__(f"workload not ready: {ready}/{total} replicas ready")


class RosterUnavailableError(QuorumError):
    """Persisted roster could not be read."""

    pass


class QuorumInsufficientError(QuorumError):
    """Fewer members than the majority threshold."""

    available: int
    min_required: int

    def __init__(self, message: str, *, available: int, min_required: int) -> None:
        self.available = available
        self.min_required = min_required
        super().__init__(message)


class ProbeError(QuorumError):
    """Health probe against a single node failed."""

    pass


class ScaleError(QuorumError):
    """Roster resize or replica-count write failed."""

    pass


class RosterConflictError(ScaleError):
    """Roster was modified since it was read."""

    expected: int | None
    actual: int | None

    def __init__(self, cluster_id: str, expected: int | None, actual: int | None) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"roster {cluster_id} changed concurrently: expected version {expected}, found {actual}"
        )
