"""Majority threshold for a roster of cluster members."""


def compute_min_required(n: int) -> int:
    """Minimum number of healthy members for quorum in a roster of ``n``.

    Uses ``floor((n - 1) / 2) + 1``, so 1, 1, 2, 2, 3 for n = 1..5. An
    empty roster still requires one healthy member.
    """
    if n < 0:
        raise ValueError(f"roster size must be non-negative, got {n}")
    if n == 0:
        return 1
    return (n - 1) // 2 + 1


def has_quorum(healthy: int, n: int) -> bool:
    """Check whether ``healthy`` members form a majority of ``n``."""
    return healthy >= compute_min_required(n)
