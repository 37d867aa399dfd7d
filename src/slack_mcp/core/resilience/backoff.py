"""Exponential backoff with full jitter."""

import math
import random
from typing import Optional


def backoff_ceiling(attempt: int, base_delay: float, max_delay: float) -> float:
    """Return the pre-jitter delay ``base_delay * 2**attempt`` clamped to
    ``[base_delay, max_delay]``.

    The exponent is capped at the point where the clamp takes over, so very
    large attempt numbers never overflow.
    """
    if attempt < 0:
        raise ValueError(f"attempt must be >= 0, got {attempt}")

    if base_delay <= 0 or max_delay <= base_delay:
        return min(base_delay, max_delay)

    # log2 of each bound separately; max_delay / base_delay can overflow to inf
    if attempt >= math.log2(max_delay) - math.log2(base_delay):
        return max_delay
    return min(math.ldexp(base_delay, attempt), max_delay)


def compute_backoff(
    attempt: int,
    base_delay: float,
    max_delay: float,
    *,
    rng: Optional[random.Random] = None,
) -> float:
    """Compute a retry delay with full jitter.

    The result is drawn uniformly from ``[0, backoff_ceiling(...)]``, which
    decorrelates retries from independent callers.

    Args:
        attempt: Zero-based attempt index that just failed.
        base_delay: Delay for attempt 0 before jitter.
        max_delay: Upper bound for the exponential curve.
        rng: Injectable Random instance for deterministic testing.

    Returns:
        Delay in the same unit as ``base_delay``/``max_delay``.

    Example:
        >>> compute_backoff(3, 0.25, 5.0, rng=random.Random(42))  # in [0, 2.0]
    """
    ceiling = backoff_ceiling(attempt, base_delay, max_delay)
    if ceiling <= 0:
        return 0.0
    _rng = rng or random.Random()
    return _rng.uniform(0.0, ceiling)
