"""Tests for exponential backoff with full jitter."""

import random
import statistics

import pytest

from slack_mcp.core.resilience import backoff_ceiling, compute_backoff


class TestBackoffCeiling:
    """Tests for the pre-jitter delay curve."""

    def test_attempt_zero_is_base_delay(self):
        assert backoff_ceiling(0, 0.25, 5.0) == 0.25

    def test_doubles_per_attempt(self):
        assert backoff_ceiling(1, 0.25, 5.0) == 0.5
        assert backoff_ceiling(2, 0.25, 5.0) == 1.0
        assert backoff_ceiling(3, 0.25, 5.0) == 2.0

    def test_clamped_to_max_delay(self):
        assert backoff_ceiling(5, 0.25, 5.0) == 5.0
        assert backoff_ceiling(6, 0.25, 5.0) == 5.0

    def test_huge_attempt_does_not_overflow(self):
        """Exponent is capped once the clamp applies."""
        assert backoff_ceiling(10_000, 0.25, 5.0) == 5.0
        assert backoff_ceiling(10**9, 250, 5000) == 5000

    def test_extreme_delay_ratio_does_not_overflow(self):
        """max_delay / base_delay is inf for these bounds; the curve still clamps."""
        assert backoff_ceiling(10**6, 5e-324, 1e308) == 1e308
        assert backoff_ceiling(0, 5e-324, 1e308) == 5e-324
        assert backoff_ceiling(100, 5e-324, 1e308) == 5e-324 * 2.0**100

    def test_zero_base_delay(self):
        assert backoff_ceiling(3, 0.0, 0.0) == 0.0
        assert backoff_ceiling(3, 0.0, 5.0) == 0.0

    def test_equal_base_and_max(self):
        assert backoff_ceiling(4, 1.0, 1.0) == 1.0

    def test_negative_attempt_rejected(self):
        with pytest.raises(ValueError, match="attempt"):
            backoff_ceiling(-1, 0.25, 5.0)


class TestComputeBackoff:
    """Tests for full-jitter sampling."""

    def test_jitter_bounds_and_spread(self):
        """1,000 samples for attempt 3 stay within [0, 2000] and are not constant."""
        rng = random.Random(1234)
        samples = [compute_backoff(3, 250, 5000, rng=rng) for _ in range(1000)]

        assert all(0 <= s <= 2000 for s in samples)
        assert statistics.pvariance(samples) > 0

    def test_seeded_rng_is_deterministic(self):
        first = compute_backoff(2, 0.25, 5.0, rng=random.Random(7))
        second = compute_backoff(2, 0.25, 5.0, rng=random.Random(7))
        assert first == second

    def test_zero_ceiling_returns_zero_without_sampling(self):
        assert compute_backoff(3, 0.0, 0.0) == 0.0

    def test_default_rng_used_when_none_given(self):
        delay = compute_backoff(0, 0.25, 5.0)
        assert 0.0 <= delay <= 0.25
