"""Retry policy: decide whether a failed attempt may be retried, and when.

Rules are evaluated in order:

1. Budget: once ``attempt >= max_retries`` nothing is retried.
2. Rate limits are always retryable, even for non-idempotent calls,
   because Slack rejected the request before acting on it.
3. Non-idempotent calls are not retried for any other failure.
4. Idempotent calls retry network failures and transport failures with a
   5xx or unknown status. Other 4xx failures are terminal.

A ``should_retry`` hook on the config replaces rules 2-4. Exceptions that
are not Slack failures are never retried.
"""

import random
from typing import Optional

from slack_mcp.core.resilience.backoff import compute_backoff
from slack_mcp.core.resilience.classify import (
    classify_failure,
    failure_status,
    retry_after_hint,
)
from slack_mcp.core.resilience.models import (
    FailureKind,
    Idempotency,
    RetryConfig,
    RetryDecision,
    require_idempotency,
)


def compute_retry_delay(
    error: BaseException,
    attempt: int,
    config: RetryConfig,
    *,
    rng: Optional[random.Random] = None,
) -> float:
    """Delay before the next attempt.

    A server ``Retry-After`` hint wins over computed backoff. The config's
    ``get_delay`` hook, when set, sees that default and returns the final
    value (negative results are treated as zero).
    """
    hint = retry_after_hint(error)
    if hint is not None:
        delay = hint
    else:
        delay = compute_backoff(attempt, config.base_delay, config.max_delay, rng=rng)

    if config.get_delay is not None:
        delay = max(0.0, float(config.get_delay(error, attempt, delay)))
    return delay


def decide_retry(
    error: BaseException,
    attempt: int,
    idempotency: Idempotency,
    config: RetryConfig,
    *,
    rng: Optional[random.Random] = None,
) -> RetryDecision:
    """Decide whether the failed *attempt* (zero-based) should be retried.

    Pure apart from the jitter drawn from *rng*.

    Returns:
        RetryDecision with ``retry``, the ``delay`` to wait when retrying,
        the classified failure ``kind`` and a short ``reason`` tag.

    Raises:
        TypeError: If *idempotency* is not an ``Idempotency`` member.
    """
    require_idempotency(idempotency)
    kind = classify_failure(error)

    if attempt >= config.max_retries:
        return RetryDecision(retry=False, kind=kind, reason="budget_exhausted")

    if config.should_retry is not None:
        retry = bool(config.should_retry(error, attempt))
        reason = "custom_policy"
    elif kind is FailureKind.RATE_LIMITED:
        retry, reason = True, "rate_limited"
    elif idempotency is Idempotency.NON_IDEMPOTENT:
        retry, reason = False, "non_idempotent"
    elif kind is FailureKind.NETWORK:
        retry, reason = True, "network_failure"
    elif kind is FailureKind.TRANSPORT:
        status = failure_status(error)
        if status is None or status >= 500:
            retry, reason = True, "server_error"
        else:
            retry, reason = False, "client_error"
    else:
        retry, reason = False, "unclassified"

    if not retry:
        return RetryDecision(retry=False, kind=kind, reason=reason)

    return RetryDecision(
        retry=True,
        delay=compute_retry_delay(error, attempt, config, rng=rng),
        kind=kind,
        reason=reason,
    )
