"""Retry orchestration for outbound Slack calls.

Drives one logical call through its attempts: invoke the operation, consult
the retry policy on failure, wait, and try again. When every attempt is
spent (or the failure is terminal) the original exception is re-raised
unchanged.
"""

import asyncio
import logging
import random
from typing import Any, Awaitable, Callable, Mapping, Optional, TypeVar

from slack_mcp.core.context import get_correlation_id
from slack_mcp.core.observability import audit_log
from slack_mcp.core.resilience.classify import failure_url, retry_after_hint
from slack_mcp.core.resilience.models import (
    CallState,
    Idempotency,
    RetryConfig,
    SleepFunc,
    require_idempotency,
)
from slack_mcp.core.resilience.policy import decide_retry

logger = logging.getLogger(__name__)

T = TypeVar("T")

Operation = Callable[[int], Awaitable[T]]


async def _wait_out_rate_limit(error: Exception, attempt: int, sleep: SleepFunc) -> bool:
    """Sleep for a server-sent Retry-After hint. Returns True if it slept.

    This happens before the retry policy runs, so the wait is honoured even
    when the retry budget is already spent.
    """
    hint = retry_after_hint(error)
    if hint is None:
        return False

    url = failure_url(error)
    logger.warning(
        "Rate limited by Slack API; sleeping before retry",
        extra={"url": url, "retry_after_seconds": hint, "attempt": attempt},
    )
    details: dict[str, Any] = {"url": url, "retry_after_seconds": hint, "attempt": attempt}
    correlation_id = get_correlation_id()
    if correlation_id:
        details["correlation_id"] = correlation_id
    audit_log("rate_limit", **details)

    await sleep(hint)
    return True


async def execute_with_retry(
    operation: Operation[T],
    idempotency: Idempotency,
    config: Optional[RetryConfig] = None,
    *,
    sleep_func: Optional[SleepFunc] = None,
    rng: Optional[random.Random] = None,
) -> T:
    """Run *operation* with Slack-aware retries.

    Args:
        operation: Async callable taking the zero-based attempt number.
        idempotency: Whether repeating the call is safe. Required.
        config: Retry budget and delays (defaults to ``RetryConfig()``).
        sleep_func: Injectable sleep function for time control in tests.
        rng: Injectable Random instance for deterministic jitter.

    Returns:
        The first successful result of *operation*.

    Raises:
        TypeError: If *idempotency* is not an ``Idempotency`` member.
        Exception: The exception from the last attempt, unchanged.

    Testing example:
        >>> sleeps = []
        >>> async def fake_sleep(s): sleeps.append(s)
        >>> await execute_with_retry(
        ...     op, Idempotency.IDEMPOTENT, sleep_func=fake_sleep, rng=random.Random(1)
        ... )
    """
    require_idempotency(idempotency)
    cfg = config or RetryConfig()
    _sleep = sleep_func or asyncio.sleep
    state = CallState.PENDING
    last_exception: Optional[Exception] = None

    for attempt in range(cfg.max_retries + 1):
        state = CallState.RUNNING
        try:
            result = await operation(attempt)
        except Exception as e:
            last_exception = e
            slept_for_hint = await _wait_out_rate_limit(e, attempt, _sleep)

            decision = decide_retry(e, attempt, idempotency, cfg, rng=rng)
            if not decision.retry:
                state = CallState.FAILED
                logger.debug(
                    "Slack call failed",
                    extra={
                        "attempt": attempt,
                        "state": state.value,
                        "reason": decision.reason,
                        "failure_kind": decision.kind.value if decision.kind else None,
                    },
                )
                raise

            logger.debug(
                "Retrying Slack call",
                extra={
                    "attempt": attempt,
                    "reason": decision.reason,
                    "delay": decision.delay,
                },
            )
            state = CallState.PENDING
            if not slept_for_hint:
                await _sleep(decision.delay)
            continue

        state = CallState.SUCCEEDED
        return result

    if last_exception:
        raise last_exception
    raise RuntimeError(f"execute_with_retry: unexpected state {state.value}")


class RequestExecutor:
    """Retry orchestrator bound to client-level defaults.

    Per-call overrides are merged over the defaults on every ``execute``;
    the defaults themselves are never modified.
    """

    def __init__(
        self,
        defaults: Optional[RetryConfig] = None,
        *,
        sleep_func: Optional[SleepFunc] = None,
        rng: Optional[random.Random] = None,
    ):
        self._defaults = defaults or RetryConfig()
        self._sleep_func = sleep_func
        self._rng = rng

    @property
    def defaults(self) -> RetryConfig:
        return self._defaults

    async def execute(
        self,
        operation: Operation[T],
        idempotency: Idempotency,
        overrides: Optional[Mapping[str, Any]] = None,
    ) -> T:
        config = self._defaults.merged(overrides)
        return await execute_with_retry(
            operation,
            idempotency,
            config,
            sleep_func=self._sleep_func,
            rng=self._rng,
        )
