"""Resilience layer for outbound Slack API calls.

Sub-modules:
    models     - FailureKind, Idempotency, CallState, RetryConfig, RetryDecision
    classify   - parse_retry_after, raise_for_slack_status, classify_failure
    backoff    - compute_backoff (exponential, full jitter)
    policy     - decide_retry
    execution  - execute_with_retry, RequestExecutor
"""

from slack_mcp.core.resilience.backoff import backoff_ceiling, compute_backoff
from slack_mcp.core.resilience.classify import (
    classify_failure,
    failure_status,
    parse_retry_after,
    raise_for_slack_status,
    retry_after_hint,
)
from slack_mcp.core.resilience.execution import RequestExecutor, execute_with_retry
from slack_mcp.core.resilience.models import (
    CallState,
    FailureKind,
    Idempotency,
    RetryConfig,
    RetryDecision,
    RetryOverrides,
    SleepFunc,
    require_idempotency,
)
from slack_mcp.core.resilience.policy import compute_retry_delay, decide_retry

__all__ = [
    # Models
    "CallState",
    "FailureKind",
    "Idempotency",
    "RetryConfig",
    "RetryDecision",
    "RetryOverrides",
    "SleepFunc",
    "require_idempotency",
    # Classification
    "classify_failure",
    "failure_status",
    "parse_retry_after",
    "raise_for_slack_status",
    "retry_after_hint",
    # Backoff / policy
    "backoff_ceiling",
    "compute_backoff",
    "compute_retry_delay",
    "decide_retry",
    # Execution
    "RequestExecutor",
    "execute_with_retry",
]
