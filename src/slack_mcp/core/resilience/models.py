"""Resilience data models, enums, and protocols.

Defines the core types used across the resilience sub-package:
- FailureKind enum tagging the three Slack failure kinds
- Idempotency enum every call site must declare
- CallState enum for the per-call state machine
- RetryConfig for retry budget and delay tuning
- RetryDecision returned by the retry policy
- SleepFunc protocol for injectable async sleep
"""

import math
from dataclasses import dataclass, replace
from dataclasses import fields as dataclass_fields
from enum import Enum
from typing import Any, Callable, Mapping, Optional, Protocol, TypedDict


class FailureKind(str, Enum):
    """Classification of a failed Slack call."""

    RATE_LIMITED = "rate_limited"
    TRANSPORT = "transport"
    NETWORK = "network"


class Idempotency(str, Enum):
    """Whether a call may be repeated without duplicating a side effect.

    Supplied by the caller for every call; never inferred from the HTTP
    method or URL.
    """

    IDEMPOTENT = "idempotent"
    NON_IDEMPOTENT = "non_idempotent"


class CallState(str, Enum):
    """Lifecycle of one logical call through the orchestrator."""

    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def require_idempotency(value: Any) -> Idempotency:
    """Return *value* if it is an ``Idempotency`` member, else raise TypeError.

    Booleans and strings are rejected so that every call site spells out
    ``Idempotency.IDEMPOTENT`` or ``Idempotency.NON_IDEMPOTENT``.
    """
    if not isinstance(value, Idempotency):
        raise TypeError(
            f"idempotency must be an Idempotency member, got {type(value).__name__}: {value!r}"
        )
    return value


ShouldRetryHook = Callable[[Exception, int], bool]
GetDelayHook = Callable[[Exception, int, float], float]


class RetryOverrides(TypedDict, total=False):
    """Per-call overrides merged over client-level ``RetryConfig`` defaults."""

    max_retries: int
    base_delay: float
    max_delay: float


@dataclass(frozen=True)
class RetryConfig:
    """Retry budget and backoff configuration (delays in seconds).

    Immutable: build one per client or call site and derive variants with
    :meth:`merged`.

    Attributes:
        max_retries: Retries allowed after the first attempt (>= 0)
        base_delay: Backoff delay for attempt 0, before jitter (>= 0)
        max_delay: Upper bound for computed backoff (>= base_delay)
        should_retry: Optional hook replacing the built-in eligibility rules
            (the retry budget is still enforced)
        get_delay: Optional hook receiving ``(error, attempt, default_delay)``
            and returning the delay to use
    """

    max_retries: int = 3
    base_delay: float = 0.25
    max_delay: float = 5.0
    should_retry: Optional[ShouldRetryHook] = None
    get_delay: Optional[GetDelayHook] = None

    def __post_init__(self) -> None:
        if isinstance(self.max_retries, bool) or not isinstance(self.max_retries, int):
            raise ValueError(f"max_retries must be an int, got {self.max_retries!r}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        for name in ("base_delay", "max_delay"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite number >= 0, got {value!r}")
        if self.max_delay < self.base_delay:
            raise ValueError(
                f"max_delay ({self.max_delay}) must be >= base_delay ({self.base_delay})"
            )

    def merged(self, overrides: Optional[Mapping[str, Any]] = None, **fields: Any) -> "RetryConfig":
        """Return a copy with explicitly supplied fields replaced.

        ``None`` values are ignored so callers can forward optional
        arguments untouched. Unknown field names raise ValueError.
        """
        explicit = {
            key: value
            for key, value in {**dict(overrides or {}), **fields}.items()
            if value is not None
        }
        if not explicit:
            return self
        known = {f.name for f in dataclass_fields(self)}
        unknown = sorted(set(explicit) - known)
        if unknown:
            raise ValueError(f"Unknown retry config field(s): {', '.join(unknown)}")
        return replace(self, **explicit)


@dataclass(frozen=True)
class RetryDecision:
    """Outcome of the retry policy for one failed attempt.

    ``delay`` is only meaningful when ``retry`` is True.
    """

    retry: bool
    delay: float = 0.0
    kind: Optional[FailureKind] = None
    reason: str = ""


class SleepFunc(Protocol):
    """Protocol for injectable sleep function."""

    async def __call__(self, seconds: float) -> None: ...
