"""Sensitive data redaction for log output.

Slack tokens and bearer credentials must never reach logs or error
payloads verbatim.
"""

import re
from typing import Any, Final, List, Optional, Tuple

SENSITIVE_PATTERNS: Final[List[Tuple[str, str]]] = [
    # Slack tokens: bot, user, app-level, refresh, config
    (r"xox[abeoprs]-[A-Za-z0-9\-]{10,}", "SLACK_TOKEN"),
    (r"xapp-[A-Za-z0-9\-]{10,}", "SLACK_APP_TOKEN"),
    (r"(?i)bearer\s+([a-zA-Z0-9_\-\.]+)", "BEARER_TOKEN"),
    (r"(?i)(token|secret)\s*[:=]\s*['\"]?([^\s'\"]{8,})['\"]?", "SECRET"),
]
"""Patterns for detecting sensitive data that should be redacted."""


def redact_sensitive_data(
    data: Any,
    *,
    patterns: Optional[List[Tuple[str, str]]] = None,
    redaction_format: str = "[REDACTED:{label}]",
    max_depth: int = 10,
) -> Any:
    """Recursively redact sensitive data from strings, dicts, and lists.

    Args:
        data: The data to redact (string, dict, list, or nested structure)
        patterns: Custom patterns to use (default: SENSITIVE_PATTERNS)
        redaction_format: Format string for redaction markers (uses {label})
        max_depth: Maximum recursion depth

    Returns:
        A copy of *data* with matches replaced.
    """
    active = patterns if patterns is not None else SENSITIVE_PATTERNS

    def _redact(value: Any, depth: int) -> Any:
        if depth > max_depth:
            return value
        if isinstance(value, str):
            for pattern, label in active:
                value = re.sub(pattern, redaction_format.format(label=label), value)
            return value
        if isinstance(value, dict):
            return {k: _redact(v, depth + 1) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return type(value)(_redact(v, depth + 1) for v in value)
        return value

    return _redact(data, 0)


def redact_for_logging(data: Any) -> str:
    """Redact *data* and render it as a single string for a log line."""
    return str(redact_sensitive_data(data))
