"""Parsing helpers for configuration values from TOML and the environment."""

import logging
from typing import Any, List, Optional

logger = logging.getLogger(__name__)


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _try_parse_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    normalized = str(value).strip().lower()
    if normalized in {"true", "1", "yes", "on"}:
        return True
    if normalized in {"false", "0", "no", "off"}:
        return False
    return None


def _parse_csv(value: Any) -> List[str]:
    """Split a comma-separated string (or pass a list through), dropping blanks.

    >>> _parse_csv("C01, C02,,")
    ['C01', 'C02']
    """
    if isinstance(value, (list, tuple)):
        items = [str(v) for v in value]
    else:
        items = str(value).split(",")
    return [item.strip() for item in items if item.strip()]


def _parse_number(value: Any, *, name: str, cast: type = float) -> Optional[Any]:
    """Parse *value* with *cast*, logging and returning None when invalid."""
    try:
        return cast(value)
    except (TypeError, ValueError):
        logger.warning("Invalid value for %s: %r (ignored)", name, value)
        return None
