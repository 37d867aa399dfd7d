"""Configuration package for slack-mcp.

Sub-modules:
    parsing  – Boolean/CSV/number parsing helpers
    server   – ServerConfig dataclass, get_config/set_config globals
    loader   – ServerConfig loading/validation mixin (_ServerConfigLoader)
"""

from slack_mcp.config.parsing import (  # noqa: F401
    _parse_bool,
    _parse_csv,
    _try_parse_bool,
)
from slack_mcp.config.server import (  # noqa: F401
    ServerConfig,
    get_config,
    set_config,
)

__all__ = [
    "ServerConfig",
    "get_config",
    "set_config",
]
