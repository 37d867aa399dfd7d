"""ServerConfig dataclass and global configuration state.

This module defines the ``ServerConfig`` class (field declarations and simple
accessor methods) and the global ``get_config`` / ``set_config`` helpers.
Loading and validation logic lives in the ``_ServerConfigLoader`` mixin
(``loader.py``) which ``ServerConfig`` inherits from.
"""

import logging
import sys
from dataclasses import dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version
from typing import List, Optional, Tuple

from slack_mcp.client.models import TokenType
from slack_mcp.config.loader import _ServerConfigLoader
from slack_mcp.core.resilience import RetryConfig


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("slack-mcp")
    except PackageNotFoundError:
        return "0.1.0"  # Fallback for dev without install


_PACKAGE_VERSION = _get_version()


@dataclass
class ServerConfig(_ServerConfigLoader):
    """Server configuration with support for env vars and TOML overrides."""

    # Slack credentials and workspace
    bot_token: Optional[str] = field(default=None, repr=False)
    user_token: Optional[str] = field(default=None, repr=False)
    team_id: Optional[str] = None
    channel_ids: List[str] = field(default_factory=list)

    # HTTP transport
    transport: str = "stdio"
    host: str = "0.0.0.0"
    port: int = 3000
    auth_token: Optional[str] = field(default=None, repr=False)

    # Logging configuration
    log_level: str = "INFO"
    structured_logging: bool = True

    # Server identity
    server_name: str = "slack-mcp"
    server_version: str = field(default_factory=lambda: _PACKAGE_VERSION)

    # Outbound request resilience (seconds)
    max_retries: int = 3
    base_delay: float = 0.25
    max_delay: float = 5.0
    timeout: float = 30.0

    # Tool registration control
    disabled_tools: List[str] = field(default_factory=list)

    startup_warnings: List[str] = field(default_factory=list, repr=False)

    def _add_startup_warning(self, message: str) -> None:
        if message and message not in self.startup_warnings:
            self.startup_warnings.append(message)

    def active_token(self) -> Tuple[Optional[str], TokenType]:
        """Token the Slack client should use. The user token wins when both are set."""
        if self.user_token:
            return self.user_token, TokenType.USER
        return self.bot_token, TokenType.BOT

    def retry_config(self) -> RetryConfig:
        """Client-level retry defaults built from the configured values."""
        return RetryConfig(
            max_retries=self.max_retries,
            base_delay=self.base_delay,
            max_delay=self.max_delay,
        )

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Logs go to stderr so the stdio transport keeps stdout for protocol
        frames.
        """
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            # JSON-style structured logging
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("slack_mcp")
        root_logger.setLevel(level)
        root_logger.addHandler(handler)


# Global configuration instance
_config: Optional[ServerConfig] = None


def get_config() -> ServerConfig:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = ServerConfig.from_env()
    return _config


def set_config(config: ServerConfig) -> None:
    """Set the global configuration instance."""
    global _config
    _config = config
