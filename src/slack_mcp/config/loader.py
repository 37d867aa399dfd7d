"""ServerConfig loading and validation logic.

Provides ``_ServerConfigLoader``, a mixin class whose methods are inherited by
``ServerConfig`` (defined in ``server.py``). Splitting loading/validation
logic into its own module keeps ``server.py`` focused on field definitions and
simple accessor methods.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, cast

if TYPE_CHECKING:
    from slack_mcp.config.server import ServerConfig

from slack_mcp.config.parsing import (
    _parse_bool,
    _parse_csv,
    _parse_number,
    _try_parse_bool,
)

logger = logging.getLogger(__name__)

_CONFIG_FILE_ENV_VAR = "SLACK_MCP_CONFIG_FILE"
_VALID_TRANSPORTS = {"stdio", "http"}


class _ServerConfigLoader:
    """Mixin providing config-loading methods for ``ServerConfig``.

    At runtime ``self`` is always a ``ServerConfig`` instance.
    """

    if TYPE_CHECKING:
        bot_token: Optional[str]
        user_token: Optional[str]
        team_id: Optional[str]
        channel_ids: List[str]
        auth_token: Optional[str]
        transport: str
        host: str
        port: int
        log_level: str
        structured_logging: bool
        server_name: str
        max_retries: int
        base_delay: float
        max_delay: float
        timeout: float
        disabled_tools: List[str]
        startup_warnings: List[str]

        def _add_startup_warning(self, message: str) -> None: ...

    @classmethod
    def from_env(cls, config_file: Optional[str] = None) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML file.

        Priority (highest to lowest):
        1. Environment variables
        2. Project TOML config (./slack-mcp.toml)
        3. User TOML config (~/.slack-mcp.toml)
        4. XDG config (~/.config/slack-mcp/config.toml)
        5. Default values

        An explicit *config_file* (or ``SLACK_MCP_CONFIG_FILE``) replaces the
        layered lookup.
        """
        config = cls()

        toml_path = config_file or os.environ.get(_CONFIG_FILE_ENV_VAR)
        if toml_path:
            config._load_toml(Path(toml_path))
        else:
            xdg_config_home = os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
            xdg_config = Path(xdg_config_home) / "slack-mcp" / "config.toml"
            if xdg_config.exists():
                config._load_toml(xdg_config)
                logger.debug(f"Loaded XDG config from {xdg_config}")

            home_config = Path.home() / ".slack-mcp.toml"
            if home_config.exists():
                config._load_toml(home_config)
                logger.debug(f"Loaded user config from {home_config}")

            project_config = Path("slack-mcp.toml")
            if project_config.exists():
                config._load_toml(project_config)
                logger.debug(f"Loaded project config from {project_config}")

        config._load_env()
        config._validate_startup_configuration()

        return cast("ServerConfig", config)

    def _load_toml(self, path: Path) -> None:
        """Load configuration from TOML file.

        Tokens are deliberately not read from TOML; they only come from the
        environment.
        """
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            logger.error(f"Error loading config file {path}: {e}")
            return

        slack: Dict[str, Any] = data.get("slack", {})
        if "team_id" in slack:
            self.team_id = str(slack["team_id"])
        if "channel_ids" in slack:
            self.channel_ids = _parse_csv(slack["channel_ids"])

        log: Dict[str, Any] = data.get("logging", {})
        if "level" in log:
            self.log_level = str(log["level"]).upper()
        if "structured" in log:
            self.structured_logging = _parse_bool(log["structured"])

        srv: Dict[str, Any] = data.get("server", {})
        if "name" in srv:
            self.server_name = str(srv["name"])
        if "transport" in srv:
            self.transport = str(srv["transport"]).lower()
        if "host" in srv:
            self.host = str(srv["host"])
        if "port" in srv:
            port = _parse_number(srv["port"], name="server.port", cast=int)
            if port is not None:
                self.port = port

        retry: Dict[str, Any] = data.get("retry", {})
        self._apply_retry_settings(retry, source=f"{path}: [retry]")

        http: Dict[str, Any] = data.get("http", {})
        if "timeout" in http:
            timeout = _parse_number(http["timeout"], name="http.timeout")
            if timeout is not None:
                self.timeout = timeout

        tools_cfg: Dict[str, Any] = data.get("tools", {})
        if "disabled_tools" in tools_cfg:
            self.disabled_tools = _parse_csv(tools_cfg["disabled_tools"])

    def _apply_retry_settings(self, values: Dict[str, Any], *, source: str) -> None:
        if "max_retries" in values:
            parsed = _parse_number(values["max_retries"], name=f"{source} max_retries", cast=int)
            if parsed is not None:
                self.max_retries = parsed
        for key in ("base_delay", "max_delay"):
            if key in values:
                parsed = _parse_number(values[key], name=f"{source} {key}")
                if parsed is not None:
                    setattr(self, key, parsed)

    def _load_env(self) -> None:
        """Load configuration from environment variables."""
        if bot_token := os.environ.get("SLACK_BOT_TOKEN"):
            self.bot_token = bot_token
        if user_token := os.environ.get("SLACK_USER_TOKEN"):
            self.user_token = user_token
        if team_id := os.environ.get("SLACK_TEAM_ID"):
            self.team_id = team_id
        if channel_ids := os.environ.get("SLACK_CHANNEL_IDS"):
            self.channel_ids = _parse_csv(channel_ids)

        if auth_token := os.environ.get("AUTH_TOKEN"):
            self.auth_token = auth_token

        if level := os.environ.get("SLACK_MCP_LOG_LEVEL"):
            self.log_level = level.upper()
        if structured := os.environ.get("SLACK_MCP_STRUCTURED_LOGGING"):
            parsed_bool = _try_parse_bool(structured)
            if parsed_bool is None:
                self._add_startup_warning(
                    f"Ignoring SLACK_MCP_STRUCTURED_LOGGING={structured!r}: expected a boolean"
                )
            else:
                self.structured_logging = parsed_bool

        retry_env = {
            key: os.environ[env_var]
            for key, env_var in (
                ("max_retries", "SLACK_MCP_MAX_RETRIES"),
                ("base_delay", "SLACK_MCP_BASE_DELAY"),
                ("max_delay", "SLACK_MCP_MAX_DELAY"),
            )
            if os.environ.get(env_var)
        }
        self._apply_retry_settings(retry_env, source="environment")

        if timeout := os.environ.get("SLACK_MCP_TIMEOUT"):
            parsed_timeout = _parse_number(timeout, name="SLACK_MCP_TIMEOUT")
            if parsed_timeout is not None:
                self.timeout = parsed_timeout

        if disabled := os.environ.get("SLACK_MCP_DISABLED_TOOLS"):
            self.disabled_tools = _parse_csv(disabled)

    def _validate_startup_configuration(self) -> None:
        """Record warnings for settings that can be corrected at runtime."""
        if self.transport not in _VALID_TRANSPORTS:
            self._add_startup_warning(
                f"Unknown transport {self.transport!r}; falling back to 'stdio'"
            )
            self.transport = "stdio"
        if self.user_token and self.bot_token:
            self._add_startup_warning(
                "Both SLACK_USER_TOKEN and SLACK_BOT_TOKEN are set; using user token"
            )

    def validate(self) -> List[str]:
        """Return the list of problems that prevent the server from starting."""
        errors: List[str] = []
        if not self.team_id:
            errors.append("Please set SLACK_TEAM_ID environment variable")
        if not self.bot_token and not self.user_token:
            errors.append(
                "Please set either SLACK_BOT_TOKEN or SLACK_USER_TOKEN environment variable"
            )
        if not 1 <= self.port <= 65535:
            errors.append(f"port must be between 1 and 65535, got {self.port}")
        if self.timeout <= 0:
            errors.append(f"timeout must be > 0, got {self.timeout}")
        try:
            self.retry_config()  # type: ignore[attr-defined]
        except ValueError as e:
            errors.append(f"Invalid retry configuration: {e}")
        return errors
