"""Command-line entry point for slack-mcp."""

import logging
import secrets
import sys
from typing import Optional, Tuple

import click

from slack_mcp import __version__
from slack_mcp.client import TokenType
from slack_mcp.config import ServerConfig, set_config
from slack_mcp.server import build_client, create_server
from slack_mcp.transports import run_http_server, run_stdio_server

logger = logging.getLogger("slack_mcp.cli")


def resolve_auth_token(cli_token: Optional[str], config: ServerConfig) -> Tuple[str, str]:
    """Pick the HTTP bearer token and report where it came from.

    ``--token`` wins over ``AUTH_TOKEN``; when neither is set a random token
    is generated.
    """
    if cli_token:
        return cli_token, "cli"
    if config.auth_token:
        return config.auth_token, "env"
    return secrets.token_urlsafe(32), "generated"


@click.command("slack-mcp", context_settings={"help_option_names": ["-h", "--help"]})
@click.option(
    "--transport",
    type=click.Choice(["stdio", "http"]),
    default=None,
    help="Transport type (default: stdio).",
)
@click.option(
    "--port",
    type=click.IntRange(1, 65535),
    default=None,
    help="Port for the Streamable HTTP transport (default: 3000).",
)
@click.option(
    "--token",
    default=None,
    help="Bearer token for HTTP authorization (falls back to AUTH_TOKEN).",
)
@click.option(
    "--config",
    "config_file",
    type=click.Path(dir_okay=False),
    default=None,
    help="Path to a TOML config file (overrides SLACK_MCP_CONFIG_FILE).",
)
@click.version_option(version=__version__, prog_name="slack-mcp")
def main(
    transport: Optional[str],
    port: Optional[int],
    token: Optional[str],
    config_file: Optional[str],
) -> None:
    """Slack MCP server.

    \b
    Environment:
      SLACK_BOT_TOKEN    Bot token (xoxb-...), messages appear as the bot app
      SLACK_USER_TOKEN   User token (xoxp-...), messages appear as you;
                         takes precedence over the bot token
      SLACK_TEAM_ID      Workspace/team ID (required)
      SLACK_CHANNEL_IDS  Optional comma-separated channel allow-list
      AUTH_TOKEN         HTTP bearer token when --token is not given
    """
    config = ServerConfig.from_env(config_file)
    if transport:
        config.transport = transport
    if port:
        config.port = port
    config.setup_logging()
    set_config(config)

    for warning in config.startup_warnings:
        logger.warning(warning)

    errors = config.validate()
    if errors:
        for error in errors:
            logger.error(error)
            click.echo(f"Error: {error}", err=True)
        sys.exit(1)

    client = build_client(config)
    if client.token_type is TokenType.USER:
        logger.info("Running in USER mode - messages will appear as you")
    else:
        logger.info("Running in BOT mode - messages will appear as the bot app")

    mcp = create_server(config, client)

    if config.transport == "http":
        auth_token, source = resolve_auth_token(token, config)
        if source == "generated":
            logger.warning("Generated auth token: %s", auth_token)
            logger.warning("Use this token in the Authorization header: Bearer %s", auth_token)
        elif source == "cli":
            logger.info("Using provided auth token for authorization")
        else:
            logger.info("Using auth token from AUTH_TOKEN environment variable")
        run_http_server(mcp, config, auth_token)
    else:
        run_stdio_server(mcp)


if __name__ == "__main__":
    main()
