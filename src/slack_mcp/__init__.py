"""slack-mcp: Model Context Protocol server for the Slack Web API."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_package_version

try:
    __version__ = _get_package_version("slack-mcp")
except PackageNotFoundError:
    __version__ = "0.1.0"

__all__ = ["__version__"]
