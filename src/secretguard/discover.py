# MCP config discovery across supported clients
import logging
from pathlib import Path

from secretguard.clients import get_all_clients
from secretguard.config import get_home
from secretguard.models import ConfigFile

logger = logging.getLogger(__name__)


def discover_mcp_configs(
    home: Path | str | None = None,
    wrapper_path: str | None = None,
) -> list[ConfigFile]:
    """Find and parse every MCP configuration file under a home directory.

    ABOUTME: Searches Claude Desktop, Cursor, Claude Code, VS Code and Windsurf
    ABOUTME: Missing, malformed and non-MCP files are skipped, never raised
    ABOUTME: Always reads from disk, nothing is cached between calls

    Args:
        home: Home directory to search (defaults to the real home)
        wrapper_path: Wrapper path of the current run, so servers already
            pointing at it are flagged as protected

    Returns:
        Discovered config files in client registry order (possibly empty)

    Examples:
        >>> configs = discover_mcp_configs()
        >>> [(c.client, len(c.servers)) for c in configs]
        [('cursor', 2), ('claude-code', 1)]
    """
    home_path = Path(home) if home is not None else get_home()
    results: list[ConfigFile] = []

    for adapter in get_all_clients():
        found = adapter.load(home_path, wrapper_path)
        for config in found:
            logger.debug(
                f"Found {adapter.name} config {config.file_path} "
                f"with {len(config.servers)} server(s)"
            )
        results.extend(found)

    return results
