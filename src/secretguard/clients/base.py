# Client adapter base utilities
import json
import logging
from pathlib import Path
from typing import Any

from secretguard.models import ConfigFile, McpClient, ServerEntry
from secretguard.utils.validation import is_protected_command

logger = logging.getLogger(__name__)

# ABOUTME: Top-level keys accepted as the servers mapping, in lookup order
SERVERS_KEYS = ("mcpServers", "mcp-servers")


def read_json_file(path: Path) -> dict[str, Any] | None:
    """Read a JSON object from disk.

    ABOUTME: Returns None if the file is missing, unreadable, malformed,
    ABOUTME: or its root is not a JSON object (never raises for bad input)
    """
    try:
        with open(path, encoding="utf-8") as f:
            result = json.load(f)
    except FileNotFoundError:
        return None
    except (OSError, ValueError) as e:
        logger.debug(f"Skipping unreadable config {path}: {e}")
        return None

    if not isinstance(result, dict):
        logger.debug(f"Skipping {path}: top-level JSON value is not an object")
        return None
    return result


def find_servers_key(raw: dict[str, Any]) -> str | None:
    """Return which accepted servers key holds an object, or None."""
    for key in SERVERS_KEYS:
        if isinstance(raw.get(key), dict):
            return key
    return None


def dict_to_entry(name: str, data: dict[str, Any], wrapper_path: str | None = None) -> ServerEntry:
    """Convert a raw server definition to a ServerEntry.

    ABOUTME: Missing or mistyped fields fall back to empty defaults
    ABOUTME: Non-string args and env values are dropped silently
    """
    command = data.get("command")
    if not isinstance(command, str):
        command = ""

    raw_args = data.get("args")
    args = [a for a in raw_args if isinstance(a, str)] if isinstance(raw_args, list) else []

    raw_env = data.get("env")
    env = (
        {k: v for k, v in raw_env.items() if isinstance(v, str)}
        if isinstance(raw_env, dict)
        else {}
    )

    return ServerEntry(
        name=name,
        command=command,
        args=args,
        env=env,
        already_protected=is_protected_command(command, wrapper_path),
    )


def parse_config(
    client: McpClient,
    path: Path,
    wrapper_path: str | None = None,
) -> ConfigFile | None:
    """Parse one config file into a ConfigFile.

    ABOUTME: Returns None when the file is absent, malformed, or has no servers key
    ABOUTME: Server definitions that aren't objects are skipped
    """
    raw = read_json_file(path)
    if raw is None:
        return None

    servers_key = find_servers_key(raw)
    if servers_key is None:
        logger.debug(f"Skipping {path}: no mcpServers section")
        return None

    servers = [
        dict_to_entry(name, definition, wrapper_path)
        for name, definition in raw[servers_key].items()
        if isinstance(definition, dict)
    ]

    return ConfigFile(
        client=client,
        file_path=path,
        servers=servers,
        raw=raw,
        servers_key=servers_key,
    )


class JsonClientAdapter:
    """Shared behaviour for clients whose MCP config is a JSON file under $HOME.

    ABOUTME: Subclasses only declare client, name and relative_paths
    """

    client: McpClient
    name: str
    relative_paths: tuple[Path, ...] = ()

    def candidate_paths(self, home: Path) -> list[Path]:
        """Absolute candidate config paths under home, in search order."""
        return [home / relative for relative in self.relative_paths]

    def load(self, home: Path, wrapper_path: str | None = None) -> list[ConfigFile]:
        """Parse every existing MCP config of this client.

        ABOUTME: Returns empty list if the client isn't installed
        """
        configs: list[ConfigFile] = []
        for path in self.candidate_paths(home):
            config = parse_config(self.client, path, wrapper_path)
            if config is not None:
                configs.append(config)
        return configs
