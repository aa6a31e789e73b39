# Windsurf client adapter
from pathlib import Path

from secretguard.clients.base import JsonClientAdapter


class WindsurfAdapter(JsonClientAdapter):
    """Adapter for Windsurf (~/.windsurf/mcp.json)."""

    client = "windsurf"
    name = "Windsurf"
    relative_paths = (Path(".windsurf") / "mcp.json",)
