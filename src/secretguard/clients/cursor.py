# Cursor client adapter
from pathlib import Path

from secretguard.clients.base import JsonClientAdapter


class CursorAdapter(JsonClientAdapter):
    """Adapter for Cursor (~/.cursor/mcp.json)."""

    client = "cursor"
    name = "Cursor"
    relative_paths = (Path(".cursor") / "mcp.json",)
