# VS Code client adapter
from pathlib import Path

from secretguard.clients.base import JsonClientAdapter


class VSCodeAdapter(JsonClientAdapter):
    """Adapter for VS Code (~/.vscode/mcp.json)."""

    client = "vscode"
    name = "VS Code"
    relative_paths = (Path(".vscode") / "mcp.json",)
