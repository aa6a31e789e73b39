# Claude Desktop client adapter
from pathlib import Path

from secretguard.clients.base import JsonClientAdapter


class ClaudeDesktopAdapter(JsonClientAdapter):
    """Adapter for Claude Desktop (claude_desktop_config.json).

    ABOUTME: Checks both the macOS and the Linux location on every platform
    ABOUTME: so a home override (tests, WSL, synced dotfiles) finds either one
    """

    client = "claude-desktop"
    name = "Claude Desktop"
    relative_paths = (
        Path("Library") / "Application Support" / "Claude" / "claude_desktop_config.json",
        Path(".config") / "Claude" / "claude_desktop_config.json",
    )
