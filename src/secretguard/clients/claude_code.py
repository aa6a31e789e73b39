# Claude Code client adapter
from pathlib import Path

from secretguard.clients.base import JsonClientAdapter


class ClaudeCodeAdapter(JsonClientAdapter):
    """Adapter for Claude Code (~/.claude/settings.json and settings.local.json).

    ABOUTME: Both settings files may declare servers, each is reported separately
    """

    client = "claude-code"
    name = "Claude Code"
    relative_paths = (
        Path(".claude") / "settings.json",
        Path(".claude") / "settings.local.json",
    )
