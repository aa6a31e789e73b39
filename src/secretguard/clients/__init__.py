# Client adapter registry
from secretguard.clients.claude_code import ClaudeCodeAdapter
from secretguard.clients.claude_desktop import ClaudeDesktopAdapter
from secretguard.clients.cursor import CursorAdapter
from secretguard.clients.vscode import VSCodeAdapter
from secretguard.clients.windsurf import WindsurfAdapter
from secretguard.models import ClientAdapter

# Registry of all supported clients, in discovery order
ALL_CLIENTS: list[type[ClientAdapter]] = [
    ClaudeDesktopAdapter,
    CursorAdapter,
    ClaudeCodeAdapter,
    VSCodeAdapter,
    WindsurfAdapter,
]

__all__ = [
    "ClientAdapter",
    "ClaudeDesktopAdapter",
    "CursorAdapter",
    "ClaudeCodeAdapter",
    "VSCodeAdapter",
    "WindsurfAdapter",
    "ALL_CLIENTS",
    "get_all_clients",
]


def get_all_clients() -> list[ClientAdapter]:
    """Instantiate and return all client adapters.

    ABOUTME: Creates instances of all registered adapters
    ABOUTME: Returns list for easy iteration
    """
    return [client_cls() for client_cls in ALL_CLIENTS]
