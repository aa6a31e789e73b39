# Core data models for secretguard
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Protocol, runtime_checkable

# ABOUTME: Identifiers of the MCP client applications we know how to protect
McpClient = Literal[
    "claude-desktop",
    "cursor",
    "claude-code",
    "vscode",
    "windsurf",
]


@dataclass(frozen=True)
class ServerEntry:
    """Immutable snapshot of one MCP server declared in a client config.

    ABOUTME: Uses frozen dataclass so classification never mutates the parse result
    ABOUTME: The live definition inside ConfigFile.raw is what the rewriter edits
    """
    name: str
    command: str = ""
    args: list[str] = field(default_factory=list)
    env: dict[str, str] = field(default_factory=dict)
    already_protected: bool = False


@dataclass
class ConfigFile:
    """One client's MCP configuration document as found on disk.

    ABOUTME: Read fresh on every discovery pass, never cached
    ABOUTME: Keeps the raw parsed document so unrelated keys round-trip untouched
    """
    client: McpClient
    file_path: Path
    servers: list[ServerEntry]
    raw: dict[str, Any]
    servers_key: str = "mcpServers"


@dataclass
class ClassifiedEnv:
    """Partition of a server's environment into secrets and non-secrets.

    ABOUTME: Every input key lands in exactly one of the two mappings
    """
    secrets: dict[str, str] = field(default_factory=dict)
    non_secrets: dict[str, str] = field(default_factory=dict)


@runtime_checkable
class ClientAdapter(Protocol):
    """Protocol for client-specific config locators.

    ABOUTME: Defines interface all client adapters must implement
    ABOUTME: Uses @runtime_checkable for isinstance() support
    """

    @property
    def client(self) -> McpClient:
        """Stable client identifier used in vault keys and wrapper args."""
        ...

    @property
    def name(self) -> str:
        """Human-readable client name."""
        ...

    def candidate_paths(self, home: Path) -> list[Path]:
        """Config files this client may own, in search order."""
        ...

    def load(self, home: Path, wrapper_path: str | None = None) -> list[ConfigFile]:
        """Parse every existing MCP config file of this client."""
        ...
