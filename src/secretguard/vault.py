# ABOUTME: MCP vault: encrypted secret storage namespaced by client and server.
# ABOUTME: Keys are mcp/{client}/{server}/{ENV_VAR} inside one LocalStore.
import logging
from dataclasses import dataclass
from pathlib import Path

from secretguard.config import Settings
from secretguard.store import LocalStore
from secretguard.utils.validation import validate_name

logger = logging.getLogger(__name__)

MCP_PREFIX = "mcp"


@dataclass(frozen=True)
class VaultEntrySummary:
    """Number of stored keys for one client/server pair."""
    client: str
    server: str
    key_count: int


def _server_prefix(client: str, server: str) -> str:
    validate_name("client", client)
    validate_name("server", server)
    return f"{MCP_PREFIX}/{client}/{server}"


class McpVault:
    """Per-server secret storage for wrapped MCP servers.

    ABOUTME: Every public method validates client/server names first
    ABOUTME: Raises InvalidNameError for names outside [A-Za-z0-9_-]
    """

    def __init__(self, store_dir: Path, key_material: str) -> None:
        self.store = LocalStore(store_dir, key_material)

    @classmethod
    def from_settings(cls, settings: Settings) -> "McpVault":
        """Open the vault described by resolved settings."""
        return cls(settings.vault_dir, settings.vault_key)

    def store_server_secrets(self, client: str, server: str, secrets: dict[str, str]) -> None:
        """Store secrets for one MCP server.

        ABOUTME: Additive: keys stored earlier for this server but absent here are kept
        ABOUTME: Existing keys present in secrets are overwritten

        Args:
            client: Client identifier, e.g. "cursor"
            server: Server name from the client config
            secrets: Mapping of env var name to plaintext value
        """
        prefix = _server_prefix(client, server)
        self.store.store_many({f"{prefix}/{env_key}": value for env_key, value in secrets.items()})

    def get_server_secrets(self, client: str, server: str, strict: bool = False) -> dict[str, str]:
        """Return env var name -> value for every secret stored for a server.

        Args:
            client: Client identifier
            server: Server name
            strict: Raise VaultCorruptedError if the store can't be decrypted
                instead of returning an empty mapping

        Returns:
            Mapping of env var names to values (empty if none stored)
        """
        prefix = _server_prefix(client, server)
        raw = self.store.resolve(prefix, strict=strict)

        result: dict[str, str] = {}
        for full_key, value in raw.items():
            env_key = full_key[len(prefix) + 1:]
            if env_key:
                result[env_key] = value
        return result

    def remove_server_secrets(self, client: str, server: str) -> int:
        """Remove all secrets for a server.

        Returns:
            Number of keys removed
        """
        prefix = _server_prefix(client, server)
        existing = self.store.resolve(prefix)
        removed = self.store.delete_many(list(existing))
        if removed:
            logger.info(f"Removed {removed} secret(s) for {client}/{server}")
        return removed

    def list_entries(self) -> list[VaultEntrySummary]:
        """List stored client/server pairs with their key counts.

        ABOUTME: Ignores keys that don't follow mcp/{client}/{server}/{key}
        ABOUTME: Order follows first appearance in the store
        """
        counts: dict[tuple[str, str], int] = {}
        for full_key in self.store.resolve(MCP_PREFIX):
            parts = full_key.split("/", 3)
            if len(parts) < 4 or not parts[3]:
                continue
            group = (parts[1], parts[2])
            counts[group] = counts.get(group, 0) + 1

        return [
            VaultEntrySummary(client=client, server=server, key_count=count)
            for (client, server), count in counts.items()
        ]
