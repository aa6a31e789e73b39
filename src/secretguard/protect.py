# Protection orchestration for secretguard
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from secretguard.classify import classify_env_vars
from secretguard.clients.base import parse_config
from secretguard.config import resolve_settings
from secretguard.discover import discover_mcp_configs
from secretguard.rewrite import restore_config, rewrite_config
from secretguard.vault import McpVault

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProtectedServer:
    """One server whose secrets were moved into the vault."""
    client: str
    server: str
    secret_keys: list[str]


@dataclass
class ProtectReport:
    """Report from a protection pass.

    ABOUTME: Aggregate counts for an external presentation layer
    ABOUTME: Errors are non-fatal, the pass continues past them
    """
    clients_scanned: int = 0
    secrets_found: int = 0
    servers_protected: int = 0
    servers: list[ProtectedServer] = field(default_factory=list)
    already_protected: int = 0
    errors: list[str] = field(default_factory=list)

    def add_server(self, client: str, server: str, secrets: dict[str, str]) -> None:
        """Record a server whose secrets were stored."""
        self.secrets_found += len(secrets)
        self.servers.append(ProtectedServer(client=client, server=server, secret_keys=list(secrets)))

    def add_error(self, error: str) -> None:
        """Record an error that occurred during the pass."""
        self.errors.append(error)


ServerState = Literal["protected", "exposed", "clean"]


@dataclass(frozen=True)
class ServerStatus:
    name: str
    state: ServerState
    secret_count: int = 0


@dataclass
class ConfigStatus:
    client: str
    file_path: Path
    servers: list[ServerStatus] = field(default_factory=list)


@dataclass
class UnprotectReport:
    """Report from restoring original configs.

    ABOUTME: purged counts vault keys deleted when purge_secrets was requested
    ABOUTME: still_protected lists client/server pairs the restored files still wrap
    """
    restored: list[Path] = field(default_factory=list)
    purged: int = 0
    still_protected: list[str] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)


def protect_mcp(
    wrapper_path: str,
    home: Path | str | None = None,
    data_dir: Path | str | None = None,
) -> ProtectReport:
    """Discover, classify, encrypt and rewrite in one pass.

    ABOUTME: Already-protected servers are skipped before classification,
    ABOUTME: so a second run does no vault writes and no file rewrites
    ABOUTME: A failing server or file is recorded in the report, others continue

    Args:
        wrapper_path: Absolute path of the secretguard-mcp wrapper
        home: Home directory override (must be absolute)
        data_dir: Data directory override (default {home}/.secretguard)

    Returns:
        ProtectReport summarising the pass

    Raises:
        ValueError: If home is not absolute

    Examples:
        >>> report = protect_mcp(resolve_wrapper_path())
        >>> print(f"{report.secrets_found} secret(s) across {report.servers_protected} server(s)")
        3 secret(s) across 2 server(s)
    """
    settings = resolve_settings(home=home, data_dir=data_dir)
    vault = McpVault.from_settings(settings)

    configs = discover_mcp_configs(settings.home, wrapper_path=wrapper_path)
    report = ProtectReport(clients_scanned=len(configs))

    for config in configs:
        server_secrets: dict[str, dict[str, str]] = {}

        for server in config.servers:
            if server.already_protected:
                report.already_protected += 1
                continue

            secrets = classify_env_vars(server.env).secrets
            if not secrets:
                continue

            try:
                vault.store_server_secrets(config.client, server.name, secrets)
            except (ValueError, OSError) as e:
                report.add_error(f"{config.client}/{server.name}: {e}")
                continue

            server_secrets[server.name] = secrets
            report.add_server(config.client, server.name, secrets)

        if not server_secrets:
            continue

        try:
            result = rewrite_config(
                config.file_path,
                config.client,
                server_secrets,
                wrapper_path,
                settings.backup_dir,
            )
        except (ValueError, OSError) as e:
            # Secrets stay in the vault, the next run retries the rewrite
            report.add_error(f"{config.file_path}: {e}")
            continue

        report.servers_protected += result.servers_rewritten

    return report


def scan_status(
    home: Path | str | None = None,
    wrapper_path: str | None = None,
) -> list[ConfigStatus]:
    """Report per-server protection state without changing anything.

    ABOUTME: protected = launches through the wrapper
    ABOUTME: exposed = plaintext secrets still in env, clean = no secrets
    """
    settings = resolve_settings(home=home)
    statuses: list[ConfigStatus] = []

    for config in discover_mcp_configs(settings.home, wrapper_path=wrapper_path):
        status = ConfigStatus(client=config.client, file_path=config.file_path)
        for server in config.servers:
            if server.already_protected:
                status.servers.append(ServerStatus(server.name, "protected"))
                continue
            count = len(classify_env_vars(server.env).secrets)
            state: ServerState = "exposed" if count else "clean"
            status.servers.append(ServerStatus(server.name, state, count))
        statuses.append(status)

    return statuses


def unprotect_mcp(
    home: Path | str | None = None,
    data_dir: Path | str | None = None,
    purge_secrets: bool = False,
    wrapper_path: str | None = None,
) -> UnprotectReport:
    """Restore every discovered config that has a backup.

    ABOUTME: Restores are idempotent, the backups and manifest are kept
    ABOUTME: A backup taken by a later protect run can still wrap servers from an earlier one;
    ABOUTME: those stay wrapped and keep their vault entries even with purge_secrets

    Args:
        home: Home directory override (must be absolute)
        data_dir: Data directory override
        purge_secrets: Also remove the restored servers' secrets from the vault
        wrapper_path: Wrapper path used when protecting, to recognise wrapped servers

    Returns:
        UnprotectReport listing restored files
    """
    settings = resolve_settings(home=home, data_dir=data_dir)
    vault = McpVault.from_settings(settings)
    report = UnprotectReport()

    for config in discover_mcp_configs(settings.home, wrapper_path=wrapper_path):
        wrapped = [s.name for s in config.servers if s.already_protected]

        try:
            restored = restore_config(config.file_path, settings.backup_dir)
        except OSError as e:
            report.errors.append(f"{config.file_path}: {e}")
            continue
        if not restored:
            continue

        report.restored.append(config.file_path)

        restored_config = parse_config(config.client, config.file_path, wrapper_path)
        restored_servers = restored_config.servers if restored_config else []
        still_wrapped = {s.name for s in restored_servers if s.already_protected}
        report.still_protected.extend(f"{config.client}/{name}" for name in sorted(still_wrapped))

        if purge_secrets:
            for name in wrapped:
                if name in still_wrapped:
                    continue
                try:
                    report.purged += vault.remove_server_secrets(config.client, name)
                except (ValueError, OSError) as e:
                    report.errors.append(f"{config.client}/{name}: {e}")

    return report
