# ABOUTME: Rewrites MCP configs so servers launch through the secret-injecting wrapper.
# ABOUTME: Backs up the original bytes first and can restore them later.
import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from secretguard.clients.base import find_servers_key
from secretguard.utils.backup import create_backup, get_backup_path
from secretguard.utils.files import atomic_write_bytes, current_mode
from secretguard.utils.validation import is_protected_command, is_safe_name, validate_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RewriteResult:
    """Outcome of rewriting one config file.

    ABOUTME: backup_path is None when nothing was rewritten
    """
    servers_rewritten: int
    backup_path: Path | None = None


def wrapper_args(server: str, client: str, command: str, args: list[str]) -> list[str]:
    """Build the wrapper argument list that re-launches the original command."""
    return ["--server", server, "--client", client, "--", command, *args]


def _command_of(definition: dict[str, Any]) -> str:
    command = definition.get("command")
    return command if isinstance(command, str) else ""


def rewrite_config(
    config_path: Path | str,
    client: str,
    server_secrets: dict[str, dict[str, str]],
    wrapper_path: str,
    backup_dir: Path | str,
) -> RewriteResult:
    """Route a config's secret-bearing servers through the wrapper.

    ABOUTME: Skips servers already protected, without secrets, or with unsafe names
    ABOUTME: Removes only the protected env keys, everything else is left untouched
    ABOUTME: Zero rewrites means no backup, no manifest entry, file unchanged
    ABOUTME: A symlinked config is edited through the link, its target gets the new content
    ABOUTME: Every rewrite backs up the bytes it is about to replace

    Args:
        config_path: MCP config file to rewrite
        client: Client identifier embedded in the wrapper args
        server_secrets: Server name -> {env var: value} to protect
        wrapper_path: Executable the rewritten servers will launch
        backup_dir: Directory for backups and the manifest

    Returns:
        RewriteResult with the number of servers rewritten and the backup path

    Raises:
        InvalidNameError: If client is not a safe name
        ValueError: If the file is not valid JSON
        OSError: If reading or writing fails
    """
    validate_name("client", client)
    config_path = Path(os.path.abspath(config_path))
    target = config_path.resolve()

    content = target.read_bytes()
    config = json.loads(content.decode("utf-8"))

    servers_key = find_servers_key(config) if isinstance(config, dict) else None
    if servers_key is None:
        return RewriteResult(servers_rewritten=0)

    servers: dict[str, Any] = config[servers_key]

    rewritten = 0
    for name, definition in servers.items():
        if not isinstance(definition, dict):
            continue

        command = _command_of(definition)
        if is_protected_command(command, wrapper_path):
            continue
        if not is_safe_name(name):
            logger.warning(f"Not rewriting server with unsafe name {name!r} in {config_path}")
            continue

        secrets = server_secrets.get(name)
        if not secrets:
            continue

        raw_args = definition.get("args")
        args = [a for a in raw_args if isinstance(a, str)] if isinstance(raw_args, list) else []

        raw_env = definition.get("env")
        env = dict(raw_env) if isinstance(raw_env, dict) else {}
        for secret_key in secrets:
            env.pop(secret_key, None)

        definition["command"] = wrapper_path
        definition["args"] = wrapper_args(name, client, command, args)
        definition["env"] = env
        rewritten += 1

    if rewritten == 0:
        return RewriteResult(servers_rewritten=0)

    backup_path = create_backup(config_path, content, Path(backup_dir))

    new_content = json.dumps(config, indent=2, ensure_ascii=False) + "\n"
    atomic_write_bytes(target, new_content.encode("utf-8"), mode=current_mode(target))
    logger.info(f"Rewrote {rewritten} server(s) in {config_path}")

    return RewriteResult(servers_rewritten=rewritten, backup_path=backup_path)


def restore_config(config_path: Path | str, backup_dir: Path | str) -> bool:
    """Restore a config file from its recorded backup.

    ABOUTME: Returns False if there is no manifest entry, no backup file,
    ABOUTME: or the backup is not valid JSON; the config is then left untouched
    ABOUTME: Keeps the manifest entry so repeated restores keep working
    ABOUTME: Writes through a symlinked config and keeps the file's permission bits

    Args:
        config_path: Config file to restore
        backup_dir: Directory containing backups and manifest.json

    Returns:
        True if the config was restored
    """
    config_path = Path(os.path.abspath(config_path))
    backup_path = get_backup_path(config_path, Path(backup_dir))

    if backup_path is None or not backup_path.is_file():
        logger.debug(f"No backup recorded for {config_path}")
        return False

    try:
        content = backup_path.read_bytes()
        json.loads(content.decode("utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Refusing to restore {config_path} from corrupt backup {backup_path}: {e}")
        return False

    target = config_path.resolve()
    atomic_write_bytes(target, content, mode=current_mode(target))
    logger.info(f"Restored {config_path} from {backup_path}")
    return True
