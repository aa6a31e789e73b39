# Environment resolution for secretguard
import os
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path

# ABOUTME: Canonical executable name of the secret-injecting wrapper
WRAPPER_NAME = "secretguard-mcp"

# ABOUTME: Data directory in user's home holding the vault and config backups
DATA_DIR_NAME = ".secretguard"
VAULT_DIR_NAME = "mcp-vault"
BACKUP_DIR_NAME = "mcp-backups"


@dataclass(frozen=True)
class Settings:
    """Resolved locations and key material for one secretguard run.

    ABOUTME: Passed explicitly into the vault, orchestrator and wrapper
    ABOUTME: Built only by resolve_settings() so every entry point agrees on defaults
    """
    home: Path
    data_dir: Path
    vault_dir: Path
    backup_dir: Path
    vault_key: str


def get_home() -> Path:
    """Return the current user's home directory.

    ABOUTME: Honors $HOME (and %USERPROFILE% on Windows) via Path.home()
    """
    return Path.home()


def default_vault_key(home: Path) -> str:
    """Build the default key material for the local vault.

    ABOUTME: Derived from the home path and the login name
    ABOUTME: Deters casual disclosure only, anyone who can read these inputs can rebuild it
    """
    user = os.environ.get("USER") or os.environ.get("USERNAME") or "default"
    return f"{home}-secretguard-{user}"


def resolve_settings(
    home: Path | str | None = None,
    data_dir: Path | str | None = None,
    vault_dir: Path | str | None = None,
    vault_key: str | None = None,
) -> Settings:
    """Compute the settings for a run, applying overrides over defaults.

    ABOUTME: Defaults: data dir ~/.secretguard, vault in mcp-vault/, backups in mcp-backups/
    ABOUTME: The wrapper calls this with no overrides and lands on the orchestrator's vault

    Args:
        home: Home directory override (defaults to the real home)
        data_dir: Data directory override (defaults to {home}/.secretguard)
        vault_dir: Vault directory override (defaults to {data_dir}/mcp-vault)
        vault_key: Key material override (defaults to default_vault_key(home))

    Returns:
        Frozen Settings instance

    Raises:
        ValueError: If home is given but not absolute

    Examples:
        >>> settings = resolve_settings(home="/home/alice")
        >>> settings.vault_dir
        PosixPath('/home/alice/.secretguard/mcp-vault')
    """
    if home is not None and not Path(home).is_absolute():
        raise ValueError(f"home must be an absolute path, got: {home!r}")

    home_path = Path(home) if home is not None else get_home()
    data_path = Path(data_dir) if data_dir is not None else home_path / DATA_DIR_NAME

    return Settings(
        home=home_path,
        data_dir=data_path,
        vault_dir=Path(vault_dir) if vault_dir is not None else data_path / VAULT_DIR_NAME,
        backup_dir=data_path / BACKUP_DIR_NAME,
        vault_key=vault_key if vault_key is not None else default_vault_key(home_path),
    )


def resolve_wrapper_path() -> str:
    """Locate the installed wrapper executable.

    ABOUTME: Prefers the console script on PATH
    ABOUTME: Falls back to the scripts directory next to the running interpreter

    Returns:
        Absolute path to the secretguard-mcp executable
    """
    found = shutil.which(WRAPPER_NAME)
    if found:
        return str(Path(found).absolute())
    return str(Path(sys.executable).absolute().parent / WRAPPER_NAME)
