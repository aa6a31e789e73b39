# ABOUTME: Backup utilities for MCP configuration files.
# ABOUTME: One byte-exact backup per config, indexed by a manifest.json in the backup dir.
import hashlib
import json
import logging
from pathlib import Path

from secretguard.utils.files import atomic_write_bytes, ensure_private_dir

logger = logging.getLogger(__name__)

MANIFEST_NAME = "manifest.json"


def backup_filename(config_path: Path) -> str:
    """Derive the stable backup filename for a config file.

    ABOUTME: First 12 hex chars of SHA-256 over the absolute path, plus .json
    ABOUTME: Same config always maps to the same backup file

    Args:
        config_path: Absolute path of the config being backed up

    Returns:
        Backup file name (no directory)

    Examples:
        >>> backup_filename(Path("/home/alice/.cursor/mcp.json"))  # doctest: +SKIP
        '3f1c2a9b7d4e.json'
    """
    digest = hashlib.sha256(str(config_path).encode("utf-8")).hexdigest()
    return f"{digest[:12]}.json"


def read_manifest(backup_dir: Path) -> dict[str, str]:
    """Read the config-path -> backup-path manifest.

    ABOUTME: Returns empty dict if the manifest is missing or unreadable
    ABOUTME: Drops entries whose key or value is not a string
    """
    manifest_path = backup_dir / MANIFEST_NAME
    if not manifest_path.exists():
        return {}

    try:
        data = json.loads(manifest_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable backup manifest {manifest_path}: {e}")
        return {}

    if not isinstance(data, dict):
        return {}
    return {k: v for k, v in data.items() if isinstance(k, str) and isinstance(v, str)}


def write_manifest(backup_dir: Path, manifest: dict[str, str]) -> None:
    """Write the manifest with owner-only permissions."""
    content = json.dumps(manifest, indent=2) + "\n"
    atomic_write_bytes(backup_dir / MANIFEST_NAME, content.encode("utf-8"))


def get_backup_path(config_path: Path, backup_dir: Path) -> Path | None:
    """Look up the recorded backup for a config file.

    Returns:
        Backup path from the manifest, or None if there is no entry
    """
    recorded = read_manifest(backup_dir).get(str(config_path))
    return Path(recorded) if recorded else None


def create_backup(config_path: Path, content: bytes, backup_dir: Path) -> Path:
    """Save the pre-mutation bytes of a config file and record them in the manifest.

    ABOUTME: Creates backup_dir with 0700 if it doesn't exist
    ABOUTME: Backup and manifest are written 0600

    Args:
        config_path: Absolute path of the config about to be rewritten
        content: Exact bytes currently on disk for config_path
        backup_dir: Directory holding backups and manifest.json

    Returns:
        Path to the backup file

    Raises:
        OSError: If the backup or the manifest cannot be written
    """
    ensure_private_dir(backup_dir)

    backup_path = backup_dir / backup_filename(config_path)
    atomic_write_bytes(backup_path, content)
    logger.info(f"Backed up {config_path} to {backup_path}")

    manifest = read_manifest(backup_dir)
    manifest[str(config_path)] = str(backup_path)
    write_manifest(backup_dir, manifest)

    return backup_path
