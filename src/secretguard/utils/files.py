# ABOUTME: Private file helpers: owner-only directories and atomic writes
# ABOUTME: Every file secretguard writes goes through atomic_write_bytes()
import logging
import os
import stat
import tempfile
from pathlib import Path

logger = logging.getLogger(__name__)

PRIVATE_DIR_MODE = 0o700
PRIVATE_FILE_MODE = 0o600


def ensure_private_dir(path: Path) -> Path:
    """Create a directory (and parents) restricted to the owner.

    ABOUTME: Existing directories keep their mode, only new ones get 0700
    """
    path.mkdir(parents=True, exist_ok=True, mode=PRIVATE_DIR_MODE)
    return path


def current_mode(path: Path, default: int = PRIVATE_FILE_MODE) -> int:
    """Return the permission bits of an existing file, or default if it is absent."""
    try:
        return stat.S_IMODE(os.stat(path).st_mode)
    except FileNotFoundError:
        return default


def atomic_write_bytes(path: Path, data: bytes, mode: int = PRIVATE_FILE_MODE) -> None:
    """Replace a file's content in one step.

    ABOUTME: Writes a temp file beside the target, fsyncs, then os.replace()s it
    ABOUTME: Readers see either the old or the new content, never a partial write

    Args:
        path: Destination file (its parent must exist)
        data: Full new content
        mode: Permission bits applied before the rename

    Raises:
        OSError: If the write or the rename fails (the temp file is removed)
    """
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(tmp_name, mode)
        os.replace(tmp_name, path)
    except BaseException:
        try:
            os.unlink(tmp_name)
        except OSError:
            pass
        raise
    logger.debug(f"Wrote {len(data)} bytes to {path}")
