# ABOUTME: Utility modules for secretguard
# ABOUTME: Exports backup, private-file and name validation helpers

from secretguard.utils.backup import (
    backup_filename,
    create_backup,
    get_backup_path,
    read_manifest,
    write_manifest,
)
from secretguard.utils.files import atomic_write_bytes, current_mode, ensure_private_dir
from secretguard.utils.validation import (
    InvalidNameError,
    is_protected_command,
    is_safe_name,
    validate_name,
)

__all__ = [
    "backup_filename",
    "create_backup",
    "get_backup_path",
    "read_manifest",
    "write_manifest",
    "atomic_write_bytes",
    "current_mode",
    "ensure_private_dir",
    "InvalidNameError",
    "is_protected_command",
    "is_safe_name",
    "validate_name",
]
