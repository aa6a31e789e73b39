# secretguard - MCP secret protection
# ABOUTME: Version information
__version__ = "0.1.0"

# ABOUTME: Export core data models and pipeline entry points
from secretguard.classify import classify_env_vars
from secretguard.config import Settings, resolve_settings, resolve_wrapper_path
from secretguard.discover import discover_mcp_configs
from secretguard.models import ClassifiedEnv, ConfigFile, McpClient, ServerEntry
from secretguard.protect import ProtectReport, protect_mcp, scan_status, unprotect_mcp
from secretguard.rewrite import RewriteResult, restore_config, rewrite_config
from secretguard.store import VaultCorruptedError
from secretguard.utils import InvalidNameError
from secretguard.vault import McpVault, VaultEntrySummary

__all__ = [
    "__version__",
    "ClassifiedEnv",
    "ConfigFile",
    "McpClient",
    "ServerEntry",
    "Settings",
    "resolve_settings",
    "resolve_wrapper_path",
    "classify_env_vars",
    "discover_mcp_configs",
    "McpVault",
    "VaultEntrySummary",
    "VaultCorruptedError",
    "InvalidNameError",
    "RewriteResult",
    "rewrite_config",
    "restore_config",
    "ProtectReport",
    "protect_mcp",
    "scan_status",
    "unprotect_mcp",
]
