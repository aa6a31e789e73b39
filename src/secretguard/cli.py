# CLI interface for secretguard
import argparse
import logging
import sys

from secretguard import __version__
from secretguard.config import resolve_settings, resolve_wrapper_path
from secretguard.protect import protect_mcp, scan_status, unprotect_mcp
from secretguard.vault import McpVault

# ABOUTME: Exit codes
# 0 = success, 1 = partial success, 2 = config error, 3 = fatal
EXIT_SUCCESS = 0
EXIT_PARTIAL = 1
EXIT_CONFIG_ERROR = 2
EXIT_FATAL = 3

CLIENT_NAMES = "Claude Desktop, Cursor, Claude Code, VS Code, Windsurf"

STATUS_MARKERS = {"protected": "+", "exposed": "!", "clean": "*"}


def cmd_protect(args: argparse.Namespace) -> int:
    """Execute protect command.

    ABOUTME: Moves plaintext MCP secrets into the vault and rewrites configs
    ABOUTME: Returns partial-success exit code if any server or file failed
    """
    print(f"secretguard protect v{__version__}")
    print()

    wrapper_path = args.wrapper or resolve_wrapper_path()

    try:
        report = protect_mcp(wrapper_path, home=args.home, data_dir=args.data_dir)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR
    except Exception as e:
        print(f"Fatal error: {e}")
        return EXIT_FATAL

    if report.clients_scanned == 0:
        print("No MCP configurations found.")
        print(f"Looked for configs from: {CLIENT_NAMES}")
        return EXIT_SUCCESS

    print(f"Scanned {report.clients_scanned} config file(s)")
    print()

    for server in report.servers:
        print(f"  + {server.client}/{server.server}")
        for key in server.secret_keys:
            print(f"      {key} (encrypted)")

    if report.errors:
        print()
        for error_msg in report.errors:
            print(f"  Error: {error_msg}")

    print()
    if report.secrets_found == 0:
        print("No plaintext secrets found in MCP configs.")
    else:
        print(
            f"{report.secrets_found} secret(s) encrypted across "
            f"{report.servers_protected} server(s)."
        )
    if report.already_protected:
        print(f"{report.already_protected} server(s) already protected.")

    return EXIT_PARTIAL if report.errors else EXIT_SUCCESS


def cmd_status(args: argparse.Namespace) -> int:
    """Execute status command.

    ABOUTME: Read-only, shows protected / exposed / clean per server
    """
    print(f"secretguard status v{__version__}")
    print()

    try:
        statuses = scan_status(home=args.home, wrapper_path=args.wrapper)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    if not statuses:
        print("No MCP configurations found.")
        return EXIT_SUCCESS

    exposed = 0
    for status in statuses:
        print(f"{status.client} ({status.file_path})")
        for server in status.servers:
            marker = STATUS_MARKERS[server.state]
            if server.state == "exposed":
                exposed += 1
                print(f"  {marker} {server.name}: EXPOSED ({server.secret_count} plaintext secret(s))")
            else:
                print(f"  {marker} {server.name}: {server.state}")
        print()

    if exposed:
        print("Run 'secretguard protect' to encrypt exposed secrets.")
    return EXIT_SUCCESS


def cmd_unprotect(args: argparse.Namespace) -> int:
    """Execute unprotect command.

    ABOUTME: Restores original configs from backups
    """
    print(f"secretguard unprotect v{__version__}")
    print()

    try:
        report = unprotect_mcp(
            home=args.home,
            data_dir=args.data_dir,
            purge_secrets=args.purge,
            wrapper_path=args.wrapper,
        )
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    for path in report.restored:
        print(f"  + Restored: {path}")
    for error_msg in report.errors:
        print(f"  Error: {error_msg}")

    print()
    if not report.restored:
        print("No backups found to restore.")
    else:
        print(f"Restored {len(report.restored)} config(s) to original state.")
    if report.purged:
        print(f"Removed {report.purged} secret(s) from the vault.")
    if report.still_protected:
        print("Still routed through the wrapper (protected before the last backup):")
        for name in report.still_protected:
            print(f"  * {name}")

    return EXIT_PARTIAL if report.errors else EXIT_SUCCESS


def cmd_vault_list(args: argparse.Namespace) -> int:
    """Execute vault-list command.

    ABOUTME: Prints key counts only, never secret values
    """
    try:
        settings = resolve_settings(home=args.home, data_dir=args.data_dir)
    except ValueError as e:
        print(f"Error: {e}")
        return EXIT_CONFIG_ERROR

    entries = McpVault.from_settings(settings).list_entries()
    if not entries:
        print("Vault is empty.")
        return EXIT_SUCCESS

    for entry in entries:
        print(f"  {entry.client}/{entry.server}: {entry.key_count} secret(s)")
    return EXIT_SUCCESS


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="secretguard",
        description="Keep MCP server secrets out of plaintext client configs",
    )
    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"secretguard v{__version__}"
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging"
    )

    # Options shared by every subcommand
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--home",
        help="Home directory to scan (absolute path, default: your home)"
    )
    common.add_argument(
        "--data-dir",
        help="Directory holding the vault and backups (default: ~/.secretguard)"
    )
    common.add_argument(
        "--wrapper",
        help="Path to the secretguard-mcp executable"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser(
        "protect",
        parents=[common],
        help="Encrypt MCP secrets and route servers through the wrapper"
    )
    subparsers.add_parser(
        "status",
        parents=[common],
        help="Show MCP protection status"
    )
    unprotect_parser = subparsers.add_parser(
        "unprotect",
        parents=[common],
        help="Restore original MCP configs from backups"
    )
    unprotect_parser.add_argument(
        "--purge",
        action="store_true",
        help="Also delete the restored servers' secrets from the vault"
    )
    subparsers.add_parser(
        "vault-list",
        parents=[common],
        help="List vault entries (counts only)"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    # Dispatch to command
    if args.command == "protect":
        return cmd_protect(args)
    elif args.command == "status":
        return cmd_status(args)
    elif args.command == "unprotect":
        return cmd_unprotect(args)
    elif args.command == "vault-list":
        return cmd_vault_list(args)
    else:
        # No command specified, show help
        parser.print_help()
        return EXIT_SUCCESS


if __name__ == "__main__":
    sys.exit(main())
