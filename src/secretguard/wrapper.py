# ABOUTME: secretguard-mcp: starts an MCP server with its secrets injected from the vault.
# ABOUTME: Stands in for the server's original command in the rewritten client config.
import argparse
import os
import signal
import subprocess
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from types import FrameType
from typing import Any

from secretguard.config import WRAPPER_NAME, resolve_settings
from secretguard.store import VaultCorruptedError
from secretguard.vault import McpVault

EXIT_FAILURE = 1
EXIT_USAGE = 2

USAGE = (
    f"{WRAPPER_NAME} --server <name> --client <client> "
    "[--vault-dir <path>] [--vault-key <key>] -- <command> [args...]"
)

PROTECT_HINT = "Run 'secretguard protect' to set up MCP secret protection."
UNPROTECT_HINT = "Run 'secretguard unprotect' to restore original configs."

# ABOUTME: Signals relayed to the child; SIGHUP doesn't exist on Windows
FORWARDED_SIGNALS: tuple[signal.Signals, ...] = tuple(
    getattr(signal, name) for name in ("SIGTERM", "SIGINT", "SIGHUP") if hasattr(signal, name)
)


@dataclass(frozen=True)
class WrapperArgs:
    """Parsed wrapper invocation."""
    server: str
    client: str
    vault_dir: Path
    vault_key: str
    command: list[str]


def _error(message: str) -> None:
    print(f"{WRAPPER_NAME}: {message}", file=sys.stderr, flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=WRAPPER_NAME, usage=USAGE)
    parser.add_argument("--server", required=True, help="Server name in the client config")
    parser.add_argument("--client", required=True, help="Client identifier, e.g. cursor")
    parser.add_argument("--vault-dir", help="Vault directory (default ~/.secretguard/mcp-vault)")
    parser.add_argument("--vault-key", help="Vault key material (default derived from home and user)")
    return parser


def parse_wrapper_args(argv: list[str]) -> WrapperArgs | None:
    """Parse wrapper arguments.

    ABOUTME: Everything after the first '--' is the real server command
    ABOUTME: Returns None if '--' is missing or nothing follows it
    ABOUTME: Unknown or missing options exit through argparse (status 2)

    Args:
        argv: Arguments without the program name

    Returns:
        WrapperArgs with vault defaults filled in, or None on a missing command
    """
    if "--" not in argv:
        return None

    separator = argv.index("--")
    command = argv[separator + 1:]
    if not command:
        return None

    options = build_parser().parse_args(argv[:separator])
    settings = resolve_settings(vault_dir=options.vault_dir, vault_key=options.vault_key)

    return WrapperArgs(
        server=options.server,
        client=options.client,
        vault_dir=settings.vault_dir,
        vault_key=settings.vault_key,
        command=command,
    )


class SignalRelay:
    """Forward termination signals received by this process to a child.

    ABOUTME: Install before spawning: signals arriving before attach() are queued
    ABOUTME: and delivered as soon as the child exists
    ABOUTME: Previous handlers are put back on exit
    """

    def __init__(self, signals: tuple[signal.Signals, ...] = FORWARDED_SIGNALS) -> None:
        self._signals = signals
        self._previous: dict[signal.Signals, Any] = {}
        self._pending: list[int] = []
        self._child: subprocess.Popen[bytes] | None = None

    def __enter__(self) -> "SignalRelay":
        # signal.signal() only works in the main thread
        if threading.current_thread() is threading.main_thread():
            for sig in self._signals:
                self._previous[sig] = signal.signal(sig, self._handle)
        return self

    def __exit__(self, *exc_info: object) -> None:
        for sig, handler in self._previous.items():
            signal.signal(sig, handler)
        self._previous.clear()

    def _handle(self, signum: int, frame: FrameType | None) -> None:
        if self._child is None:
            self._pending.append(signum)
        else:
            self._child.send_signal(signum)

    def attach(self, child: "subprocess.Popen[bytes]") -> None:
        """Start relaying to child and flush queued signals."""
        self._child = child
        pending, self._pending = self._pending, []
        for signum in pending:
            child.send_signal(signum)


def run_child(command: list[str], env: dict[str, str]) -> int:
    """Run command with env and inherited stdio until it exits.

    ABOUTME: No timeout, MCP servers are long-lived
    ABOUTME: A child killed by a signal maps to exit status 1

    Returns:
        The child's exit status, or 1 if it could not be started
    """
    with SignalRelay() as relay:
        try:
            child = subprocess.Popen(command, env=env)
        except OSError as e:
            _error(f"Failed to start {command[0]}: {e}")
            _error(UNPROTECT_HINT)
            return EXIT_FAILURE

        relay.attach(child)
        returncode = child.wait()

    return returncode if returncode >= 0 else EXIT_FAILURE


def main(argv: list[str] | None = None) -> int:
    """Entry point for the secretguard-mcp console script."""
    args = parse_wrapper_args(sys.argv[1:] if argv is None else argv)
    if args is None:
        _error(f"Usage: {USAGE}")
        return EXIT_USAGE

    if not args.vault_dir.is_dir():
        _error(f"Vault directory not found: {args.vault_dir}")
        _error(PROTECT_HINT)
        return EXIT_FAILURE

    try:
        vault = McpVault(args.vault_dir, args.vault_key)
        secrets = vault.get_server_secrets(args.client, args.server, strict=True)
    except (ValueError, VaultCorruptedError, OSError) as e:
        # Never start the server without its secrets
        _error(f"Failed to load secrets for {args.client}/{args.server}: {e}")
        _error(UNPROTECT_HINT)
        return EXIT_FAILURE

    env = {**os.environ, **secrets}
    return run_child(args.command, env)


if __name__ == "__main__":
    sys.exit(main())
