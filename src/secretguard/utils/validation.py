# ABOUTME: Validation utilities for client/server names and wrapped commands
# ABOUTME: Shared by the vault, the config rewriter and discovery
import re

from secretguard.config import WRAPPER_NAME

# ABOUTME: Names become vault key segments, so '/' and '.' are rejected
SAFE_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class InvalidNameError(ValueError):
    """Raised when a client or server name contains unsafe characters.

    ABOUTME: Subclasses ValueError so callers can catch it broadly
    """

    def __init__(self, label: str, value: str) -> None:
        self.label = label
        self.value = value
        super().__init__(
            f"Invalid {label} name: {value!r}. "
            "Only alphanumeric, dash, and underscore allowed."
        )


def is_safe_name(value: str) -> bool:
    """Return True if value only uses [A-Za-z0-9_-] and is non-empty."""
    return SAFE_NAME.fullmatch(value) is not None


def validate_name(label: str, value: str) -> None:
    """Validate a client or server name.

    Args:
        label: What the name identifies ("client" or "server"), used in the message
        value: Name to check

    Raises:
        InvalidNameError: If value is empty or contains other characters

    Examples:
        >>> validate_name("server", "github")
        >>> validate_name("server", "../etc")
        Traceback (most recent call last):
        ...
        secretguard.utils.validation.InvalidNameError: Invalid server name: '../etc'. ...
    """
    if not is_safe_name(value):
        raise InvalidNameError(label, value)


def is_protected_command(command: str, wrapper_path: str | None = None) -> bool:
    """Check whether a server command already launches through the wrapper.

    ABOUTME: Matches the bare wrapper name or any path ending in it
    ABOUTME: Also matches the exact wrapper path configured for this run

    Args:
        command: The server's configured command
        wrapper_path: Wrapper path used by the current run, if known

    Returns:
        True if the server is already protected
    """
    if command == WRAPPER_NAME:
        return True
    if command.endswith("/" + WRAPPER_NAME) or command.endswith("\\" + WRAPPER_NAME):
        return True
    if wrapper_path and command == wrapper_path:
        return True
    return False
