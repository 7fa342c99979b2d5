"""Command and parameter name validation.

Names are exposed verbatim as MCP tool names, so they follow the same
conservative format: a letter or underscore, then up to 63 letters,
digits, underscores or hyphens.
"""

from __future__ import annotations

import re

MAX_COMMAND_NAME_LENGTH: int = 64

VALID_COMMAND_NAME_PATTERN = re.compile(r"[a-zA-Z_][a-zA-Z0-9_-]{0,63}")


class CommandNameError(ValueError):
    """Raised when a command or parameter name is invalid."""


def validate_command_name(name: str) -> None:
    """Validate that a command name conforms to the canonical format.

    Args:
        name: The command name to validate.

    Raises:
        CommandNameError: If the name is empty, too long, or contains
            characters outside ``[a-zA-Z0-9_-]``.
    """
    if not name:
        raise CommandNameError("Command name cannot be empty")
    if len(name) > MAX_COMMAND_NAME_LENGTH:
        raise CommandNameError(
            f"Command name too long: {len(name)} chars (max {MAX_COMMAND_NAME_LENGTH})"
        )
    if not VALID_COMMAND_NAME_PATTERN.fullmatch(name):
        raise CommandNameError(
            f"Invalid command name '{name}': must start with a letter or underscore "
            "and contain only letters, digits, underscores, or hyphens"
        )


def is_valid_command_name(name: str) -> bool:
    """Check if a name is valid without raising."""
    try:
        validate_command_name(name)
    except CommandNameError:
        return False
    return True
