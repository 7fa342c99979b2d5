"""Typed exception hierarchy for pvemcp."""

from __future__ import annotations

from pvemcp.core.types import ErrorKind


class PveError(Exception):
    """Base class for all pvemcp errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ConfigError(PveError):
    """Raised for configuration issues (missing file, invalid JSON, validation failure)."""


class CommandError(PveError):
    """An error that the dispatcher reports to the caller as a failed result.

    Subclasses set ``kind`` so every layer can report failures without
    inspecting message text.
    """

    kind: ErrorKind = ErrorKind.INTERNAL_ERROR


class CommandNotFoundError(CommandError):
    """Raised when a command name is not registered."""

    kind = ErrorKind.NOT_FOUND

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Unknown command: {name}")


class MissingParameterError(CommandError):
    """Raised when a required parameter is absent or empty."""

    kind = ErrorKind.MISSING_PARAMETER

    def __init__(self, param: str) -> None:
        self.param = param
        super().__init__(f"{param} parameter is required")


class InvalidParameterError(CommandError):
    """Raised when a parameter cannot be coerced to its declared type."""

    kind = ErrorKind.INVALID_PARAMETER

    def __init__(
        self,
        param: str,
        expected: str,
        detail: str = "",
        message: str | None = None,
    ) -> None:
        self.param = param
        self.expected = expected
        if message is None:
            message = f"{param} parameter must be {expected}"
            if detail:
                message = f"{message}: {detail}"
        super().__init__(message)


class DuplicateCommandError(PveError):
    """Raised when two commands are registered under the same name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Command already registered: {name}")


class RegistryFrozenError(PveError):
    """Raised when registering into a registry that has been frozen."""
