"""Core types and interfaces."""

from pvemcp.core.cancel import CancellationToken
from pvemcp.core.errors import (
    CommandError,
    CommandNotFoundError,
    ConfigError,
    DuplicateCommandError,
    InvalidParameterError,
    MissingParameterError,
    PveError,
    RegistryFrozenError,
)
from pvemcp.core.types import CommandResult, ErrorKind

__all__ = [
    "CancellationToken",
    "CommandError",
    "CommandNotFoundError",
    "CommandResult",
    "ConfigError",
    "DuplicateCommandError",
    "ErrorKind",
    "InvalidParameterError",
    "MissingParameterError",
    "PveError",
    "RegistryFrozenError",
]
