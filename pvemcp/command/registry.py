"""Command registry.

The registry maps a command name to its CommandSpec: description,
declared parameters, and handler. It is filled once at startup and then
frozen; after that it is only read, so concurrent dispatches share it
without locking.

Example:
    registry = CommandRegistry()
    registry.register(CommandSpec(
        name="get_nodes",
        description="List cluster nodes",
        params=(),
        handler=get_nodes,
    ))
    registry.freeze()

    spec = registry.lookup("get_nodes")
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, ValuesView
from dataclasses import dataclass
from functools import cached_property
from typing import Any

from pvemcp.command.context import Handler
from pvemcp.command.params import Param, build_schema
from pvemcp.core.errors import CommandNotFoundError, DuplicateCommandError, RegistryFrozenError
from pvemcp.core.identifiers import validate_command_name

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CommandSpec:
    """Immutable description of one command.

    Attributes:
        name: Unique command name.
        description: Human-readable description of what the command does.
        params: Declared parameters, in the order they are documented.
        handler: Coroutine function run with (context, typed arguments).
        closed: Reject parameters that are not declared.
    """

    name: str
    description: str
    params: tuple[Param, ...]
    handler: Handler
    closed: bool = False

    def __post_init__(self) -> None:
        validate_command_name(self.name)
        seen: set[str] = set()
        for param in self.params:
            if param.name in seen:
                raise ValueError(f"Command '{self.name}': duplicate parameter '{param.name}'")
            seen.add(param.name)

    @cached_property
    def input_schema(self) -> dict[str, Any]:
        """JSON Schema for this command's parameters."""
        return build_schema(self.params, closed=self.closed)

    def to_definition(self) -> dict[str, Any]:
        """MCP tool definition for this command."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


class CommandRegistry:
    """Ordered, build-once table of commands."""

    def __init__(self, specs: Iterable[CommandSpec] = ()) -> None:
        self._specs: dict[str, CommandSpec] = {}
        self._frozen = False
        for spec in specs:
            self.register(spec)

    def register(self, spec: CommandSpec) -> None:
        """Add a command.

        Raises:
            DuplicateCommandError: If the name is already registered.
            RegistryFrozenError: If the registry has been frozen.
        """
        if self._frozen:
            raise RegistryFrozenError(f"Cannot register '{spec.name}': registry is frozen")
        if spec.name in self._specs:
            raise DuplicateCommandError(spec.name)
        self._specs[spec.name] = spec

    def freeze(self) -> CommandRegistry:
        """Prevent further registration and return self."""
        self._frozen = True
        logger.debug("Command registry frozen with %d commands", len(self._specs))
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def get(self, name: str) -> CommandSpec | None:
        """Get a command by name, or None if not registered."""
        return self._specs.get(name)

    def lookup(self, name: str) -> CommandSpec:
        """Get a command by name.

        Raises:
            CommandNotFoundError: If no command has that name.
        """
        spec = self._specs.get(name)
        if spec is None:
            raise CommandNotFoundError(name)
        return spec

    def list(self) -> ValuesView[CommandSpec]:
        """All commands in registration order.

        The returned view is lazy and can be iterated any number of times.
        """
        return self._specs.values()

    @property
    def names(self) -> list[str]:
        """Registered command names, in registration order."""
        return list(self._specs)

    def get_definitions(self) -> list[dict[str, Any]]:
        """MCP tool definitions for every command."""
        return [spec.to_definition() for spec in self._specs.values()]

    def __len__(self) -> int:
        return len(self._specs)

    def __contains__(self, name: object) -> bool:
        return name in self._specs
