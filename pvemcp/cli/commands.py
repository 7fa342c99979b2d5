"""CLI command implementations.

Each function prints to stdout and returns an exit code:
    pvemcp serve              # MCP server on stdio
    pvemcp tools [--json]     # List commands
    pvemcp call NAME K=V ...  # Run one command
"""

from __future__ import annotations

import json
from typing import Any

from rich.console import Console
from rich.table import Table

from pvemcp.command.dispatcher import Dispatcher
from pvemcp.command.registry import CommandRegistry
from pvemcp.config.schema import Config
from pvemcp.mcp.bootstrap import run_server
from pvemcp.proxmox.client import ProxmoxClient


class UsageError(ValueError):
    """Raised for malformed command-line arguments."""


def parse_pairs(pairs: list[str], json_args: str | None = None) -> dict[str, Any]:
    """Build an argument bag from KEY=VALUE pairs and an optional JSON object.

    Values that parse as JSON (numbers, booleans, lists, objects) are used
    as parsed; anything else is kept as a string.

    Raises:
        UsageError: If a pair has no '=' or the JSON object is malformed.
    """
    arguments: dict[str, Any] = {}
    if json_args:
        try:
            parsed = json.loads(json_args)
        except json.JSONDecodeError as e:
            raise UsageError(f"--args is not valid JSON: {e}") from e
        if not isinstance(parsed, dict):
            raise UsageError("--args must be a JSON object")
        arguments.update(parsed)

    for pair in pairs:
        key, sep, raw = pair.partition("=")
        if not sep or not key:
            raise UsageError(f"Expected KEY=VALUE, got: {pair!r}")
        try:
            arguments[key] = json.loads(raw)
        except json.JSONDecodeError:
            arguments[key] = raw
    return arguments


def cmd_tools(registry: CommandRegistry, as_json: bool = False, console: Console | None = None) -> int:
    """Print the command catalog."""
    console = console or Console()
    if as_json:
        console.print_json(data=registry.get_definitions())
        return 0

    table = Table(title=f"Proxmox VE commands ({len(registry)})")
    table.add_column("Command", style="cyan", no_wrap=True)
    table.add_column("Parameters")
    table.add_column("Description")
    for spec in registry.list():
        params = ", ".join(
            f"[bold]{p.name}[/bold]" if p.required else p.name for p in spec.params
        )
        table.add_row(spec.name, params, spec.description)
    console.print(table)
    return 0


async def cmd_call(
    config: Config,
    registry: CommandRegistry,
    name: str,
    arguments: dict[str, Any],
    console: Console | None = None,
) -> int:
    """Dispatch one command and print the result."""
    console = console or Console()
    async with ProxmoxClient(config.proxmox) as client:
        result = await Dispatcher(registry, client).dispatch(name, arguments)

    if result.success:
        console.print_json(data=result.payload)
        return 0
    err_console = Console(stderr=True)
    err_console.print(f"[red]Error ({result.kind.value}):[/red] {result.error}", highlight=False)
    return 1


async def cmd_serve(config: Config) -> int:
    """Run the MCP server until stdin closes."""
    await run_server(config)
    return 0
