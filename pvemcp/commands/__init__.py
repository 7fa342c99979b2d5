"""The Proxmox VE command catalog.

Commands are registered in the order below; that order is what
introspection (``tools/list``) reports.
"""

from __future__ import annotations

from pvemcp.command.registry import CommandRegistry, CommandSpec
from pvemcp.commands import (
    access,
    backups,
    cluster,
    containers,
    firewall,
    nodes,
    pools,
    storage,
    tasks,
    vms,
)

CATALOG = (nodes, vms, containers, storage, backups, access, pools, tasks, cluster, firewall)


def all_commands() -> list[CommandSpec]:
    """Every command spec, in registration order."""
    return [spec for module in CATALOG for spec in module.COMMANDS]


def build_registry() -> CommandRegistry:
    """Build and freeze the registry holding the full catalog.

    Raises:
        DuplicateCommandError: If two catalog entries share a name.
    """
    return CommandRegistry(all_commands()).freeze()


__all__ = ["CATALOG", "all_commands", "build_registry"]
