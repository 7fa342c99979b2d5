"""Commands shared by QEMU virtual machines and LXC containers.

Both guest types expose the same API layout under
``nodes/{node}/qemu/{vmid}`` and ``nodes/{node}/lxc/{vmid}``; ``GuestKind``
captures what differs (names, the ID parameter, the list model).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import Param, boolean, string
from pvemcp.commands.common import CONFIG, CONSOLIDATION, NODE, TIMEFRAME
from pvemcp.proxmox.models import FirewallRule, Snapshot

LIFECYCLE_ACTIONS = {
    "start": "Start",
    "stop": "Stop (hard power-off)",
    "shutdown": "Gracefully shut down",
    "reboot": "Reboot",
    "suspend": "Suspend",
    "resume": "Resume",
}

SNAP_NAME = string("snap_name", "Snapshot name", required=True)


@dataclass(frozen=True)
class GuestKind:
    """Naming and API differences between guest types."""

    noun: str  # command name component: "vm", "container"
    plural: str  # "vms", "containers"
    label: str  # human label: "VM", "container"
    api: str  # API collection: "qemu", "lxc"
    id_param: Param
    model: type
    force_field: str  # API field for the delete "force" flag

    @property
    def id_name(self) -> str:
        return self.id_param.name

    @property
    def base(self) -> str:
        return f"nodes/{{node_name}}/{self.api}/{{{self.id_name}}}"

    @property
    def echo(self) -> dict[str, str]:
        return {self.id_name: self.id_name, "node": "node_name"}


def guest_endpoints(kind: GuestKind) -> list[Endpoint]:
    """Build the list, status, lifecycle, snapshot, and firewall commands for a guest kind."""
    ident = (NODE, kind.id_param)
    endpoints = [
        Endpoint(
            name=f"get_{kind.plural}",
            description=f"Get all {kind.label}s on a specific node",
            method="GET",
            path=f"nodes/{{node_name}}/{kind.api}",
            params=(NODE,),
            shape=list[kind.model],
            result_key=kind.plural,
            echo={"node": "node_name"},
        ),
        Endpoint(
            name=f"get_{kind.noun}_status",
            description=f"Get the current status of a {kind.label}",
            method="GET",
            path=f"{kind.base}/status/current",
            params=ident,
            shape=kind.model,
            result_key="status",
            echo=kind.echo,
        ),
        Endpoint(
            name=f"get_{kind.noun}_config",
            description=f"Get the full configuration of a {kind.label}",
            method="GET",
            path=f"{kind.base}/config",
            params=ident,
            shape=dict[str, Any],
            result_key="config",
            echo=kind.echo,
        ),
        Endpoint(
            name=f"get_{kind.noun}_stats",
            description=f"Get RRD performance statistics for a {kind.label}",
            method="GET",
            path=f"{kind.base}/rrddata",
            params=ident + (TIMEFRAME, CONSOLIDATION),
            fields={"timeframe": "timeframe", "cf": "cf"},
            shape=list[dict[str, Any]],
            result_key="stats",
            echo=kind.echo,
        ),
    ]

    for action, verb in LIFECYCLE_ACTIONS.items():
        endpoints.append(
            Endpoint(
                name=f"{action}_{kind.noun}",
                description=f"{verb} a {kind.label}",
                method="POST",
                path=f"{kind.base}/status/{action}",
                params=ident,
                result_key="task",
                echo=kind.echo,
                action=action,
            )
        )

    endpoints += [
        Endpoint(
            name=f"delete_{kind.noun}",
            description=f"Delete a {kind.label} and its disks",
            method="DELETE",
            path=kind.base,
            params=ident + (
                boolean("force", f"Delete even if the {kind.label} is locked or running"),
                boolean("purge", "Also remove from backup jobs, replication, and HA"),
            ),
            fields={kind.force_field: "force", "purge": "purge"},
            result_key="task",
            echo=kind.echo,
            action="delete",
        ),
        Endpoint(
            name=f"update_{kind.noun}_config",
            description=f"Update {kind.label} configuration (memory, cores, description, ...)",
            method="PUT",
            path=f"{kind.base}/config",
            params=ident + (CONFIG,),
            merge="config",
            echo=kind.echo,
            action="update_config",
            message=f"{kind.label} configuration updated",
        ),
        Endpoint(
            name=f"get_{kind.noun}_console",
            description=f"Open a VNC console ticket for a {kind.label}",
            method="POST",
            path=f"{kind.base}/vncproxy",
            params=ident,
            shape=dict[str, Any],
            result_key="console",
            echo=kind.echo,
        ),
        Endpoint(
            name=f"create_{kind.noun}_snapshot",
            description=f"Create a snapshot of a {kind.label}",
            method="POST",
            path=f"{kind.base}/snapshot",
            params=ident + (SNAP_NAME, string("description", "Snapshot description")),
            fields={"snapname": "snap_name", "description": "description"},
            result_key="task",
            echo={**kind.echo, "snapshot": "snap_name"},
            action="snapshot",
        ),
        Endpoint(
            name=f"list_{kind.noun}_snapshots",
            description=f"List snapshots of a {kind.label}",
            method="GET",
            path=f"{kind.base}/snapshot",
            params=ident,
            shape=list[Snapshot],
            result_key="snapshots",
            echo=kind.echo,
        ),
        Endpoint(
            name=f"delete_{kind.noun}_snapshot",
            description=f"Delete a snapshot of a {kind.label}",
            method="DELETE",
            path=f"{kind.base}/snapshot/{{snap_name}}",
            params=ident + (SNAP_NAME, boolean("force", "Remove from config even if disk removal fails")),
            fields={"force": "force"},
            result_key="task",
            echo={**kind.echo, "snapshot": "snap_name"},
            action="delete_snapshot",
        ),
        Endpoint(
            name=f"restore_{kind.noun}_snapshot",
            description=f"Roll a {kind.label} back to a snapshot",
            method="POST",
            path=f"{kind.base}/snapshot/{{snap_name}}/rollback",
            params=ident + (SNAP_NAME,),
            result_key="task",
            echo={**kind.echo, "snapshot": "snap_name"},
            action="rollback",
        ),
        Endpoint(
            name=f"get_{kind.noun}_firewall_rules",
            description=f"Get firewall rules of a {kind.label}",
            method="GET",
            path=f"{kind.base}/firewall/rules",
            params=ident,
            shape=list[FirewallRule],
            result_key="rules",
            echo=kind.echo,
        ),
        Endpoint(
            name=f"migrate_{kind.noun}",
            description=f"Migrate a {kind.label} to another node",
            method="POST",
            path=f"{kind.base}/migrate",
            params=ident + (
                string("target_node", "Destination node", required=True),
                boolean("online", "Live-migrate a running guest"),
            ),
            fields={"target": "target_node", "online": "online"},
            result_key="task",
            echo={**kind.echo, "target": "target_node"},
            action="migrate",
        ),
    ]
    return endpoints
