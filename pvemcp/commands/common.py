"""Parameters and helpers shared by the command catalog."""

from __future__ import annotations

from typing import Any

from pvemcp.command.context import HandlerContext
from pvemcp.command.endpoint import Transform
from pvemcp.command.params import integer, obj, string
from pvemcp.core.errors import CommandError, InvalidParameterError
from pvemcp.proxmox.models import Node


NODE = string("node_name", "Name of the node", required=True)
OPTIONAL_NODE = string("node_name", "Name of the node (default: all nodes)")
VMID = integer("vmid", "VM ID", required=True, minimum=1)
CONTAINER_ID = integer("container_id", "Container ID", required=True, minimum=1)
STORAGE = string("storage", "Storage ID", required=True)
CONFIG = obj("config", "Configuration keys and values to set", required=True)
TIMEFRAME = string(
    "timeframe",
    "Time frame for statistics",
    default="day",
    choices=("hour", "day", "week", "month", "year"),
)
CONSOLIDATION = string(
    "cf",
    "Consolidation function",
    default="AVERAGE",
    choices=("AVERAGE", "MAX"),
)

ECHO_NODE = {"node": "node_name"}


def parse_upid(upid: str) -> str:
    """Return the node name embedded in a task UPID.

    UPIDs look like ``UPID:pve1:0000ABCD:00112233:65A0B1C2:qmstart:100:root@pam:``.

    Raises:
        InvalidParameterError: If ``upid`` is not in UPID format.
    """
    parts = upid.split(":")
    if len(parts) < 3 or parts[0] != "UPID" or not parts[1]:
        raise InvalidParameterError(
            "task_id", "a task UPID", f"expected 'UPID:<node>:...', got {upid!r}"
        )
    return parts[1]


def task_node(args: dict[str, Any]) -> str:
    """Node that owns a task: explicit node_name, else the one in the UPID."""
    return args.get("node_name") or parse_upid(args["task_id"])


def filter_by(key: str, value: Any) -> Transform:
    """Transform keeping list items whose ``key`` equals ``value``."""

    def transform(data: Any, args: dict[str, Any]) -> Any:
        return [item for item in data if item.get(key) == value]

    return transform


async def node_names(ctx: HandlerContext, node_name: str | None = None) -> list[str]:
    """The nodes to visit: the requested one, or every node in the cluster."""
    if node_name:
        return [node_name]
    nodes = await ctx.call("GET", "nodes", list[Node])
    names = [n.node for n in nodes if n.node]
    if not names:
        raise CommandError("The cluster reported no nodes")
    return names
