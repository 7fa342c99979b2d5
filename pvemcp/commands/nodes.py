"""Node commands."""

from __future__ import annotations

from typing import Any

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import integer
from pvemcp.commands.common import CONFIG, CONSOLIDATION, ECHO_NODE, NODE, TIMEFRAME
from pvemcp.proxmox.models import Disk, NetworkInterface, Node, NodeStatus, TaskLogLine

ENDPOINTS = [
    Endpoint(
        name="get_nodes",
        description="Get all nodes in the Proxmox cluster",
        method="GET",
        path="nodes",
        shape=list[Node],
        result_key="nodes",
    ),
    Endpoint(
        name="get_node_status",
        description="Get detailed status of a specific node (CPU, memory, disk, versions)",
        method="GET",
        path="nodes/{node_name}/status",
        params=(NODE,),
        shape=NodeStatus,
        result_key="status",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_config",
        description="Get the configuration of a node",
        method="GET",
        path="nodes/{node_name}/config",
        params=(NODE,),
        shape=dict[str, Any],
        result_key="config",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="update_node_config",
        description="Update node configuration (description, wakeonlan, acme, ...)",
        method="PUT",
        path="nodes/{node_name}/config",
        params=(NODE, CONFIG),
        merge="config",
        echo=ECHO_NODE,
        action="update_config",
        message="Node configuration updated",
    ),
    Endpoint(
        name="reboot_node",
        description="Reboot a node",
        method="POST",
        path="nodes/{node_name}/status",
        params=(NODE,),
        fixed={"command": "reboot"},
        echo=ECHO_NODE,
        action="reboot",
    ),
    Endpoint(
        name="shutdown_node",
        description="Shut down a node",
        method="POST",
        path="nodes/{node_name}/status",
        params=(NODE,),
        fixed={"command": "shutdown"},
        echo=ECHO_NODE,
        action="shutdown",
    ),
    Endpoint(
        name="get_node_disks",
        description="List physical disks of a node",
        method="GET",
        path="nodes/{node_name}/disks/list",
        params=(NODE,),
        shape=list[Disk],
        result_key="disks",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_cert",
        description="Get certificate information for a node",
        method="GET",
        path="nodes/{node_name}/certificates/info",
        params=(NODE,),
        shape=list[dict[str, Any]],
        result_key="certificates",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_logs",
        description="Read the node's system log",
        method="GET",
        path="nodes/{node_name}/syslog",
        params=(
            NODE,
            integer("lines", "Number of log lines to return", default=50, minimum=1),
            integer("start", "Line number to start from", minimum=0),
        ),
        fields={"limit": "lines", "start": "start"},
        shape=list[TaskLogLine],
        result_key="logs",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_apt_updates",
        description="List available package updates on a node",
        method="GET",
        path="nodes/{node_name}/apt/update",
        params=(NODE,),
        shape=list[dict[str, Any]],
        result_key="updates",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="apply_node_updates",
        description="Refresh the node's package index (apt update); returns the task ID",
        method="POST",
        path="nodes/{node_name}/apt/update",
        params=(NODE,),
        result_key="task",
        echo=ECHO_NODE,
        action="apt_update",
    ),
    Endpoint(
        name="get_node_network",
        description="Get the network configuration of a node",
        method="GET",
        path="nodes/{node_name}/network",
        params=(NODE,),
        shape=list[NetworkInterface],
        result_key="network",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_dns",
        description="Get DNS settings of a node",
        method="GET",
        path="nodes/{node_name}/dns",
        params=(NODE,),
        shape=dict[str, Any],
        result_key="dns",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_node_stats",
        description="Get RRD performance statistics for a node",
        method="GET",
        path="nodes/{node_name}/rrddata",
        params=(NODE, TIMEFRAME, CONSOLIDATION),
        fields={"timeframe": "timeframe", "cf": "cf"},
        shape=list[dict[str, Any]],
        result_key="stats",
        echo={"node": "node_name", "timeframe": "timeframe"},
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
