"""Cluster-wide and high-availability commands."""

from __future__ import annotations

from typing import Any

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import integer, string
from pvemcp.commands.common import ECHO_NODE, NODE, filter_by
from pvemcp.proxmox.models import ClusterResource

HA_SID = string("sid", "HA resource ID, e.g. 'vm:100' or 'ct:101'", required=True)

ENDPOINTS = [
    Endpoint(
        name="get_cluster_resources",
        description="Get all resources in the cluster (nodes, guests, storage)",
        method="GET",
        path="cluster/resources",
        params=(string("type", "Only resources of this type", choices=("vm", "storage", "node", "sdn")),),
        fields={"type": "type"},
        shape=list[ClusterResource],
        result_key="resources",
    ),
    Endpoint(
        name="get_cluster_status",
        description="Get cluster membership and quorum status",
        method="GET",
        path="cluster/status",
        shape=list[dict[str, Any]],
        result_key="status",
    ),
    Endpoint(
        name="get_cluster_nodes_status",
        description="Get the online state of every cluster node",
        method="GET",
        path="cluster/status",
        shape=list[dict[str, Any]],
        transform=filter_by("type", value="node"),
        result_key="nodes",
    ),
    Endpoint(
        name="get_cluster_config",
        description="Get cluster join information (nodes, totem settings, config digest)",
        method="GET",
        path="cluster/config/join",
        shape=dict[str, Any],
        result_key="config",
    ),
    Endpoint(
        name="add_node_to_cluster",
        description="Register a node in the cluster configuration",
        method="POST",
        path="cluster/config/nodes/{node_name}",
        params=(
            NODE,
            integer("nodeid", "Corosync node ID", minimum=1),
            integer("votes", "Quorum votes", minimum=0),
            string("cluster_network", "Corosync link0 address of the node"),
        ),
        fields={"nodeid": "nodeid", "votes": "votes", "link0": "cluster_network"},
        shape=dict[str, Any],
        echo=ECHO_NODE,
        action="add_node",
    ),
    Endpoint(
        name="remove_node_from_cluster",
        description="Remove a node from the cluster configuration",
        method="DELETE",
        path="cluster/config/nodes/{node_name}",
        params=(NODE,),
        echo=ECHO_NODE,
        action="remove_node",
        message="Node removed from cluster configuration",
    ),
    Endpoint(
        name="get_ha_status",
        description="Get the current high-availability manager status",
        method="GET",
        path="cluster/ha/status/current",
        shape=list[dict[str, Any]],
        result_key="status",
    ),
    Endpoint(
        name="enable_ha_resource",
        description="Put a guest under high-availability management",
        method="POST",
        path="cluster/ha/resources",
        params=(
            HA_SID,
            string("comment", "Comment"),
            string(
                "state",
                "Requested state",
                choices=("started", "stopped", "enabled", "disabled", "ignored"),
            ),
            string("group", "HA group"),
            integer("max_restart", "Restart attempts before relocating", minimum=0),
            integer("max_relocate", "Relocation attempts", minimum=0),
        ),
        fields={
            "sid": "sid",
            "comment": "comment",
            "state": "state",
            "group": "group",
            "max_restart": "max_restart",
            "max_relocate": "max_relocate",
        },
        echo={"sid": "sid"},
        action="enable_ha",
        message="HA resource added",
    ),
    Endpoint(
        name="disable_ha_resource",
        description="Remove a guest from high-availability management",
        method="DELETE",
        path="cluster/ha/resources/{sid}",
        params=(HA_SID,),
        echo={"sid": "sid"},
        action="disable_ha",
        message="HA resource removed",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
