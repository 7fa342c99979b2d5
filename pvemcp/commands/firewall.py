"""Cluster firewall and node network commands."""

from __future__ import annotations

from typing import Any

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import integer, string
from pvemcp.commands.common import ECHO_NODE, NODE
from pvemcp.proxmox.models import FirewallRule, NetworkInterface

INTERFACE_TYPES = (
    "bridge",
    "bond",
    "eth",
    "alias",
    "vlan",
    "OVSBridge",
    "OVSBond",
    "OVSPort",
    "OVSIntPort",
    "any_bridge",
    "any_local_bridge",
)

ENDPOINTS = [
    Endpoint(
        name="get_firewall_rules",
        description="Get cluster-level firewall rules",
        method="GET",
        path="cluster/firewall/rules",
        shape=list[FirewallRule],
        result_key="rules",
    ),
    Endpoint(
        name="create_firewall_rule",
        description="Add a cluster-level firewall rule",
        method="POST",
        path="cluster/firewall/rules",
        params=(
            string("direction", "Rule direction", required=True, choices=("in", "out", "group")),
            string("action", "ACCEPT, DROP, REJECT, or a security group name", required=True),
            string("source", "Source address or alias"),
            string("dest", "Destination address or alias"),
            string("proto", "Protocol, e.g. 'tcp'"),
            string("sport", "Source port or range"),
            string("dport", "Destination port or range"),
            string("macro", "Predefined macro, e.g. 'SSH'"),
            string("iface", "Network interface"),
            string("comment", "Comment"),
            integer("enable", "1 to enable the rule, 0 to add it disabled", default=1, choices=(0, 1)),
        ),
        fields={
            "type": "direction",
            "action": "action",
            "source": "source",
            "dest": "dest",
            "proto": "proto",
            "sport": "sport",
            "dport": "dport",
            "macro": "macro",
            "iface": "iface",
            "comment": "comment",
            "enable": "enable",
        },
        echo={"direction": "direction", "rule_action": "action"},
        action="create_rule",
        message="Firewall rule created",
    ),
    Endpoint(
        name="delete_firewall_rule",
        description="Delete a cluster-level firewall rule by position",
        method="DELETE",
        path="cluster/firewall/rules/{position}",
        params=(string("position", "Rule position (0 is the first rule)", required=True),),
        echo={"position": "position"},
        action="delete_rule",
        message="Firewall rule deleted",
    ),
    Endpoint(
        name="get_security_groups",
        description="List firewall security groups",
        method="GET",
        path="cluster/firewall/groups",
        shape=list[dict[str, Any]],
        result_key="groups",
    ),
    Endpoint(
        name="create_security_group",
        description="Create a firewall security group",
        method="POST",
        path="cluster/firewall/groups",
        params=(
            string("name", "Security group name", required=True),
            string("comment", "Comment"),
        ),
        fields={"group": "name", "comment": "comment"},
        echo={"name": "name"},
        action="create_group",
        message="Security group created",
    ),
    Endpoint(
        name="get_network_interfaces",
        description="List network interfaces of a node, optionally of one type",
        method="GET",
        path="nodes/{node_name}/network",
        params=(NODE, string("type", "Interface type", choices=INTERFACE_TYPES)),
        fields={"type": "type"},
        shape=list[NetworkInterface],
        result_key="interfaces",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_vlan_config",
        description="List VLAN interfaces of a node",
        method="GET",
        path="nodes/{node_name}/network",
        params=(NODE,),
        fixed={"type": "vlan"},
        shape=list[NetworkInterface],
        result_key="vlans",
        echo=ECHO_NODE,
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
