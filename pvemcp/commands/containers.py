"""Container (LXC) commands."""

from __future__ import annotations

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import boolean, integer, obj, string
from pvemcp.commands.common import CONTAINER_ID, NODE
from pvemcp.commands.guests import GuestKind, guest_endpoints
from pvemcp.proxmox.models import Container

LXC = GuestKind(
    noun="container",
    plural="containers",
    label="container",
    api="lxc",
    id_param=CONTAINER_ID,
    model=Container,
    force_field="force",
)

_CREATE_PARAMS = (
    NODE,
    CONTAINER_ID,
    string("hostname", "Container hostname", required=True),
    string("ostemplate", "OS template volume, e.g. 'local:vztmpl/debian-12-standard.tar.zst'"),
    string("storage", "Storage for the root filesystem"),
    integer("memory", "Memory in MB", default=512, minimum=16),
    integer("cores", "CPU cores", default=1, minimum=1),
    string("ostype", "OS type", default="debian"),
    string("password", "Root password"),
)
_CREATE_FIELDS = {
    "vmid": "container_id",
    "hostname": "hostname",
    "ostemplate": "ostemplate",
    "storage": "storage",
    "memory": "memory",
    "cores": "cores",
    "ostype": "ostype",
    "password": "password",
}

ENDPOINTS = guest_endpoints(LXC) + [
    Endpoint(
        name="create_container",
        description="Create a new LXC container",
        method="POST",
        path="nodes/{node_name}/lxc",
        params=_CREATE_PARAMS,
        fields=_CREATE_FIELDS,
        result_key="task",
        echo=LXC.echo,
        action="create",
    ),
    Endpoint(
        name="create_container_advanced",
        description="Create an LXC container with network and root filesystem settings",
        method="POST",
        path="nodes/{node_name}/lxc",
        params=_CREATE_PARAMS + (
            string("net0", "Network device, e.g. 'name=eth0,bridge=vmbr0,ip=dhcp'"),
            string("rootfs", "Root filesystem, e.g. 'local-lvm:8'"),
            boolean("unprivileged", "Run as an unprivileged container"),
            obj("options", "Additional configuration keys passed through unchanged"),
        ),
        fields={
            **_CREATE_FIELDS,
            "net0": "net0",
            "rootfs": "rootfs",
            "unprivileged": "unprivileged",
        },
        merge="options",
        result_key="task",
        echo=LXC.echo,
        action="create",
    ),
    Endpoint(
        name="clone_container",
        description="Clone an LXC container",
        method="POST",
        path="nodes/{node_name}/lxc/{source_container_id}/clone",
        params=(
            NODE,
            integer("source_container_id", "Container ID to clone", required=True, minimum=1),
            integer("new_container_id", "ID for the clone", required=True, minimum=1),
            string("new_hostname", "Hostname for the clone"),
            boolean("full", "Full clone instead of linked clone", default=True),
            string("target_node", "Node to place the clone on"),
        ),
        fields={
            "newid": "new_container_id",
            "hostname": "new_hostname",
            "full": "full",
            "target": "target_node",
        },
        result_key="task",
        echo={
            "source_container_id": "source_container_id",
            "new_container_id": "new_container_id",
            "node": "node_name",
        },
        action="clone",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
