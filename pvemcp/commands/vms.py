"""Virtual machine (QEMU) commands."""

from __future__ import annotations

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import boolean, integer, obj, string
from pvemcp.commands.common import NODE, VMID
from pvemcp.commands.guests import GuestKind, guest_endpoints
from pvemcp.proxmox.models import VM

QEMU = GuestKind(
    noun="vm",
    plural="vms",
    label="VM",
    api="qemu",
    id_param=VMID,
    model=VM,
    force_field="skiplock",
)

_CREATE_PARAMS = (
    NODE,
    VMID,
    string("name", "VM name", required=True),
    integer("memory", "Memory in MB", default=512, minimum=16),
    integer("cores", "CPU cores per socket", default=1, minimum=1),
    integer("sockets", "CPU sockets", default=1, minimum=1),
)
_CREATE_FIELDS = {
    "vmid": "vmid",
    "name": "name",
    "memory": "memory",
    "cores": "cores",
    "sockets": "sockets",
}

ENDPOINTS = guest_endpoints(QEMU) + [
    Endpoint(
        name="create_vm",
        description="Create a new virtual machine",
        method="POST",
        path="nodes/{node_name}/qemu",
        params=_CREATE_PARAMS,
        fields=_CREATE_FIELDS,
        result_key="task",
        echo=QEMU.echo,
        action="create",
    ),
    Endpoint(
        name="create_vm_advanced",
        description="Create a virtual machine with disks, media, and network devices",
        method="POST",
        path="nodes/{node_name}/qemu",
        params=_CREATE_PARAMS + (
            string("ide2", "IDE2 device, e.g. 'local:iso/debian.iso,media=cdrom'"),
            string("sata0", "SATA0 disk, e.g. 'local-lvm:32'"),
            string("scsi0", "SCSI0 disk, e.g. 'local-lvm:32'"),
            string("net0", "Network device, e.g. 'virtio,bridge=vmbr0'"),
            string("ostype", "Guest OS type, e.g. 'l26'"),
            obj("options", "Additional configuration keys passed through unchanged"),
        ),
        fields={
            **_CREATE_FIELDS,
            "ide2": "ide2",
            "sata0": "sata0",
            "scsi0": "scsi0",
            "net0": "net0",
            "ostype": "ostype",
        },
        merge="options",
        result_key="task",
        echo=QEMU.echo,
        action="create",
    ),
    Endpoint(
        name="clone_vm",
        description="Clone a virtual machine",
        method="POST",
        path="nodes/{node_name}/qemu/{source_vmid}/clone",
        params=(
            NODE,
            integer("source_vmid", "VM ID to clone", required=True, minimum=1),
            integer("new_vmid", "ID for the clone", required=True, minimum=1),
            string("new_name", "Name for the clone"),
            boolean("full", "Full clone instead of linked clone", default=True),
            string("target_node", "Node to place the clone on"),
        ),
        fields={
            "newid": "new_vmid",
            "name": "new_name",
            "full": "full",
            "target": "target_node",
        },
        result_key="task",
        echo={"source_vmid": "source_vmid", "new_vmid": "new_vmid", "node": "node_name"},
        action="clone",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
