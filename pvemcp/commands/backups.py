"""Backup commands (vzdump archives on backup-capable storage)."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Any

from pvemcp.command.context import HandlerContext
from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import boolean, string
from pvemcp.command.registry import CommandSpec
from pvemcp.commands.common import CONTAINER_ID, NODE, OPTIONAL_NODE, STORAGE, VMID, node_names
from pvemcp.commands.storage import collect_content
from pvemcp.core.errors import InvalidParameterError
from pvemcp.proxmox.client import encode_segment
from pvemcp.proxmox.errors import ProxmoxAPIError, RequestCancelledError, RequestTimeoutError

logger = logging.getLogger(__name__)

BACKUP_ID = string("backup_id", "Backup volume ID, e.g. 'local:backup/vzdump-qemu-100-....vma.zst'", required=True)
BACKUP_STORAGE = string("storage", "Target storage for the backup")
MODE = string("mode", "Backup mode", choices=("snapshot", "suspend", "stop"))
COMPRESS = string("compress", "Compression", choices=("0", "1", "gzip", "lzo", "zstd"))
NOTES = string("notes", "Notes attached to the backup (supports {{guestname}} templates)")

# A timed-out or cancelled call may already have taken effect on that node
_NOT_RETRIED = (RequestCancelledError, RequestTimeoutError)


async def list_backups(ctx: HandlerContext, args: dict[str, Any]) -> dict[str, Any]:
    backups = await collect_content(ctx, args["storage"], args.get("node_name"), content="backup")
    return {"storage": args["storage"], "backups": backups, "count": len(backups)}


async def first_success(
    ctx: HandlerContext,
    node_name: str | None,
    attempt: Callable[[str], Awaitable[Any]],
    what: str,
) -> tuple[str, Any]:
    """Run ``attempt`` on each node in turn until one succeeds.

    Returns:
        The node that succeeded and the attempt's result.

    Raises:
        ProxmoxAPIError: The last node's error if every node failed, or a
            timeout/cancellation at once.
    """
    last_error: ProxmoxAPIError | None = None
    for node in await node_names(ctx, node_name):
        try:
            return node, await attempt(node)
        except _NOT_RETRIED:
            raise
        except ProxmoxAPIError as e:
            logger.debug("%s failed on node %s: %s", what, node, e.message)
            last_error = e
    assert last_error is not None
    raise last_error


async def delete_backup(ctx: HandlerContext, args: dict[str, Any]) -> dict[str, Any]:
    """Delete a backup volume from whichever node can reach it."""
    storage, backup_id = args["storage"], args["backup_id"]

    async def attempt(node: str) -> Any:
        path = (
            f"nodes/{encode_segment(node)}/storage/{encode_segment(storage)}"
            f"/content/{encode_segment(backup_id)}"
        )
        return await ctx.call("DELETE", path)

    node, task = await first_success(ctx, args.get("node_name"), attempt, f"Delete of {backup_id}")
    return {
        "action": "delete",
        "backup_id": backup_id,
        "storage": storage,
        "node": node,
        "task": task,
    }


def upload_filename(backup_id: str) -> str:
    """File name for an uploaded archive: the backup ID without storage or directory."""
    return backup_id.rsplit(":", 1)[-1].rsplit("/", 1)[-1]


async def upload_backup(ctx: HandlerContext, args: dict[str, Any]) -> dict[str, Any]:
    """Upload a local backup archive to a storage.

    The file is streamed as multipart form data. Without ``node_name`` the
    upload goes to the first node that accepts it.
    """
    storage, backup_id = args["storage"], args["backup_id"]
    source = Path(args["file_path"]).expanduser()
    filename = upload_filename(backup_id)
    if not filename:
        raise InvalidParameterError("backup_id", "a backup file name", f"got {backup_id!r}")
    try:
        handle = source.open("rb")
    except OSError as e:
        raise InvalidParameterError("file_path", "a readable file", str(e)) from None

    with handle:

        async def attempt(node: str) -> Any:
            handle.seek(0)
            path = f"nodes/{encode_segment(node)}/storage/{encode_segment(storage)}/upload"
            return await ctx.call(
                "POST",
                path,
                body={"content": "backup"},
                files={"filename": (filename, handle, "application/octet-stream")},
            )

        node, task = await first_success(ctx, args.get("node_name"), attempt, f"Upload of {filename}")

    return {
        "action": "upload",
        "backup_id": backup_id,
        "storage": storage,
        "node": node,
        "task": task,
        "message": "Backup upload initiated",
    }


ENDPOINTS = [
    Endpoint(
        name="create_vm_backup",
        description="Back up a virtual machine with vzdump",
        method="POST",
        path="nodes/{node_name}/vzdump",
        params=(NODE, VMID, BACKUP_STORAGE, MODE, COMPRESS, NOTES),
        fields={
            "vmid": "vmid",
            "storage": "storage",
            "mode": "mode",
            "compress": "compress",
            "notes-template": "notes",
        },
        result_key="task",
        echo={"vmid": "vmid", "node": "node_name", "storage": "storage"},
        action="backup",
    ),
    Endpoint(
        name="create_container_backup",
        description="Back up a container with vzdump",
        method="POST",
        path="nodes/{node_name}/vzdump",
        params=(NODE, CONTAINER_ID, BACKUP_STORAGE, MODE, COMPRESS, NOTES),
        fields={
            "vmid": "container_id",
            "storage": "storage",
            "mode": "mode",
            "compress": "compress",
            "notes-template": "notes",
        },
        result_key="task",
        echo={"container_id": "container_id", "node": "node_name", "storage": "storage"},
        action="backup",
    ),
    Endpoint(
        name="restore_vm_backup",
        description="Restore a virtual machine from a backup archive",
        method="POST",
        path="nodes/{node_name}/qemu",
        params=(
            NODE,
            VMID,
            BACKUP_ID,
            string("storage", "Storage for the restored disks"),
            boolean("force", "Overwrite an existing VM with the same ID"),
        ),
        fields={"vmid": "vmid", "archive": "backup_id", "storage": "storage", "force": "force"},
        result_key="task",
        echo={"vmid": "vmid", "node": "node_name", "backup_id": "backup_id"},
        action="restore",
    ),
    Endpoint(
        name="restore_container_backup",
        description="Restore a container from a backup archive",
        method="POST",
        path="nodes/{node_name}/lxc",
        params=(
            NODE,
            CONTAINER_ID,
            BACKUP_ID,
            string("storage", "Storage for the restored root filesystem"),
            boolean("force", "Overwrite an existing container with the same ID"),
        ),
        fields={
            "vmid": "container_id",
            "ostemplate": "backup_id",
            "storage": "storage",
            "force": "force",
        },
        fixed={"restore": 1},
        result_key="task",
        echo={"container_id": "container_id", "node": "node_name", "backup_id": "backup_id"},
        action="restore",
    ),
]

COMMANDS = [
    CommandSpec(
        name="list_backups",
        description="List backups on a storage (all nodes unless node_name is given)",
        params=(STORAGE, OPTIONAL_NODE),
        handler=list_backups,
    ),
    *(endpoint.spec() for endpoint in ENDPOINTS),
    CommandSpec(
        name="delete_backup",
        description="Delete a backup volume",
        params=(STORAGE, BACKUP_ID, OPTIONAL_NODE),
        handler=delete_backup,
    ),
    CommandSpec(
        name="upload_backup",
        description="Upload a local backup archive to a storage",
        params=(
            STORAGE,
            BACKUP_ID,
            string("file_path", "Path of the archive on the machine running this server", required=True),
            OPTIONAL_NODE,
        ),
        handler=upload_backup,
    ),
]
