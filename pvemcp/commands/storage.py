"""Storage commands."""

from __future__ import annotations

import logging
from typing import Any

from pvemcp.command.context import HandlerContext
from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import obj, string
from pvemcp.command.registry import CommandSpec
from pvemcp.commands.common import ECHO_NODE, NODE, OPTIONAL_NODE, STORAGE, node_names
from pvemcp.proxmox.client import encode_segment
from pvemcp.proxmox.decode import encode
from pvemcp.proxmox.errors import ProxmoxAPIError, RequestCancelledError
from pvemcp.proxmox.models import ClusterResource, Storage, StorageContent

logger = logging.getLogger(__name__)

CONTENT_TYPES = ("images", "rootdir", "vztmpl", "backup", "iso", "snippets", "import")


async def collect_content(
    ctx: HandlerContext,
    storage: str,
    node_name: str | None = None,
    content: str | None = None,
) -> list[dict[str, Any]]:
    """List volumes on a storage, across every node unless one is named.

    With no node named, nodes that fail (storage not available there, node
    offline) are logged and skipped. Volumes of shared storage show up on
    every node; each volume is reported once, tagged with the first node
    that listed it.
    """
    params = {"content": content} if content else None
    items: list[dict[str, Any]] = []
    seen: set[str] = set()
    for node in await node_names(ctx, node_name):
        path = f"nodes/{encode_segment(node)}/storage/{encode_segment(storage)}/content"
        try:
            entries = await ctx.call("GET", path, list[StorageContent], params=params)
        except RequestCancelledError:
            raise
        except ProxmoxAPIError as e:
            if node_name:
                raise
            logger.warning("Skipping node %s while listing %s: %s", node, storage, e.message)
            continue
        for entry in entries:
            if entry.volid in seen:
                continue
            seen.add(entry.volid)
            item = encode(entry, StorageContent)
            item["node"] = node
            items.append(item)
    return items


async def get_storage_content(ctx: HandlerContext, args: dict[str, Any]) -> dict[str, Any]:
    items = await collect_content(ctx, args["storage"], args.get("node_name"), args.get("content"))
    return {"storage": args["storage"], "content": items, "count": len(items)}


def storage_usage(data: list[dict[str, Any]], args: dict[str, Any]) -> list[dict[str, Any]]:
    """Per-node usage of one storage from cluster resources."""
    usage = []
    for item in data:
        if item.get("storage") != args["storage"]:
            continue
        total = item.get("maxdisk", 0)
        used = item.get("disk", 0)
        usage.append({
            "node": item.get("node", ""),
            "status": item.get("status", ""),
            "used": used,
            "total": total,
            "available": max(total - used, 0),
            "usage_percent": round(used * 100.0 / total, 2) if total else 0.0,
        })
    return usage


ENDPOINTS = [
    Endpoint(
        name="get_storage",
        description="Get all storage definitions in the cluster",
        method="GET",
        path="storage",
        shape=list[Storage],
        result_key="storage",
    ),
    Endpoint(
        name="get_node_storage",
        description="Get storage status on a specific node",
        method="GET",
        path="nodes/{node_name}/storage",
        params=(NODE, string("content", "Only storage supporting this content type", choices=CONTENT_TYPES)),
        fields={"content": "content"},
        shape=list[Storage],
        result_key="storage",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_storage_info",
        description="Get the configuration of a storage",
        method="GET",
        path="storage/{storage}",
        params=(STORAGE,),
        shape=dict[str, Any],
        result_key="config",
        echo={"storage": "storage"},
    ),
    Endpoint(
        name="create_storage",
        description="Create a storage definition",
        method="POST",
        path="storage",
        params=(
            STORAGE,
            string("storage_type", "Storage type (dir, nfs, lvm, lvmthin, zfspool, cifs, ...)", required=True),
            string("content", "Comma-separated content types, e.g. 'images,iso'"),
            obj("config", "Type-specific settings, e.g. {'path': '/mnt/data'}"),
        ),
        fields={"storage": "storage", "type": "storage_type", "content": "content"},
        merge="config",
        shape=dict[str, Any],
        echo={"storage": "storage"},
        action="create",
    ),
    Endpoint(
        name="update_storage",
        description="Update a storage definition",
        method="PUT",
        path="storage/{storage}",
        params=(STORAGE, obj("config", "Settings to change", required=True)),
        merge="config",
        shape=dict[str, Any],
        echo={"storage": "storage"},
        action="update",
    ),
    Endpoint(
        name="delete_storage",
        description="Delete a storage definition (data is not removed)",
        method="DELETE",
        path="storage/{storage}",
        params=(STORAGE,),
        echo={"storage": "storage"},
        action="delete",
        message="Storage definition deleted",
    ),
    Endpoint(
        name="get_storage_quota",
        description="Get used and available space of a storage on each node",
        method="GET",
        path="cluster/resources",
        params=(STORAGE,),
        fixed={"type": "storage"},
        shape=list[ClusterResource],
        transform=storage_usage,
        result_key="quota",
        echo={"storage": "storage"},
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS] + [
    CommandSpec(
        name="get_storage_content",
        description="List volumes on a storage (all nodes unless node_name is given)",
        params=(
            STORAGE,
            OPTIONAL_NODE,
            string("content", "Only this content type", choices=CONTENT_TYPES),
        ),
        handler=get_storage_content,
    ),
]
