"""Resource pool commands."""

from __future__ import annotations

from typing import Any

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import ParamType, array, boolean, string
from pvemcp.proxmox.models import Pool

POOLID = string("poolid", "Pool ID", required=True)


def pool_members(data: dict[str, Any], args: dict[str, Any]) -> list[dict[str, Any]]:
    return data.get("members", [])


ENDPOINTS = [
    Endpoint(
        name="list_pools",
        description="List resource pools",
        method="GET",
        path="pools",
        shape=list[Pool],
        result_key="pools",
    ),
    Endpoint(
        name="get_pool",
        description="Get a resource pool with its members",
        method="GET",
        path="pools/{poolid}",
        params=(POOLID,),
        shape=Pool,
        result_key="pool",
        echo={"poolid": "poolid"},
    ),
    Endpoint(
        name="get_pool_members",
        description="List the guests and storage in a resource pool",
        method="GET",
        path="pools/{poolid}",
        params=(POOLID,),
        shape=Pool,
        transform=pool_members,
        result_key="members",
        echo={"poolid": "poolid"},
    ),
    Endpoint(
        name="create_pool",
        description="Create a resource pool",
        method="POST",
        path="pools",
        params=(POOLID, string("comment", "Comment")),
        fields={"poolid": "poolid", "comment": "comment"},
        echo={"poolid": "poolid"},
        action="create",
        message="Pool created",
    ),
    Endpoint(
        name="update_pool",
        description="Update a pool's comment or add (or with delete=true remove) members",
        method="PUT",
        path="pools/{poolid}",
        params=(
            POOLID,
            string("comment", "Comment"),
            array("vms", "Guest IDs to add or remove", items=ParamType.INTEGER),
            array("storage", "Storage IDs to add or remove", delimited=True),
            boolean("delete", "Remove the listed members instead of adding them"),
        ),
        fields={"comment": "comment", "vms": "vms", "storage": "storage", "delete": "delete"},
        echo={"poolid": "poolid"},
        action="update",
        message="Pool updated",
    ),
    Endpoint(
        name="delete_pool",
        description="Delete an empty resource pool",
        method="DELETE",
        path="pools/{poolid}",
        params=(POOLID,),
        echo={"poolid": "poolid"},
        action="delete",
        message="Pool deleted",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
