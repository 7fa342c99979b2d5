"""Task commands.

Task-specific calls are routed to the node that ran the task, which is
read from the task's UPID unless ``node_name`` is given.
"""

from __future__ import annotations

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import boolean, integer, string
from pvemcp.commands.common import ECHO_NODE, NODE, task_node
from pvemcp.proxmox.models import Task, TaskLogLine, TaskStatus

TASK_ID = string("task_id", "Task UPID, e.g. 'UPID:pve1:...:qmstart:100:root@pam:'", required=True)
TASK_NODE = string("node_name", "Node that ran the task (default: taken from the UPID)")
LIMIT = integer("limit", "Maximum number of entries", minimum=1)
START = integer("start", "Offset of the first entry", minimum=0)

ENDPOINTS = [
    Endpoint(
        name="get_cluster_tasks",
        description="List recent tasks across the cluster",
        method="GET",
        path="cluster/tasks",
        shape=list[Task],
        result_key="tasks",
    ),
    Endpoint(
        name="get_node_tasks",
        description="List tasks of a node",
        method="GET",
        path="nodes/{node_name}/tasks",
        params=(
            NODE,
            LIMIT,
            START,
            integer("vmid", "Only tasks for this guest", minimum=1),
            string("typefilter", "Only tasks of this type, e.g. 'vzdump'"),
            boolean("errors", "Only failed tasks"),
        ),
        fields={
            "limit": "limit",
            "start": "start",
            "vmid": "vmid",
            "typefilter": "typefilter",
            "errors": "errors",
        },
        shape=list[Task],
        result_key="tasks",
        echo=ECHO_NODE,
    ),
    Endpoint(
        name="get_task_status",
        description="Get the status of a task",
        method="GET",
        path="nodes/{node}/tasks/{task_id}/status",
        params=(TASK_ID, TASK_NODE),
        derive={"node": task_node},
        shape=TaskStatus,
        result_key="task",
        echo={"task_id": "task_id"},
    ),
    Endpoint(
        name="get_task_log",
        description="Read the log of a task",
        method="GET",
        path="nodes/{node}/tasks/{task_id}/log",
        params=(TASK_ID, TASK_NODE, START, LIMIT),
        derive={"node": task_node},
        fields={"start": "start", "limit": "limit"},
        shape=list[TaskLogLine],
        result_key="log",
        echo={"task_id": "task_id"},
    ),
    Endpoint(
        name="cancel_task",
        description="Stop a running task",
        method="DELETE",
        path="nodes/{node}/tasks/{task_id}",
        params=(TASK_ID, TASK_NODE),
        derive={"node": task_node},
        echo={"task_id": "task_id"},
        action="cancel",
        message="Task stop requested",
    ),
]

COMMANDS = [endpoint.spec() for endpoint in ENDPOINTS]
