"""Typed shapes for Proxmox VE API payloads.

Every field has a zero-value default and unknown fields are ignored, so
additive changes on the server side never break decoding.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class ProxmoxModel(BaseModel):
    """Base for API payload models."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class ResponseEnvelope(ProxmoxModel):
    """Wrapper around every successful API response."""

    data: Any = None


class Node(ProxmoxModel):
    node: str = ""
    status: str = ""
    uptime: int = 0
    cpu: float = 0.0
    maxcpu: int = 0
    mem: int = 0
    maxmem: int = 0
    disk: int = 0
    maxdisk: int = 0
    level: str = ""
    ssl_fingerprint: str = ""


class MemoryInfo(ProxmoxModel):
    used: int = 0
    available: int = 0
    total: int = 0
    free: int = 0


class SwapInfo(ProxmoxModel):
    used: int = 0
    total: int = 0
    free: int = 0


class RootfsInfo(ProxmoxModel):
    used: int = 0
    total: int = 0
    free: int = 0
    avail: int = 0


class CPUInfo(ProxmoxModel):
    cores: int = 0
    cpus: int = 0
    sockets: int = 0
    mhz: str = ""
    model: str = ""


class NodeStatus(ProxmoxModel):
    """Detailed status of one node (``nodes/{node}/status``)."""

    uptime: int = 0
    cpu: float = 0.0
    idle: float = 0.0
    wait: float = 0.0
    memory: MemoryInfo = MemoryInfo()
    swap: SwapInfo = SwapInfo()
    rootfs: RootfsInfo = RootfsInfo()
    cpuinfo: CPUInfo = CPUInfo()
    pveversion: str = ""
    kversion: str = ""
    loadavg: list[str] = []


class VM(ProxmoxModel):
    vmid: int = 0
    name: str = ""
    node: str = ""
    status: str = ""
    type: str = ""
    cpu: float = 0.0
    cpus: int = 0
    mem: int = 0
    maxmem: int = 0
    disk: int = 0
    maxdisk: int = 0
    uptime: int = 0
    pid: int = 0
    template: int = 0
    tags: str = ""
    lock: str = ""


class Container(ProxmoxModel):
    vmid: int = 0
    name: str = ""
    node: str = ""
    status: str = ""
    type: str = ""
    cpu: float = 0.0
    cpus: int = 0
    mem: int = 0
    maxmem: int = 0
    disk: int = 0
    maxdisk: int = 0
    swap: int = 0
    maxswap: int = 0
    uptime: int = 0
    pid: int = 0
    tags: str = ""
    lock: str = ""


class Storage(ProxmoxModel):
    storage: str = ""
    type: str = ""
    content: str = ""
    enabled: int = 0
    active: int = 0
    shared: int = 0
    used: int = 0
    avail: int = 0
    total: int = 0
    used_fraction: float = 0.0
    nodes: str = ""
    path: str = ""


class ClusterResource(ProxmoxModel):
    id: str = ""
    type: str = ""
    node: str = ""
    status: str = ""
    name: str = ""
    vmid: int = 0
    storage: str = ""
    pool: str = ""
    cpu: float = 0.0
    maxcpu: float = 0.0
    mem: int = 0
    maxmem: int = 0
    disk: int = 0
    maxdisk: int = 0
    uptime: int = 0


class Task(ProxmoxModel):
    upid: str = ""
    node: str = ""
    pid: int = 0
    pstart: int = 0
    starttime: int = 0
    endtime: int = 0
    type: str = ""
    id: str = ""
    user: str = ""
    status: str = ""


class TaskStatus(ProxmoxModel):
    upid: str = ""
    node: str = ""
    pid: int = 0
    starttime: int = 0
    type: str = ""
    id: str = ""
    user: str = ""
    status: str = ""
    exitstatus: str = ""


class TaskLogLine(ProxmoxModel):
    n: int = 0
    t: str = ""


class User(ProxmoxModel):
    userid: str = ""
    enable: int = 0
    expire: int = 0
    firstname: str = ""
    lastname: str = ""
    email: str = ""
    comment: str = ""
    groups: list[str] | str = []
    realm_type: str = Field(default="", alias="realm-type")


class Group(ProxmoxModel):
    groupid: str = ""
    comment: str = ""
    users: str = ""


class Role(ProxmoxModel):
    roleid: str = ""
    privs: str = ""
    special: int = 0


class APIToken(ProxmoxModel):
    tokenid: str = ""
    expire: int = 0
    comment: str = ""
    privsep: int = 0
    value: str = ""
    full_tokenid: str = Field(default="", alias="full-tokenid")


class ACLEntry(ProxmoxModel):
    path: str = ""
    roleid: str = ""
    ugid: str = ""
    type: str = ""
    propagate: int = 0


class StorageContent(ProxmoxModel):
    volid: str = ""
    content: str = ""
    format: str = ""
    size: int = 0
    used: int = 0
    ctime: int = 0
    vmid: int = 0
    notes: str = ""
    protected: int = 0


class Pool(ProxmoxModel):
    poolid: str = ""
    comment: str = ""
    members: list[dict[str, Any]] = []


class Snapshot(ProxmoxModel):
    name: str = ""
    description: str = ""
    snaptime: int = 0
    parent: str = ""
    vmstate: int = 0


class FirewallRule(ProxmoxModel):
    pos: int = 0
    type: str = ""
    action: str = ""
    enable: int = 0
    source: str = ""
    dest: str = ""
    proto: str = ""
    sport: str = ""
    dport: str = ""
    iface: str = ""
    macro: str = ""
    comment: str = ""


class NetworkInterface(ProxmoxModel):
    iface: str = ""
    type: str = ""
    active: int = 0
    autostart: int = 0
    method: str = ""
    address: str = ""
    netmask: str = ""
    cidr: str = ""
    gateway: str = ""
    bridge_ports: str = ""
    vlan_id: int = Field(default=0, alias="vlan-id")
    vlan_raw_device: str = Field(default="", alias="vlan-raw-device")
    comments: str = ""


class Disk(ProxmoxModel):
    devpath: str = ""
    type: str = ""
    model: str = ""
    serial: str = ""
    size: int = 0
    health: str = ""
    used: str = ""
    wearout: int | str = 0
    gpt: int = 0
