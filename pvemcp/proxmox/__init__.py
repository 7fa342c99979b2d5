"""Proxmox VE API transport, errors, and typed payload models."""

from pvemcp.proxmox.client import ProxmoxClient
from pvemcp.proxmox.decode import decode, encode
from pvemcp.proxmox.errors import (
    DecodeFailureError,
    ProxmoxAPIError,
    RemoteRejectedError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportFailureError,
)

__all__ = [
    "DecodeFailureError",
    "ProxmoxAPIError",
    "ProxmoxClient",
    "RemoteRejectedError",
    "RequestCancelledError",
    "RequestTimeoutError",
    "TransportFailureError",
    "decode",
    "encode",
]
