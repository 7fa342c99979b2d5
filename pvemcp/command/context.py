"""Per-call context handed to command handlers."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any

from pvemcp.core.cancel import CancellationToken
from pvemcp.proxmox.client import ProxmoxClient


@dataclass(frozen=True)
class HandlerContext:
    """What a handler may use while executing one command.

    The client is shared across calls; the cancellation token belongs to
    this call only.
    """

    client: ProxmoxClient
    cancel_token: CancellationToken | None = None

    async def call(
        self,
        method: str,
        path: str,
        shape: Any = Any,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """Issue one API request under this call's cancellation token."""
        return await self.client.request(
            method,
            path,
            shape,
            body=body,
            params=params,
            cancel_token=self.cancel_token,
            files=files,
        )


# (context, typed arguments) -> handler-specific result object
Handler = Callable[[HandlerContext, dict[str, Any]], Awaitable[dict[str, Any]]]
