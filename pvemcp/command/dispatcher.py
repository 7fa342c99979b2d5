"""Dispatcher: name + argument bag -> CommandResult.

Each call moves through Received -> Resolved -> Validated -> Executing and
ends as a succeeded or failed CommandResult. Failures are returned as data;
``dispatch`` never raises for a failed command.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

from pvemcp.command.context import HandlerContext
from pvemcp.command.registry import CommandRegistry
from pvemcp.command.validation import validate
from pvemcp.core.cancel import CancellationToken
from pvemcp.core.errors import CommandError, CommandNotFoundError, InvalidParameterError
from pvemcp.core.types import CommandResult, ErrorKind
from pvemcp.proxmox.client import ProxmoxClient
from pvemcp.proxmox.errors import RequestCancelledError

logger = logging.getLogger(__name__)


class Dispatcher:
    """Resolves, validates, and executes commands from a frozen registry.

    The dispatcher holds no per-call state, so any number of dispatches
    may run concurrently.
    """

    def __init__(self, registry: CommandRegistry, client: ProxmoxClient) -> None:
        self._registry = registry
        self._client = client

    @property
    def registry(self) -> CommandRegistry:
        return self._registry

    async def dispatch(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> CommandResult:
        """Run one command.

        Args:
            name: Registered command name.
            arguments: Untyped argument bag from the caller.
            cancel_token: Cancels the in-flight API call when fired.

        Returns:
            CommandResult with the handler's payload, or the failure kind
            and message.
        """
        logger.debug("%s: received", name)

        spec = self._registry.get(name)
        if spec is None:
            return self._failed(name, CommandNotFoundError(name))
        logger.debug("%s: resolved", name)

        if arguments is None:
            arguments = {}
        if not isinstance(arguments, Mapping):
            return self._failed(
                name,
                InvalidParameterError(
                    "arguments", "an object", f"got {type(arguments).__name__}"
                ),
            )

        try:
            typed = validate(spec.params, arguments, closed=spec.closed)
        except CommandError as e:
            return self._failed(name, e)
        logger.debug("%s: validated", name)

        context = HandlerContext(client=self._client, cancel_token=cancel_token)
        logger.debug("%s: executing", name)
        try:
            payload = await spec.handler(context, typed)
        except CommandError as e:
            return self._failed(name, e, executing=True)
        except asyncio.CancelledError:
            if cancel_token is not None and cancel_token.is_cancelled:
                return self._failed(name, RequestCancelledError(), executing=True)
            raise
        except Exception as e:
            logger.error("%s: unexpected error in handler", name, exc_info=True)
            return CommandResult.failed(
                ErrorKind.INTERNAL_ERROR, f"Failed to execute {name}: {e}"
            )

        logger.debug("%s: succeeded", name)
        return CommandResult.ok(payload)

    def _failed(self, name: str, error: CommandError, executing: bool = False) -> CommandResult:
        kind = error.kind
        message = error.message
        if executing:
            message = f"Failed to execute {name}: {message}"
        log_level = logging.WARNING if executing else logging.INFO
        logger.log(log_level, "%s: failed (%s): %s", name, kind.value, error.message)
        return CommandResult.failed(kind, message)
