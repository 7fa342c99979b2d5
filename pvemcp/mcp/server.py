"""MCP server (stdio transport).

Exposes the command registry as MCP tools over newline-delimited JSON-RPC
2.0 on stdin/stdout:
- initialize, ping
- tools/list, tools/call
- notifications/initialized, notifications/cancelled

Every tools/call runs as its own task so slow Proxmox calls do not block
other requests. A notifications/cancelled message fires the cancellation
token of the matching in-flight call.
"""

from __future__ import annotations

import asyncio
import logging
import sys
from collections.abc import Awaitable, Callable
from typing import Any

from pvemcp.command.dispatcher import Dispatcher
from pvemcp.config.schema import ServerConfig
from pvemcp.core.cancel import CancellationToken
from pvemcp.core.types import CommandResult
from pvemcp.mcp.protocol import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    PROTOCOL_VERSION,
    ParseError,
    Request,
    Response,
    make_error_response,
    make_success_response,
    parse_request,
    serialize_response,
)

logger = logging.getLogger(__name__)

LineReader = Callable[[], Awaitable[str]]
LineWriter = Callable[[str], None]


async def _read_stdin() -> str:
    return await asyncio.to_thread(sys.stdin.readline)


def _write_stdout(line: str) -> None:
    print(line, flush=True)


def tool_result(result: CommandResult) -> dict[str, Any]:
    """Render a CommandResult as an MCP tools/call result."""
    content = [{"type": "text", "text": result.to_text()}]
    if not result.success:
        return {"content": content, "isError": True}
    return {
        "content": content,
        "structuredContent": result.payload,
        "isError": False,
    }


class MCPServer:
    """Serves one MCP client over a pair of line-oriented streams."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        server_config: ServerConfig | None = None,
        reader: LineReader | None = None,
        writer: LineWriter | None = None,
    ) -> None:
        self._dispatcher = dispatcher
        self._config = server_config or ServerConfig()
        self._read = reader or _read_stdin
        self._write = writer or _write_stdout
        self._in_flight: dict[str | int, CancellationToken] = {}
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def in_flight(self) -> int:
        """Number of tools/call requests currently executing."""
        return len(self._in_flight)

    async def serve(self) -> None:
        """Read requests until end of input, then wait for in-flight calls."""
        logger.info(
            "%s %s serving %d tools on stdio",
            self._config.name,
            self._config.version,
            len(self._dispatcher.registry),
        )
        while True:
            line = await self._read()
            if not line:
                break
            if not line.strip():
                continue
            self._handle_line(line)

        if self._tasks:
            await asyncio.gather(*self._tasks, return_exceptions=True)
        logger.info("Input closed, server stopping")

    def _handle_line(self, line: str) -> None:
        try:
            request = parse_request(line)
        except ParseError as e:
            logger.debug("Rejected message: %s", e.message)
            self._send(make_error_response(e.request_id, e.code, e.message))
            return

        if request.is_notification:
            self._handle_notification(request.method, request.params or {})
            return

        # Registered before the task starts so an early cancellation finds it
        token = CancellationToken()
        if request.method == "tools/call":
            if request.id in self._in_flight:
                # The running call keeps the id, so its cancellation still reaches it
                self._send(
                    make_error_response(
                        request.id,
                        INVALID_REQUEST,
                        f"Request id {request.id!r} is already in flight",
                    )
                )
                return
            self._in_flight[request.id] = token

        # Requests run as tasks so a slow tools/call does not block reading
        task = asyncio.create_task(self._respond(request, token))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _respond(self, request: Request, token: CancellationToken) -> None:
        try:
            response = await self.handle_request(request, token)
        finally:
            if request.method == "tools/call":
                self._in_flight.pop(request.id, None)
        if response is not None:
            self._send(response)

    def _send(self, response: Response) -> None:
        self._write(serialize_response(response))

    async def handle_request(
        self,
        request: Request,
        cancel_token: CancellationToken | None = None,
    ) -> Response | None:
        """Handle one parsed message; notifications return None.

        Args:
            request: The parsed message.
            cancel_token: Token for a tools/call; a fresh one is used if omitted.
        """
        params = request.params or {}

        if request.is_notification:
            self._handle_notification(request.method, params)
            return None

        try:
            if request.method == "initialize":
                return make_success_response(request.id, self._initialize_result())
            if request.method == "ping":
                return make_success_response(request.id, {})
            if request.method == "tools/list":
                return make_success_response(
                    request.id, {"tools": self._dispatcher.registry.get_definitions()}
                )
            if request.method == "tools/call":
                return await self._call_tool(request.id, params, cancel_token or CancellationToken())
            return make_error_response(
                request.id, METHOD_NOT_FOUND, f"Unknown method: {request.method}"
            )
        except Exception as e:
            logger.error("Error handling %s", request.method, exc_info=True)
            return make_error_response(request.id, INTERNAL_ERROR, f"Internal error: {e}")

    def _initialize_result(self) -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "capabilities": {"tools": {"listChanged": False}},
            "serverInfo": {"name": self._config.name, "version": self._config.version},
        }

    async def _call_tool(
        self,
        request_id: str | int,
        params: dict[str, Any],
        token: CancellationToken,
    ) -> Response:
        name = params.get("name")
        if not isinstance(name, str) or not name:
            return make_error_response(request_id, INVALID_PARAMS, "tools/call requires a tool name")

        result = await self._dispatcher.dispatch(name, params.get("arguments"), token)
        return make_success_response(request_id, tool_result(result))

    def _handle_notification(self, method: str, params: dict[str, Any]) -> None:
        if method == "notifications/cancelled":
            request_id = params.get("requestId")
            token = self._in_flight.get(request_id) if request_id is not None else None
            if token is not None:
                logger.info("Cancelling request %s: %s", request_id, params.get("reason", ""))
                token.cancel()
            return
        if method == "notifications/initialized":
            logger.debug("Client initialized")
            return
        logger.debug("Ignoring notification %s", method)
