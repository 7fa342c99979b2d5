"""JSON-RPC 2.0 message types, parsing, and serialization for the MCP server."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from pvemcp.core.errors import PveError

# MCP protocol revision this server implements
PROTOCOL_VERSION = "2025-06-18"

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603


class ParseError(PveError):
    """Raised when a JSON-RPC message cannot be parsed."""

    def __init__(self, message: str, code: int = INVALID_REQUEST, request_id: str | int | None = None) -> None:
        self.code = code
        self.request_id = request_id
        super().__init__(message)


@dataclass
class Request:
    """JSON-RPC 2.0 request.

    Attributes:
        jsonrpc: Protocol version, must be "2.0".
        method: Name of the method to invoke.
        params: Optional parameters for the method.
        id: Request identifier. None means notification (no response expected).
    """

    jsonrpc: str
    method: str
    params: dict[str, Any] | None = None
    id: str | int | None = None

    @property
    def is_notification(self) -> bool:
        return self.id is None


@dataclass
class Response:
    """JSON-RPC 2.0 response.

    Attributes:
        jsonrpc: Protocol version, always "2.0".
        id: Request identifier from the original request.
        result: Result of the method call (mutually exclusive with error).
        error: Error object if method failed (mutually exclusive with result).
    """

    jsonrpc: str
    id: str | int | None
    result: Any | None = None
    error: dict[str, Any] | None = None


def parse_request(line: str) -> Request:
    """Parse a JSON line into a JSON-RPC 2.0 Request.

    Args:
        line: A single line of JSON text.

    Returns:
        A parsed Request object.

    Raises:
        ParseError: If the JSON is invalid (code PARSE_ERROR) or is not a
            valid request (code INVALID_REQUEST).
    """
    try:
        data = json.loads(line)
    except json.JSONDecodeError as e:
        raise ParseError(f"Invalid JSON: {e}", code=PARSE_ERROR) from e

    if not isinstance(data, dict):
        raise ParseError("Request must be a JSON object")

    request_id = data.get("id")
    if request_id is not None and (
        isinstance(request_id, bool) or not isinstance(request_id, (str, int))
    ):
        raise ParseError(f"id must be string, number, or null, got: {type(request_id).__name__}")

    jsonrpc = data.get("jsonrpc")
    if jsonrpc != "2.0":
        raise ParseError(f"jsonrpc must be '2.0', got: {jsonrpc!r}", request_id=request_id)

    method = data.get("method")
    if not isinstance(method, str):
        raise ParseError(
            f"method must be a string, got: {type(method).__name__}", request_id=request_id
        )

    params = data.get("params")
    if params is not None and not isinstance(params, dict):
        raise ParseError(
            f"params must be an object, got: {type(params).__name__}", request_id=request_id
        )

    return Request(jsonrpc=jsonrpc, method=method, params=params, id=request_id)


def serialize_response(response: Response) -> str:
    """Serialize a Response to a JSON line (no trailing newline)."""
    data: dict[str, Any] = {
        "jsonrpc": response.jsonrpc,
        "id": response.id,
    }
    if response.error is not None:
        data["error"] = response.error
    else:
        data["result"] = response.result
    return json.dumps(data, separators=(",", ":"), default=str)


def make_success_response(request_id: str | int | None, result: Any) -> Response:
    """Create a success response."""
    return Response(jsonrpc="2.0", id=request_id, result=result)


def make_error_response(
    request_id: str | int | None,
    code: int,
    message: str,
    data: Any = None,
) -> Response:
    """Create an error response.

    Args:
        request_id: The id from the original request.
        code: JSON-RPC error code.
        message: Human-readable error message.
        data: Optional additional error data.
    """
    error: dict[str, Any] = {"code": code, "message": message}
    if data is not None:
        error["data"] = data
    return Response(jsonrpc="2.0", id=request_id, error=error)
