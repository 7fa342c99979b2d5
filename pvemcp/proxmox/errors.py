"""Transport error taxonomy for the Proxmox API client."""

from __future__ import annotations

from pvemcp.core.errors import CommandError
from pvemcp.core.types import ErrorKind


class ProxmoxAPIError(CommandError):
    """Base class for failures raised by ProxmoxClient."""


class RequestTimeoutError(ProxmoxAPIError):
    """The call did not complete within the client's timeout."""

    kind = ErrorKind.TIMEOUT


class RequestCancelledError(ProxmoxAPIError):
    """The caller's cancellation token fired before the call completed."""

    kind = ErrorKind.CANCELLED

    def __init__(self, message: str = "Request cancelled") -> None:
        super().__init__(message)


class RemoteRejectedError(ProxmoxAPIError):
    """The API answered with a status outside 2xx.

    The raw body is kept unparsed for diagnostics.
    """

    kind = ErrorKind.REMOTE_REJECTED

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"API error (status {status_code}): {body}")


class DecodeFailureError(ProxmoxAPIError):
    """The response could not be decoded into the expected shape."""

    kind = ErrorKind.DECODE_FAILURE


class TransportFailureError(ProxmoxAPIError):
    """A connection-level fault occurred before any response arrived."""

    kind = ErrorKind.TRANSPORT_FAILURE
