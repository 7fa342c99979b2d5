"""Result and error-kind types shared across pvemcp."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from typing import Any


class ErrorKind(Enum):
    """Kinds of failure a dispatched command can report."""

    NOT_FOUND = "NotFound"
    MISSING_PARAMETER = "MissingParameter"
    INVALID_PARAMETER = "InvalidParameter"
    TIMEOUT = "Timeout"
    CANCELLED = "Cancelled"
    REMOTE_REJECTED = "RemoteRejected"
    DECODE_FAILURE = "DecodeFailure"
    TRANSPORT_FAILURE = "TransportFailure"
    INTERNAL_ERROR = "InternalError"


@dataclass(frozen=True)
class CommandResult:
    """Outcome of one dispatched command.

    Exactly one of ``payload`` (on success) or ``kind``/``error`` (on
    failure) is meaningful. Use :meth:`ok` and :meth:`failed` rather than
    the constructor.
    """

    payload: dict[str, Any] | None = None
    error: str = ""
    kind: ErrorKind | None = None

    @classmethod
    def ok(cls, payload: dict[str, Any] | None = None) -> CommandResult:
        return cls(payload=payload if payload is not None else {})

    @classmethod
    def failed(cls, kind: ErrorKind, message: str) -> CommandResult:
        return cls(error=message, kind=kind)

    @property
    def success(self) -> bool:
        """True if the command completed without error."""
        return self.kind is None

    def to_text(self) -> str:
        """Render the result as text for an outer transport.

        Success payloads are pretty-printed JSON; failures are the bare
        error message.
        """
        if not self.success:
            return self.error
        return json.dumps(self.payload, indent=2, default=str)
