"""Tests for CommandResult, error kinds, and command name validation."""

import json

import pytest

from pvemcp.core.errors import (
    CommandError,
    CommandNotFoundError,
    InvalidParameterError,
    MissingParameterError,
)
from pvemcp.core.identifiers import CommandNameError, is_valid_command_name, validate_command_name
from pvemcp.core.types import CommandResult, ErrorKind
from pvemcp.proxmox.errors import (
    DecodeFailureError,
    RemoteRejectedError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportFailureError,
)


class TestCommandResult:
    """Tests for CommandResult."""

    def test_ok(self) -> None:
        result = CommandResult.ok({"nodes": [], "count": 0})

        assert result.success
        assert result.kind is None
        assert json.loads(result.to_text()) == {"nodes": [], "count": 0}

    def test_ok_without_payload(self) -> None:
        assert CommandResult.ok().payload == {}

    def test_failed(self) -> None:
        result = CommandResult.failed(ErrorKind.TIMEOUT, "Request timed out after 30.0s")

        assert not result.success
        assert result.payload is None
        assert result.to_text() == "Request timed out after 30.0s"

    def test_frozen(self) -> None:
        result = CommandResult.ok()

        with pytest.raises(AttributeError):
            result.error = "x"  # type: ignore[misc]


class TestErrorKinds:
    """Each error class reports its kind."""

    @pytest.mark.parametrize(
        "error,kind",
        [
            (CommandNotFoundError("x"), ErrorKind.NOT_FOUND),
            (MissingParameterError("vmid"), ErrorKind.MISSING_PARAMETER),
            (InvalidParameterError("vmid", "an integer"), ErrorKind.INVALID_PARAMETER),
            (RequestTimeoutError("slow"), ErrorKind.TIMEOUT),
            (RequestCancelledError(), ErrorKind.CANCELLED),
            (RemoteRejectedError(401, "authentication failure"), ErrorKind.REMOTE_REJECTED),
            (DecodeFailureError("bad"), ErrorKind.DECODE_FAILURE),
            (TransportFailureError("refused"), ErrorKind.TRANSPORT_FAILURE),
            (CommandError("other"), ErrorKind.INTERNAL_ERROR),
        ],
    )
    def test_kind(self, error: CommandError, kind: ErrorKind) -> None:
        assert error.kind is kind

    def test_messages(self) -> None:
        assert str(RemoteRejectedError(404, "no such VM")) == "API error (status 404): no such VM"
        assert InvalidParameterError("vmid", "an integer", "got str 'x'").message == (
            "vmid parameter must be an integer: got str 'x'"
        )

    def test_kind_values(self) -> None:
        assert {k.value for k in ErrorKind} >= {
            "NotFound",
            "MissingParameter",
            "InvalidParameter",
            "Timeout",
            "Cancelled",
            "RemoteRejected",
            "DecodeFailure",
            "TransportFailure",
        }


class TestCommandNames:
    """Tests for command name validation."""

    @pytest.mark.parametrize("name", ["get_nodes", "_private", "get-vm", "a" * 64])
    def test_valid(self, name: str) -> None:
        validate_command_name(name)
        assert is_valid_command_name(name)

    @pytest.mark.parametrize("name", ["", "1st", "get nodes", "get.nodes", "a" * 65, "get_nodes\n"])
    def test_invalid(self, name: str) -> None:
        with pytest.raises(CommandNameError):
            validate_command_name(name)
        assert not is_valid_command_name(name)
