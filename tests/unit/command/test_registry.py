"""Tests for CommandSpec and CommandRegistry."""

from typing import Any

import pytest

from pvemcp.command.params import integer, string
from pvemcp.command.registry import CommandRegistry, CommandSpec
from pvemcp.core.errors import CommandNotFoundError, DuplicateCommandError, RegistryFrozenError
from pvemcp.core.identifiers import CommandNameError
from pvemcp.core.types import ErrorKind


async def noop(ctx: Any, args: dict[str, Any]) -> dict[str, Any]:
    return {}


def make_spec(name: str, *params) -> CommandSpec:
    return CommandSpec(name=name, description=f"{name} command", params=tuple(params), handler=noop)


class TestCommandSpec:
    """Tests for CommandSpec construction."""

    def test_definition(self) -> None:
        spec = make_spec("get_vm_status", string("node_name", required=True), integer("vmid", required=True))

        definition = spec.to_definition()

        assert definition["name"] == "get_vm_status"
        assert definition["description"] == "get_vm_status command"
        assert definition["inputSchema"]["type"] == "object"
        assert definition["inputSchema"]["required"] == ["node_name", "vmid"]

    def test_invalid_name_rejected(self) -> None:
        with pytest.raises(CommandNameError):
            make_spec("get vms")

    def test_duplicate_param_rejected(self) -> None:
        with pytest.raises(ValueError, match="duplicate parameter"):
            make_spec("get_vm", string("node_name"), string("node_name"))

    def test_closed_schema(self) -> None:
        spec = CommandSpec("strict", "", (string("a"),), noop, closed=True)

        assert spec.input_schema["additionalProperties"] is False


class TestRegistration:
    """Tests for register/freeze."""

    def test_register_and_lookup(self) -> None:
        registry = CommandRegistry()
        spec = make_spec("get_nodes")

        registry.register(spec)

        assert registry.lookup("get_nodes") is spec
        assert registry.get("get_nodes") is spec
        assert "get_nodes" in registry
        assert len(registry) == 1

    def test_duplicate_name_fails(self) -> None:
        registry = CommandRegistry([make_spec("get_nodes")])

        with pytest.raises(DuplicateCommandError) as exc_info:
            registry.register(make_spec("get_nodes"))
        assert exc_info.value.name == "get_nodes"

    def test_duplicate_in_construction_fails(self) -> None:
        with pytest.raises(DuplicateCommandError):
            CommandRegistry([make_spec("get_vms"), make_spec("get_nodes"), make_spec("get_vms")])

    def test_frozen_registry_rejects_registration(self) -> None:
        registry = CommandRegistry([make_spec("get_nodes")]).freeze()

        assert registry.frozen
        with pytest.raises(RegistryFrozenError):
            registry.register(make_spec("get_vms"))
        assert registry.names == ["get_nodes"]


class TestLookup:
    """Tests for lookup and enumeration."""

    def test_unknown_name(self) -> None:
        registry = CommandRegistry([make_spec("get_nodes")])

        assert registry.get("get_nodez") is None
        with pytest.raises(CommandNotFoundError) as exc_info:
            registry.lookup("get_nodez")
        assert exc_info.value.kind is ErrorKind.NOT_FOUND
        assert exc_info.value.message == "Unknown command: get_nodez"

    def test_list_preserves_registration_order(self) -> None:
        names = ["get_vms", "get_nodes", "create_vm", "delete_vm"]
        registry = CommandRegistry(make_spec(n) for n in names).freeze()

        assert [spec.name for spec in registry.list()] == names
        assert registry.names == names

    def test_list_is_restartable(self) -> None:
        """The enumeration can be iterated twice with the same results."""
        registry = CommandRegistry([make_spec("a"), make_spec("b")]).freeze()
        listing = registry.list()

        first = [spec.name for spec in listing]
        second = [spec.name for spec in listing]

        assert first == second == ["a", "b"]
        assert len(listing) == 2

    def test_definitions(self) -> None:
        registry = CommandRegistry([make_spec("a"), make_spec("b")])

        assert [d["name"] for d in registry.get_definitions()] == ["a", "b"]
