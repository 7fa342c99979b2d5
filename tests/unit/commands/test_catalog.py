"""Tests for the assembled command catalog."""

import pytest

from pvemcp.command.endpoint import Endpoint
from pvemcp.command.registry import CommandRegistry
from pvemcp.commands import CATALOG, all_commands, build_registry
from pvemcp.core.identifiers import is_valid_command_name


@pytest.fixture(scope="module")
def registry() -> CommandRegistry:
    return build_registry()


class TestCatalog:
    """The full registry built at startup."""

    def test_size(self, registry: CommandRegistry) -> None:
        assert len(registry) == 117

    def test_frozen(self, registry: CommandRegistry) -> None:
        assert registry.frozen

    def test_names_unique_and_valid(self) -> None:
        names = [spec.name for spec in all_commands()]

        assert len(names) == len(set(names))
        assert all(is_valid_command_name(n) for n in names)

    def test_order_follows_catalog_modules(self, registry: CommandRegistry) -> None:
        names = [spec.name for spec in registry.list()]

        assert names[0] == "get_nodes"
        assert names[-1] == "get_vlan_config"
        assert names.index("get_vms") < names.index("get_containers") < names.index("get_storage")

    def test_list_twice_identical(self, registry: CommandRegistry) -> None:
        listing = registry.list()

        assert [s.name for s in listing] == [s.name for s in listing]

    @pytest.mark.parametrize(
        "name",
        [
            "get_nodes",
            "get_node_status",
            "get_vms",
            "start_vm",
            "stop_container",
            "create_vm_snapshot",
            "restore_container_snapshot",
            "migrate_vm",
            "get_storage_content",
            "list_backups",
            "delete_backup",
            "create_role",
            "set_acl",
            "get_pool_members",
            "get_task_status",
            "get_cluster_status",
            "enable_ha_resource",
            "create_firewall_rule",
            "get_vlan_config",
        ],
    )
    def test_expected_commands_present(self, registry: CommandRegistry, name: str) -> None:
        assert name in registry

    def test_every_command_describes_itself(self, registry: CommandRegistry) -> None:
        for definition in registry.get_definitions():
            assert definition["description"], definition["name"]
            schema = definition["inputSchema"]
            assert schema["type"] == "object"
            for required in schema.get("required", []):
                assert required in schema["properties"]

    def test_endpoint_handlers_are_endpoints(self) -> None:
        """Every module exposes its specs; data-driven ones run through Endpoint."""
        for module in CATALOG:
            assert module.COMMANDS
        handlers = [spec.handler for spec in all_commands()]
        assert sum(isinstance(h, Endpoint) for h in handlers) >= 100

    def test_guest_commands_symmetric(self, registry: CommandRegistry) -> None:
        vm_names = {n.replace("vms", "X").replace("vm", "X") for n in registry.names if "vm" in n}
        ct_names = {
            n.replace("containers", "X").replace("container", "X")
            for n in registry.names
            if "container" in n
        }

        assert vm_names == ct_names
