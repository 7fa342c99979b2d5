"""Tests for parameter validation and coercion."""

from typing import Any

import pytest

from pvemcp.command.params import Param, ParamType, array, boolean, build_schema, integer, obj, string
from pvemcp.command.validation import coerce_value, validate
from pvemcp.core.errors import InvalidParameterError, MissingParameterError
from pvemcp.core.types import ErrorKind

NODE = string("node_name", "Node", required=True)
VMID = integer("vmid", "VM ID", required=True, minimum=1)


class TestRequired:
    """Required parameters must be present and non-empty."""

    def test_absent(self) -> None:
        with pytest.raises(MissingParameterError) as exc_info:
            validate((NODE, VMID), {"node_name": "pve1"})

        assert exc_info.value.param == "vmid"
        assert exc_info.value.kind is ErrorKind.MISSING_PARAMETER
        assert exc_info.value.message == "vmid parameter is required"

    def test_none_counts_as_absent(self) -> None:
        with pytest.raises(MissingParameterError):
            validate((NODE,), {"node_name": None})

    @pytest.mark.parametrize(
        "param,value",
        [
            (NODE, ""),
            (NODE, "   "),
            (VMID, 0),
            (VMID, "0"),
            (array("privs", required=True), []),
            (array("privs", required=True, delimited=True), " , "),
            (obj("config", required=True), {}),
        ],
    )
    def test_empty_values(self, param: Param, value: Any) -> None:
        """Values coercing to the type's zero value count as missing."""
        with pytest.raises(MissingParameterError):
            validate((param,), {param.name: value})

    def test_optional_absent_is_fine(self) -> None:
        assert validate((string("comment"),), {}) == {}


class TestCoercion:
    """Primitive coercion."""

    @pytest.mark.parametrize("value,expected", [(100, 100), ("100", 100), (" 7 ", 7), (12.0, 12)])
    def test_integer(self, value: Any, expected: int) -> None:
        assert coerce_value("vmid", ParamType.INTEGER, value) == expected

    @pytest.mark.parametrize("value", ["abc", "1.5", 1.5, True, [1], {"a": 1}])
    def test_integer_rejects(self, value: Any) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            coerce_value("vmid", ParamType.INTEGER, value)

        assert exc_info.value.param == "vmid"
        assert exc_info.value.expected == "an integer"
        assert exc_info.value.kind is ErrorKind.INVALID_PARAMETER

    @pytest.mark.parametrize(
        "value,expected",
        [(True, True), (False, False), ("true", True), ("NO", False), ("1", True), (0, False), ("on", True)],
    )
    def test_boolean(self, value: Any, expected: bool) -> None:
        assert coerce_value("force", ParamType.BOOLEAN, value) is expected

    @pytest.mark.parametrize("value", ["maybe", 2, [True]])
    def test_boolean_rejects(self, value: Any) -> None:
        with pytest.raises(InvalidParameterError):
            coerce_value("force", ParamType.BOOLEAN, value)

    def test_string_from_numbers(self) -> None:
        assert coerce_value("position", ParamType.STRING, 0) == "0"
        assert coerce_value("flag", ParamType.STRING, True) == "true"

    def test_string_rejects_containers(self) -> None:
        with pytest.raises(InvalidParameterError):
            coerce_value("name", ParamType.STRING, {"a": 1})

    def test_object_from_json_text(self) -> None:
        assert coerce_value("config", ParamType.OBJECT, '{"memory": 2048}') == {"memory": 2048}

    @pytest.mark.parametrize("value", ["not json", "[1, 2]", 5])
    def test_object_rejects(self, value: Any) -> None:
        with pytest.raises(InvalidParameterError):
            coerce_value("config", ParamType.OBJECT, value)

    def test_array_items_coerced(self) -> None:
        param = array("vms", items=ParamType.INTEGER)

        assert validate((param,), {"vms": ["100", 101]}) == {"vms": [100, 101]}

    def test_array_item_error_names_index(self) -> None:
        param = array("vms", items=ParamType.INTEGER)

        with pytest.raises(InvalidParameterError) as exc_info:
            validate((param,), {"vms": [100, "x"]})
        assert exc_info.value.param == "vms[1]"


class TestDelimitedStrings:
    """Delimited string lists are accepted where declared."""

    def test_comma_and_space_separated(self) -> None:
        privs = array("privs", delimited=True)

        assert validate((privs,), {"privs": "VM.Audit, VM.Console"}) == {
            "privs": ["VM.Audit", "VM.Console"]
        }

    def test_space_separated(self) -> None:
        privs = array("privs", delimited=True)

        assert validate((privs,), {"privs": "VM.Audit VM.PowerMgmt"})["privs"] == [
            "VM.Audit",
            "VM.PowerMgmt",
        ]

    def test_list_passes_unchanged(self) -> None:
        privs = array("privs", delimited=True)

        assert validate((privs,), {"privs": ["VM.Audit"]})["privs"] == ["VM.Audit"]

    def test_not_delimited_rejects_string(self) -> None:
        """Arrays that are not declared delimited require a real list."""
        with pytest.raises(InvalidParameterError):
            validate((array("storage"),), {"storage": "local,nfs"})


class TestConstraints:
    """Schema constraints checked after coercion."""

    def test_minimum(self) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            validate((VMID,), {"vmid": -5})
        assert exc_info.value.param == "vmid"

    def test_choices(self) -> None:
        mode = string("mode", choices=("snapshot", "stop"))

        with pytest.raises(InvalidParameterError) as exc_info:
            validate((mode,), {"mode": "fast"})
        assert exc_info.value.param == "mode"


class TestResultShape:
    """What validate returns."""

    def test_defaults_filled(self) -> None:
        params = (NODE, integer("memory", default=512), boolean("full", default=True))

        assert validate(params, {"node_name": "pve1"}) == {
            "node_name": "pve1",
            "memory": 512,
            "full": True,
        }

    def test_unknown_parameters_pass_through(self) -> None:
        typed = validate((NODE,), {"node_name": "pve1", "future_option": {"x": [1]}})

        assert typed["future_option"] == {"x": [1]}

    def test_closed_schema_rejects_unknown(self) -> None:
        with pytest.raises(InvalidParameterError) as exc_info:
            validate((NODE,), {"node_name": "pve1", "extra": 1}, closed=True)

        assert exc_info.value.param == "extra"
        assert "Unknown parameter 'extra'" in exc_info.value.message

    def test_input_not_mutated(self) -> None:
        arguments = {"node_name": "pve1", "vmid": "100"}

        validate((NODE, VMID), arguments)

        assert arguments == {"node_name": "pve1", "vmid": "100"}


class TestParamDeclarations:
    """Param construction and schema rendering."""

    def test_schema(self) -> None:
        schema = build_schema((NODE, string("mode", choices=("a", "b")), array("privs")))

        assert schema["required"] == ["node_name"]
        assert schema["properties"]["mode"]["enum"] == ["a", "b"]
        assert schema["properties"]["privs"]["items"] == {"type": "string"}
        assert "additionalProperties" not in schema

    def test_closed_schema(self) -> None:
        assert build_schema((NODE,), closed=True)["additionalProperties"] is False

    def test_delimited_requires_array(self) -> None:
        with pytest.raises(ValueError):
            Param("privs", ParamType.STRING, delimited=True)

    def test_required_with_default_rejected(self) -> None:
        with pytest.raises(ValueError):
            integer("memory", required=True, default=512)
