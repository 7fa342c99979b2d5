"""Parameter declarations for commands and their JSON Schema rendering."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pvemcp.core.identifiers import validate_command_name


class ParamType(Enum):
    """Declared type of a command parameter."""

    STRING = "string"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    ARRAY = "array"
    OBJECT = "object"


@dataclass(frozen=True)
class Param:
    """One entry of a command's parameter schema.

    Attributes:
        name: Parameter name as supplied by callers.
        type: Declared type; values are coerced to it before any handler runs.
        description: Human-readable description shown during introspection.
        required: Absent or empty values fail with MissingParameter.
        default: Value used when an optional parameter is absent.
        items: Element type for ARRAY parameters.
        delimited: ARRAY only. Also accept one string split on commas or
            whitespace (kept for callers that send privilege lists that way).
        minimum: INTEGER only. Smallest accepted value.
        choices: Accepted values, if restricted.
    """

    name: str
    type: ParamType
    description: str = ""
    required: bool = False
    default: Any = None
    items: ParamType = ParamType.STRING
    delimited: bool = False
    minimum: int | None = None
    choices: tuple[Any, ...] | None = None

    def __post_init__(self) -> None:
        validate_command_name(self.name)
        if self.delimited and self.type is not ParamType.ARRAY:
            raise ValueError(f"Parameter '{self.name}': only arrays can be delimited")
        if self.required and self.default is not None:
            raise ValueError(f"Parameter '{self.name}': required parameters take no default")

    def to_schema(self) -> dict[str, Any]:
        """Render this parameter as a JSON Schema property."""
        schema: dict[str, Any] = {"type": self.type.value}
        if self.description:
            schema["description"] = self.description
        if self.type is ParamType.ARRAY:
            schema["items"] = {"type": self.items.value}
        if self.minimum is not None:
            schema["minimum"] = self.minimum
        if self.choices is not None:
            schema["enum"] = list(self.choices)
        if self.default is not None:
            schema["default"] = self.default
        return schema


def build_schema(params: Sequence[Param], closed: bool = False) -> dict[str, Any]:
    """Build the JSON Schema object describing a command's parameters."""
    schema: dict[str, Any] = {
        "type": "object",
        "properties": {p.name: p.to_schema() for p in params},
    }
    required = [p.name for p in params if p.required]
    if required:
        schema["required"] = required
    if closed:
        schema["additionalProperties"] = False
    return schema


# Shorthand constructors used by the command catalog


def string(name: str, description: str = "", **kwargs: Any) -> Param:
    return Param(name, ParamType.STRING, description, **kwargs)


def integer(name: str, description: str = "", **kwargs: Any) -> Param:
    return Param(name, ParamType.INTEGER, description, **kwargs)


def boolean(name: str, description: str = "", **kwargs: Any) -> Param:
    return Param(name, ParamType.BOOLEAN, description, **kwargs)


def array(name: str, description: str = "", **kwargs: Any) -> Param:
    return Param(name, ParamType.ARRAY, description, **kwargs)


def obj(name: str, description: str = "", **kwargs: Any) -> Param:
    return Param(name, ParamType.OBJECT, description, **kwargs)
