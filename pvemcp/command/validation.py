"""Parameter validation and coercion.

``validate`` turns a caller's untyped argument bag into typed arguments
using a command's declared parameters. It performs no I/O, so a rejected
call never reaches the Proxmox client.
"""

from __future__ import annotations

import json
import re
from collections.abc import Mapping, Sequence
from typing import Any

import jsonschema

from pvemcp.command.params import Param, ParamType, build_schema
from pvemcp.core.errors import InvalidParameterError, MissingParameterError

_TRUE = frozenset({"true", "1", "yes", "on"})
_FALSE = frozenset({"false", "0", "no", "off"})

_DELIMITERS = re.compile(r"[,\s]+")

_EXPECTED = {
    ParamType.STRING: "a string",
    ParamType.INTEGER: "an integer",
    ParamType.BOOLEAN: "a boolean",
    ParamType.ARRAY: "an array",
    ParamType.OBJECT: "an object",
}


def _invalid(name: str, ptype: ParamType, value: Any) -> InvalidParameterError:
    return InvalidParameterError(
        name, _EXPECTED[ptype], f"got {type(value).__name__} {value!r}"
    )


def coerce_value(name: str, ptype: ParamType, value: Any, param: Param | None = None) -> Any:
    """Coerce one value to a declared type.

    Raises:
        InvalidParameterError: If the value cannot be represented as ``ptype``.
    """
    if ptype is ParamType.STRING:
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return "true" if value else "false"
        if isinstance(value, (int, float)):
            return str(value)
        raise _invalid(name, ptype, value)

    if ptype is ParamType.INTEGER:
        if isinstance(value, bool):
            raise _invalid(name, ptype, value)
        if isinstance(value, int):
            return value
        if isinstance(value, float) and value.is_integer():
            return int(value)
        if isinstance(value, str):
            try:
                return int(value.strip())
            except ValueError:
                pass
        raise _invalid(name, ptype, value)

    if ptype is ParamType.BOOLEAN:
        if isinstance(value, bool):
            return value
        if isinstance(value, int) and value in (0, 1):
            return bool(value)
        if isinstance(value, str):
            lowered = value.strip().lower()
            if lowered in _TRUE:
                return True
            if lowered in _FALSE:
                return False
        raise _invalid(name, ptype, value)

    if ptype is ParamType.ARRAY:
        if isinstance(value, str) and param is not None and param.delimited:
            value = [part for part in _DELIMITERS.split(value.strip()) if part]
        if not isinstance(value, (list, tuple)):
            raise _invalid(name, ptype, value)
        items = param.items if param is not None else ParamType.STRING
        return [coerce_value(f"{name}[{i}]", items, item) for i, item in enumerate(value)]

    if ptype is ParamType.OBJECT:
        if isinstance(value, str):
            try:
                value = json.loads(value)
            except json.JSONDecodeError:
                raise _invalid(name, ptype, value) from None
        if not isinstance(value, dict):
            raise _invalid(name, ptype, value)
        return dict(value)

    raise ValueError(f"Unsupported parameter type: {ptype}")


def is_empty(ptype: ParamType, value: Any) -> bool:
    """True if ``value`` is the zero/empty value of ``ptype``."""
    if ptype is ParamType.STRING:
        return not value.strip()
    if ptype is ParamType.INTEGER:
        return value == 0
    if ptype is ParamType.BOOLEAN:
        return value is False
    return len(value) == 0


def validate(
    params: Sequence[Param],
    arguments: Mapping[str, Any],
    closed: bool = False,
) -> dict[str, Any]:
    """Validate and coerce an argument bag against declared parameters.

    Args:
        params: The command's declared parameters, in order.
        arguments: Caller-supplied values. ``None`` values count as absent.
        closed: Reject parameters that are not declared.

    Returns:
        Typed arguments: declared parameters (with defaults filled in) in
        declaration order, followed by undeclared parameters unchanged.

    Raises:
        MissingParameterError: A required parameter is absent or empty.
        InvalidParameterError: A value cannot be coerced, violates a
            constraint, or is undeclared in a closed schema.
    """
    declared = {p.name for p in params}
    unknown = [key for key in arguments if key not in declared]
    if closed and unknown:
        accepted = ", ".join(sorted(declared)) or "none"
        raise InvalidParameterError(
            unknown[0],
            "declared",
            message=f"Unknown parameter '{unknown[0]}' (accepted: {accepted})",
        )

    typed: dict[str, Any] = {}
    for param in params:
        value = arguments.get(param.name)
        if value is None:
            if param.required:
                raise MissingParameterError(param.name)
            if param.default is not None:
                typed[param.name] = param.default
            continue

        value = coerce_value(param.name, param.type, value, param)
        if param.required and is_empty(param.type, value):
            raise MissingParameterError(param.name)
        typed[param.name] = value

    # Constraints (minimum, enum) on the coerced values
    validator = jsonschema.Draft202012Validator(build_schema(params))
    error = jsonschema.exceptions.best_match(validator.iter_errors(typed))
    if error is not None:
        name = str(error.path[0]) if error.path else "arguments"
        raise InvalidParameterError(name, "valid", error.message)

    for key in unknown:
        typed[key] = arguments[key]
    return typed
