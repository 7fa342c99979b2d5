"""Typed decoding of API payloads.

``decode`` re-serializes the opaque ``data`` payload to JSON and validates
it into the requested shape with a pydantic ``TypeAdapter``. Shapes are a
``ProxmoxModel`` subclass, ``list[Model]``, ``dict[str, Any]`` or ``Any``.

Drift policy: unknown fields are ignored by the models, and a field whose
value has the wrong type is dropped (falling back to its zero value) with
a warning. Only a payload whose shape class disagrees with the target (an
object where a list was expected, or the reverse) is a hard failure.
"""

from __future__ import annotations

import copy
import json
import logging
from functools import lru_cache
from typing import Any, get_origin

from pydantic import BaseModel, TypeAdapter, ValidationError

from pvemcp.proxmox.errors import DecodeFailureError

logger = logging.getLogger(__name__)

OBJECT = "object"
ARRAY = "array"
SCALAR = "scalar"
ANY = "any"


@lru_cache(maxsize=None)
def _adapter(shape: Any) -> TypeAdapter[Any]:
    return TypeAdapter(shape)


def shape_class(shape: Any) -> str:
    """Classify a target shape as object, array, scalar, or any."""
    if shape is Any:
        return ANY
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return OBJECT
    origin = get_origin(shape) or shape
    if origin is dict:
        return OBJECT
    if origin in (list, tuple):
        return ARRAY
    return SCALAR


def _payload_class(payload: Any) -> str:
    if isinstance(payload, dict):
        return OBJECT
    if isinstance(payload, list):
        return ARRAY
    return SCALAR


def zero_value(shape: Any) -> Any:
    """Return the zero value for a target shape (used for ``null`` payloads)."""
    if shape is Any:
        return None
    if isinstance(shape, type) and issubclass(shape, BaseModel):
        return shape()
    origin = get_origin(shape) or shape
    if origin is dict:
        return {}
    if origin in (list, tuple):
        return []
    if origin is str:
        return ""
    if origin in (int, float, bool):
        return origin()
    return None


def _drop_field(data: Any, loc: tuple[Any, ...], is_array: bool) -> str | None:
    """Remove the top-level field named by a validation error location.

    Returns a dotted description of the dropped field, or None if the
    location does not point at a field inside an object.
    """
    if is_array:
        if len(loc) < 2 or not isinstance(loc[0], int) or loc[0] >= len(data):
            return None
        target, key = data[loc[0]], loc[1]
        label = f"[{loc[0]}].{key}"
    else:
        if not loc:
            return None
        target, key = data, loc[0]
        label = str(key)
    if not isinstance(target, dict) or not isinstance(key, str) or key not in target:
        return None
    del target[key]
    return label


def decode(payload: Any, shape: Any) -> Any:
    """Decode an envelope payload into a typed value.

    Args:
        payload: The ``data`` member of a response envelope.
        shape: Target shape (model class, ``list[Model]``, ``dict[str, Any]``, ``Any``).

    Returns:
        The decoded value. A ``None`` payload yields the shape's zero value.

    Raises:
        DecodeFailureError: If the payload cannot be serialized, or its shape
            class fundamentally disagrees with the target.
    """
    if payload is None:
        return zero_value(shape)

    try:
        canonical = json.dumps(payload)
    except (TypeError, ValueError) as e:
        raise DecodeFailureError(f"Payload is not JSON-serializable: {e}") from e

    adapter = _adapter(shape)
    try:
        return adapter.validate_json(canonical)
    except ValidationError as e:
        first_error = e

    expected = shape_class(shape)
    actual = _payload_class(payload)
    if expected not in (ANY, SCALAR) and expected != actual:
        raise DecodeFailureError(
            f"Unexpected response shape: expected {expected}, got {actual}"
        )

    # Same shape class: drop fields whose values have drifted and retry
    cleaned = copy.deepcopy(payload)
    dropped: list[str] = []
    seen: set[tuple[Any, ...]] = set()
    for err in first_error.errors():
        loc = tuple(err["loc"])
        # Union members report one error each for the same field
        field_key = loc[:2] if expected == ARRAY else loc[:1]
        if field_key in seen:
            continue
        seen.add(field_key)
        label = _drop_field(cleaned, loc, expected == ARRAY)
        if label is None:
            raise DecodeFailureError(
                f"Unexpected response shape: {err['msg']} at "
                f"{'.'.join(str(p) for p in err['loc']) or '<root>'}"
            ) from first_error
        dropped.append(label)

    try:
        value = adapter.validate_json(json.dumps(cleaned))
    except ValidationError as e:
        raise DecodeFailureError(f"Unexpected response shape: {e}") from e

    logger.warning(
        "Ignored %d field(s) with unexpected types while decoding: %s",
        len(dropped),
        ", ".join(dropped),
    )
    return value


def encode(value: Any, shape: Any) -> Any:
    """Convert a decoded value back to plain JSON-compatible data.

    Model fields that were absent from the decoded payload are omitted, so
    decoding and then encoding a payload the models fully describe gives
    back the same data.
    """
    return _adapter(shape).dump_python(
        value, mode="json", by_alias=True, exclude_unset=True
    )
