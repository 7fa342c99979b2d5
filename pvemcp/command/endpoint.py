"""Data-driven commands.

Almost every command is a thin mapping from validated arguments to one
API request. An ``Endpoint`` describes that mapping (method, path
template, which arguments become request fields, the result shape) and
is itself the handler that performs it.

Request fields are sent as a JSON body for POST/PUT and as the query
string for GET/DELETE. Booleans are sent as 1/0 and lists as
comma-separated strings, which is how the Proxmox API expects them.
"""

from __future__ import annotations

import string
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from pvemcp.command.context import HandlerContext
from pvemcp.command.params import Param, ParamType
from pvemcp.command.registry import CommandSpec
from pvemcp.proxmox.client import encode_segment
from pvemcp.proxmox.decode import encode

_BODY_METHODS = frozenset({"POST", "PUT"})
_METHODS = frozenset({"GET", "POST", "PUT", "DELETE"})

# (encoded data, typed arguments) -> data
Transform = Callable[[Any, dict[str, Any]], Any]


def encode_field(value: Any) -> Any:
    """Encode one request field the way the Proxmox API expects it."""
    if isinstance(value, bool):
        return 1 if value else 0
    if isinstance(value, (list, tuple)):
        return ",".join(str(encode_field(v)) for v in value)
    return value


def path_fields(template: str) -> list[str]:
    """Names of the ``{placeholders}`` in a path template."""
    return [name for _, name, _, _ in string.Formatter().parse(template) if name]


@dataclass(frozen=True)
class Endpoint:
    """One command backed by a single API request.

    Attributes:
        name: Command name.
        description: Human-readable description.
        method: HTTP method.
        path: Path template relative to ``/api2/json``; placeholders name
            required parameters or keys of ``derive``.
        params: Declared parameters.
        fields: API field name -> parameter name, sent when the argument
            is present.
        fixed: Constant fields sent with every request.
        merge: Name of an OBJECT parameter whose entries are sent as
            additional fields.
        derive: Extra path values computed from the arguments.
        shape: Decoding target for the response payload.
        result_key: Key of the decoded payload in the result object.
        echo: Result key -> parameter name, copied into the result.
        action: Action label included in the result.
        message: Confirmation message included in the result.
        transform: Post-processing applied to the encoded payload.
    """

    name: str
    description: str
    method: str
    path: str
    params: tuple[Param, ...] = ()
    fields: Mapping[str, str] = field(default_factory=dict)
    fixed: Mapping[str, Any] = field(default_factory=dict)
    merge: str | None = None
    derive: Mapping[str, Callable[[dict[str, Any]], str]] = field(default_factory=dict)
    shape: Any = Any
    result_key: str = "result"
    echo: Mapping[str, str] = field(default_factory=dict)
    action: str | None = None
    message: str | None = None
    transform: Transform | None = None

    def __post_init__(self) -> None:
        if self.method not in _METHODS:
            raise ValueError(f"{self.name}: unsupported method {self.method}")
        declared = {p.name: p for p in self.params}
        for placeholder in path_fields(self.path):
            if placeholder in self.derive:
                continue
            param = declared.get(placeholder)
            if param is None or not param.required:
                raise ValueError(
                    f"{self.name}: path placeholder '{placeholder}' must be a required parameter"
                )
        for api_name, param_name in self.fields.items():
            if param_name not in declared:
                raise ValueError(f"{self.name}: field '{api_name}' maps unknown parameter '{param_name}'")
        if self.merge is not None:
            merged = declared.get(self.merge)
            if merged is None or merged.type is not ParamType.OBJECT:
                raise ValueError(f"{self.name}: merge parameter must be a declared object")

    def build_path(self, args: dict[str, Any]) -> str:
        values = dict(args)
        for key, derive in self.derive.items():
            values[key] = derive(args)
        return self.path.format(
            **{name: encode_segment(values[name]) for name in path_fields(self.path)}
        )

    def build_fields(self, args: dict[str, Any]) -> dict[str, Any] | None:
        data: dict[str, Any] = dict(self.fixed)
        if self.merge is not None:
            data.update(args.get(self.merge) or {})
        for api_name, param_name in self.fields.items():
            value = args.get(param_name)
            if value is not None:
                data[api_name] = value
        if not data:
            return None
        return {key: encode_field(value) for key, value in data.items()}

    def format_result(self, value: Any, args: dict[str, Any]) -> dict[str, Any]:
        data = value if self.shape is Any else encode(value, self.shape)
        if self.transform is not None:
            data = self.transform(data, args)

        result: dict[str, Any] = {}
        if self.action is not None:
            result["action"] = self.action
        for key, param_name in self.echo.items():
            if args.get(param_name) is not None:
                result[key] = args[param_name]
        result[self.result_key] = data
        if isinstance(data, list):
            result["count"] = len(data)
        if self.message is not None:
            result["message"] = self.message
        return result

    async def __call__(self, ctx: HandlerContext, args: dict[str, Any]) -> dict[str, Any]:
        path = self.build_path(args)
        fields = self.build_fields(args)
        if self.method in _BODY_METHODS:
            value = await ctx.call(self.method, path, self.shape, body=fields)
        else:
            value = await ctx.call(self.method, path, self.shape, params=fields)
        return self.format_result(value, args)

    def spec(self) -> CommandSpec:
        """Registry entry whose handler is this endpoint."""
        return CommandSpec(
            name=self.name,
            description=self.description,
            params=self.params,
            handler=self,
        )
