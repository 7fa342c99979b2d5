"""Command registry, parameter validation, and dispatch."""

from pvemcp.command.context import Handler, HandlerContext
from pvemcp.command.dispatcher import Dispatcher
from pvemcp.command.endpoint import Endpoint
from pvemcp.command.params import Param, ParamType
from pvemcp.command.registry import CommandRegistry, CommandSpec
from pvemcp.command.validation import validate

__all__ = [
    "CommandRegistry",
    "CommandSpec",
    "Dispatcher",
    "Endpoint",
    "Handler",
    "HandlerContext",
    "Param",
    "ParamType",
    "validate",
]
