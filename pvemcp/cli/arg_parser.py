"""Argument parsing for the pvemcp CLI."""

import argparse
from pathlib import Path


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="pvemcp",
        description="MCP server for the Proxmox VE API",
    )
    parser.add_argument(
        "--config", "-c",
        type=Path,
        default=None,
        help="JSON config file (environment variables override its values)",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default=None,
        help="Log level (default: from config, else INFO)",
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser(
        "serve",
        help="Run the MCP server on stdio (default)",
    )

    tools_parser = subparsers.add_parser(
        "tools",
        help="List available commands",
    )
    tools_parser.add_argument(
        "--json",
        action="store_true",
        help="Print MCP tool definitions as JSON",
    )

    call_parser = subparsers.add_parser(
        "call",
        help="Run one command and print its result",
    )
    call_parser.add_argument("name", help="Command name, e.g. get_nodes")
    call_parser.add_argument(
        "arguments",
        nargs="*",
        metavar="KEY=VALUE",
        help="Command arguments; values are parsed as JSON when possible",
    )
    call_parser.add_argument(
        "--args",
        dest="json_args",
        default=None,
        help="Arguments as one JSON object (merged under KEY=VALUE pairs)",
    )

    return parser.parse_args(argv)
