"""Entry point for the pvemcp CLI."""

from __future__ import annotations

import asyncio
import sys

from dotenv import find_dotenv, load_dotenv

from pvemcp.cli.arg_parser import parse_args
from pvemcp.cli.commands import UsageError, cmd_call, cmd_serve, cmd_tools, parse_pairs
from pvemcp.commands import build_registry
from pvemcp.config.loader import load_config
from pvemcp.core.errors import ConfigError
from pvemcp.mcp.bootstrap import configure_logging


def main(argv: list[str] | None = None) -> None:
    """Entry point for the pvemcp CLI."""
    args = parse_args(argv)
    command = args.command or "serve"
    registry = build_registry()

    if command == "tools":
        raise SystemExit(cmd_tools(registry, as_json=args.json))

    # A .env file in the working directory fills in unset variables
    load_dotenv(find_dotenv(usecwd=True))

    try:
        config = load_config(args.config)
    except ConfigError as e:
        print(f"Configuration error: {e.message}", file=sys.stderr)
        raise SystemExit(2) from None

    logging_config = config.logging
    if args.log_level:
        logging_config = logging_config.model_copy(update={"level": args.log_level})
    configure_logging(logging_config)

    try:
        if command == "call":
            try:
                arguments = parse_pairs(args.arguments, args.json_args)
            except UsageError as e:
                print(f"Error: {e}", file=sys.stderr)
                raise SystemExit(2) from None
            exit_code = asyncio.run(cmd_call(config, registry, args.name, arguments))
        else:
            exit_code = asyncio.run(cmd_serve(config))
    except KeyboardInterrupt:
        exit_code = 130
    raise SystemExit(exit_code)


if __name__ == "__main__":
    main()
