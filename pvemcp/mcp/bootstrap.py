"""Process bootstrap: logging setup and server wiring."""

from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from pvemcp.command.dispatcher import Dispatcher
from pvemcp.commands import build_registry
from pvemcp.config.schema import Config, LoggingConfig
from pvemcp.mcp.server import MCPServer
from pvemcp.proxmox.client import ProxmoxClient

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(config: LoggingConfig) -> None:
    """Configure logging for the pvemcp namespace.

    Console output always goes to stderr, because stdout carries the MCP
    protocol. With ``config.file`` set, records are also written to a
    rotating log file (max 5MB per file, 3 backup files).

    Args:
        config: Logging settings.
    """
    level = config.level_number

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))

    pkg_logger = logging.getLogger("pvemcp")
    pkg_logger.setLevel(level)

    # Remove any existing handlers to avoid duplicates on reconfigure
    for handler in list(pkg_logger.handlers):
        pkg_logger.removeHandler(handler)
        handler.close()
    pkg_logger.addHandler(console_handler)

    if config.file:
        log_file = Path(config.file).expanduser()
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5 * 1024 * 1024,
            backupCount=3,
            encoding="utf-8",
        )
        file_handler.setLevel(level)
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
        pkg_logger.addHandler(file_handler)

    pkg_logger.propagate = False


async def run_server(config: Config) -> None:
    """Serve the full command catalog over stdio until input closes."""
    registry = build_registry()
    async with ProxmoxClient(config.proxmox) as client:
        logger.info("Using Proxmox API at %s", client.base_url)
        dispatcher = Dispatcher(registry, client)
        server = MCPServer(dispatcher, config.server)
        await server.serve()
