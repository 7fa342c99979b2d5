"""Configuration loading and schema."""

from pvemcp.config.loader import load_config
from pvemcp.config.schema import Config, LoggingConfig, ProxmoxInstance, ServerConfig

__all__ = [
    "Config",
    "LoggingConfig",
    "ProxmoxInstance",
    "ServerConfig",
    "load_config",
]
