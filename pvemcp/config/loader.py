"""Configuration loading: optional JSON file overlaid by environment variables."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from pvemcp.config.schema import Config
from pvemcp.core.errors import ConfigError

logger = logging.getLogger(__name__)

# Environment variable -> (section, key)
ENV_VARS: dict[str, tuple[str, str]] = {
    "PROXMOX_BASE_URL": ("proxmox", "url"),
    "PROXMOX_API_TOKEN": ("proxmox", "token"),
    "PROXMOX_API_USER": ("proxmox", "user"),
    "PROXMOX_API_TOKEN_ID": ("proxmox", "token_id"),
    "PROXMOX_API_TOKEN_SECRET": ("proxmox", "token_secret"),
    "PROXMOX_SKIP_SSL_VERIFY": ("proxmox", "skip_ssl_verify"),
    "PROXMOX_TIMEOUT": ("proxmox", "timeout"),
    "PVEMCP_LOG_LEVEL": ("logging", "level"),
    "PVEMCP_LOG_FILE": ("logging", "file"),
}

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def parse_bool(name: str, value: str) -> bool:
    """Parse a boolean environment value.

    Raises:
        ConfigError: If the value is not a recognised boolean spelling.
    """
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigError(f"{name} must be a boolean (true/false), got: {value!r}")


def _env_overrides(environ: Mapping[str, str]) -> dict[str, dict[str, Any]]:
    overrides: dict[str, dict[str, Any]] = {}
    for var, (section, key) in ENV_VARS.items():
        raw = environ.get(var)
        if raw is None or raw == "":
            continue
        value: Any = raw
        if key == "skip_ssl_verify":
            value = parse_bool(var, raw)
        overrides.setdefault(section, {})[key] = value
    return overrides


def _read_config_file(path: Path) -> dict[str, Any]:
    """Read a JSON config file. A blank file counts as an empty object."""
    resolved = path.expanduser()
    try:
        # utf-8-sig accepts files saved with a byte order mark
        content = resolved.read_text(encoding="utf-8-sig").strip()
    except FileNotFoundError:
        raise ConfigError(f"Config file not found: {path}") from None
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    if not content:
        return {}

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ConfigError(
            f"Invalid JSON in config file {path}: {e.msg} (line {e.lineno}, column {e.colno})"
        ) from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file {path} must contain a JSON object, got {type(data).__name__}"
        )
    logger.debug("Read config file %s", resolved)
    return data


def _merge(base: dict[str, Any], overrides: dict[str, dict[str, Any]]) -> dict[str, Any]:
    merged = dict(base)
    for section, values in overrides.items():
        current = merged.get(section) or {}
        if not isinstance(current, dict):
            raise ConfigError(f"Config section '{section}' must be an object")
        current = dict(current)
        if section == "proxmox" and ("token" in values or "user" in values):
            # A credential from the environment replaces the file's, whichever form it used
            for key in ("token", "user", "token_id", "token_secret"):
                current.pop(key, None)
        current.update(values)
        merged[section] = current
    return merged


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err["loc"]) or "config"
        parts.append(f"{loc}: {err['msg']}")
    return "; ".join(parts)


def load_config(
    path: Path | None = None,
    environ: Mapping[str, str] | None = None,
) -> Config:
    """Load configuration.

    Args:
        path: Optional JSON config file. Values from the environment take
            precedence over values from the file.
        environ: Environment mapping (defaults to ``os.environ``).

    Returns:
        Validated Config.

    Raises:
        ConfigError: If the file cannot be loaded or the result is invalid.
    """
    env = os.environ if environ is None else environ
    data: dict[str, Any] = {}
    if path is not None:
        data = _read_config_file(path)

    data = _merge(data, _env_overrides(env))

    proxmox = data.get("proxmox")
    if not isinstance(proxmox, dict) or not proxmox.get("url"):
        raise ConfigError(
            "Proxmox base URL is not configured (set PROXMOX_BASE_URL or proxmox.url)"
        )

    try:
        config = Config.model_validate(data)
    except ValidationError as e:
        source = f" in {path}" if path is not None else ""
        raise ConfigError(f"Invalid configuration{source}: {_format_validation_error(e)}") from e

    logger.debug("Configuration loaded for %s", config.proxmox.host)
    return config
