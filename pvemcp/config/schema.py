"""Configuration models for pvemcp."""

from __future__ import annotations

import logging
from typing import Literal
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]

# Proxmox API token auth scheme: "Authorization: PVEAPIToken=user@realm!tokenid=secret"
AUTH_SCHEME = "PVEAPIToken"


class ProxmoxInstance(BaseModel):
    """Connection settings for one Proxmox VE endpoint.

    The API token may be given whole (``token``) or as its three parts
    (``user``, ``token_id``, ``token_secret``).
    """

    model_config = ConfigDict(extra="forbid", frozen=True)

    url: str
    token: str | None = None
    user: str | None = None
    token_id: str | None = None
    token_secret: str | None = None
    skip_ssl_verify: bool = False
    timeout: float = Field(default=30.0, gt=0)

    @field_validator("url")
    @classmethod
    def validate_url_format(cls, v: str) -> str:
        """Require an absolute http(s) URL and drop any trailing slash."""
        parsed = urlparse(v)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ValueError(f"url must be an absolute http(s) URL, got: {v!r}")
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_credential(self) -> ProxmoxInstance:
        """Ensure exactly one usable form of the API token is present."""
        parts = (self.user, self.token_id, self.token_secret)
        if self.token:
            if any(parts):
                raise ValueError(
                    "token cannot be combined with user/token_id/token_secret"
                )
            return self
        if not all(parts):
            missing = [
                name
                for name, value in zip(("user", "token_id", "token_secret"), parts)
                if not value
            ]
            raise ValueError(
                "API token is required: set token, or all of user, token_id and "
                f"token_secret (missing: {', '.join(missing)})"
            )
        return self

    def get_token(self) -> str:
        """Return the full ``user!tokenid=secret`` token string."""
        if self.token:
            return self.token
        return f"{self.user}!{self.token_id}={self.token_secret}"

    def auth_header(self) -> str:
        """Return the value for the Authorization header."""
        return f"{AUTH_SCHEME}={self.get_token()}"

    @property
    def host(self) -> str:
        """Extract hostname from URL."""
        return urlparse(self.url).netloc


class LoggingConfig(BaseModel):
    """Logging settings."""

    model_config = ConfigDict(extra="forbid")

    level: LogLevel = "INFO"
    file: str | None = None

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        if isinstance(v, str):
            return v.strip().upper()
        return v

    @property
    def level_number(self) -> int:
        return logging.getLevelName(self.level)


class ServerConfig(BaseModel):
    """Identity reported to MCP clients during initialize."""

    model_config = ConfigDict(extra="forbid")

    name: str = "proxmox-ve-mcp"
    version: str = "0.1.0"


class Config(BaseModel):
    """Root configuration."""

    model_config = ConfigDict(extra="forbid")

    proxmox: ProxmoxInstance
    logging: LoggingConfig = LoggingConfig()
    server: ServerConfig = ServerConfig()
