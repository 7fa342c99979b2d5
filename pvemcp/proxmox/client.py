"""Async HTTP client for the Proxmox VE API."""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from pvemcp.config.schema import ProxmoxInstance
from pvemcp.core.cancel import CancellationToken
from pvemcp.proxmox.decode import decode
from pvemcp.proxmox.errors import (
    DecodeFailureError,
    RemoteRejectedError,
    RequestCancelledError,
    RequestTimeoutError,
    TransportFailureError,
)
from pvemcp.proxmox.models import ResponseEnvelope

logger = logging.getLogger(__name__)

API_PREFIX = "/api2/json"


def encode_segment(value: Any) -> str:
    """Percent-encode one path segment (e.g. a user id like 'root@pam')."""
    return quote(str(value), safe="@")


class ProxmoxClient:
    """
    Async HTTP client for the Proxmox VE REST API.

    One instance is shared by every command. The authorization header and
    the TLS verification toggle are fixed at construction, so concurrent
    calls never touch mutable state beyond the httpx connection pool.

    Features:
    - Async-native with httpx, connection pooling
    - Total per-call timeout
    - Cooperative cancellation through CancellationToken
    - ``{"data": ...}`` envelope unwrapping and typed decoding

    There is deliberately no retry: a failed call is reported once.
    """

    DEFAULT_TIMEOUT = 30.0
    USER_AGENT = "proxmox-ve-mcp/0.1.0"

    def __init__(
        self,
        instance: ProxmoxInstance,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self._instance = instance
        self._base_url = instance.url.rstrip("/") + API_PREFIX
        self._timeout = timeout if timeout is not None else instance.timeout
        self._verify = not instance.skip_ssl_verify
        self._headers = {
            "Authorization": instance.auth_header(),
            "Accept": "application/json",
            "User-Agent": self.USER_AGENT,
        }
        self._transport = transport
        self._http: httpx.AsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def timeout(self) -> float:
        return self._timeout

    def _ensure_client(self) -> httpx.AsyncClient:
        """Lazily create the pooled HTTP client."""
        if self._http is None or self._http.is_closed:
            if not self._verify:
                logger.warning(
                    "TLS certificate verification disabled for %s", self._instance.host
                )
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(self._timeout),
                headers=self._headers,
                verify=self._verify,
                follow_redirects=False,
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        """Close HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
        self._http = None

    async def __aenter__(self) -> ProxmoxClient:
        self._ensure_client()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def url_for(self, path: str) -> str:
        """Join the API base with a relative endpoint path."""
        return f"{self._base_url}/{path.lstrip('/')}"

    async def _send(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None,
        params: dict[str, Any] | None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        client = self._ensure_client()
        url = self.url_for(path)
        logger.debug("%s %s", method, url)

        try:
            if files:
                # Multipart upload: plain fields travel as form data beside the files
                response = await client.request(
                    method=method,
                    url=url,
                    params=params or None,
                    data=body,
                    files=files,
                )
            else:
                response = await client.request(
                    method=method,
                    url=url,
                    params=params or None,
                    json=body,
                )
        except httpx.TimeoutException as e:
            raise RequestTimeoutError(
                f"Request timed out after {self._timeout}s: {method} {path}"
            ) from e
        except httpx.RequestError as e:
            raise TransportFailureError(f"Request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.debug("%s %s -> %d", method, path, response.status_code)
            raise RemoteRejectedError(response.status_code, response.text)

        try:
            envelope = ResponseEnvelope.model_validate_json(response.content)
        except ValidationError as e:
            raise DecodeFailureError(
                f"Failed to parse response envelope for {method} {path}: "
                f"{e.errors()[0]['msg'] if e.errors() else e}"
            ) from e
        return envelope.data

    async def invoke(
        self,
        method: str,
        path: str,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        cancel_token: CancellationToken | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """
        Perform one authenticated call and return the envelope's ``data``.

        Args:
            method: HTTP method.
            path: Endpoint path relative to ``/api2/json``.
            body: Optional JSON body. No body is sent when None.
            params: Optional query parameters.
            files: Optional multipart files (httpx ``files=`` form). When given,
                ``body`` is sent as form fields instead of JSON.
            cancel_token: Fires to abort the in-flight exchange.

        Raises:
            RequestCancelledError: The token fired before completion.
            RequestTimeoutError: The call exceeded the client's timeout.
            RemoteRejectedError: Status outside 2xx.
            DecodeFailureError: The body is not a ``{"data": ...}`` object.
            TransportFailureError: Connection-level failure.
        """
        if cancel_token is not None and cancel_token.is_cancelled:
            raise RequestCancelledError(f"Request cancelled before sending: {method} {path}")

        task = asyncio.ensure_future(self._send(method, path, body, params, files))
        if cancel_token is not None:
            cancel_token.on_cancel(task.cancel)
        try:
            return await asyncio.wait_for(task, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            raise RequestTimeoutError(
                f"Request timed out after {self._timeout}s: {method} {path}"
            ) from e
        except asyncio.CancelledError:
            if cancel_token is not None and cancel_token.is_cancelled:
                raise RequestCancelledError(f"Request cancelled: {method} {path}") from None
            raise
        finally:
            if cancel_token is not None:
                cancel_token.remove_callback(task.cancel)

    async def request(
        self,
        method: str,
        path: str,
        shape: Any = Any,
        body: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        cancel_token: CancellationToken | None = None,
        files: dict[str, Any] | None = None,
    ) -> Any:
        """Invoke and decode the payload into ``shape``."""
        data = await self.invoke(
            method, path, body=body, params=params, cancel_token=cancel_token, files=files
        )
        return decode(data, shape)

