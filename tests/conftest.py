"""Shared pytest fixtures: a recording stub of the Proxmox API."""

from __future__ import annotations

import asyncio
import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from pvemcp.config.schema import ProxmoxInstance
from pvemcp.proxmox.client import ProxmoxClient

API_PREFIX = "/api2/json/"

Route = Callable[[httpx.Request], httpx.Response]


class StubAPI:
    """httpx transport answering from a route table and recording every request.

    Routes are keyed by (method, path) with the path relative to
    ``/api2/json``. Unrouted requests get a 404 with ``{"data": null}``.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Route] = {}
        self._delays: dict[tuple[str, str], float] = {}
        self.transport = httpx.MockTransport(self._handle)

    def add(
        self,
        method: str,
        path: str,
        data: Any = None,
        status: int = 200,
        text: str | None = None,
        delay: float = 0.0,
    ) -> None:
        """Answer ``method path`` with ``{"data": data}`` (or raw ``text``)."""
        body = text if text is not None else json.dumps({"data": data})

        def route(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text=body)

        self._routes[(method, path)] = route
        if delay:
            self._delays[(method, path)] = delay

    def add_route(self, method: str, path: str, route: Route) -> None:
        self._routes[(method, path)] = route

    async def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path
        if path.startswith(API_PREFIX):
            path = path[len(API_PREFIX):]
        key = (request.method, path)
        delay = self._delays.get(key, 0.0)
        if delay:
            await asyncio.sleep(delay)
        route = self._routes.get(key)
        if route is None:
            return httpx.Response(404, text=json.dumps({"data": None}))
        return route(request)

    @property
    def call_count(self) -> int:
        return len(self.requests)

    def last_json(self) -> Any:
        """JSON body of the most recent request."""
        return json.loads(self.requests[-1].content)

    def last_params(self) -> dict[str, str]:
        """Query parameters of the most recent request."""
        return dict(self.requests[-1].url.params)


@pytest.fixture
def pve_instance() -> ProxmoxInstance:
    return ProxmoxInstance(
        url="https://pve.example.com:8006",
        user="root@pam",
        token_id="mcp",
        token_secret="00000000-1111-2222-3333-444444444444",
    )


@pytest.fixture
def stub_api() -> StubAPI:
    return StubAPI()


@pytest.fixture
def client(pve_instance: ProxmoxInstance, stub_api: StubAPI) -> ProxmoxClient:
    return ProxmoxClient(pve_instance, transport=stub_api.transport)
