"""Cancellation support for async operations."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class CancellationToken:
    """Token for cooperative cancellation of an in-flight command.

    The outer transport creates one token per invocation and calls
    ``cancel()`` when the caller withdraws the request. The Proxmox client
    registers a callback that cancels its pending HTTP exchange.

    Example:
        token = CancellationToken()
        result_task = asyncio.create_task(dispatcher.dispatch(name, args, token))

        # Caller gave up:
        token.cancel()
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._callbacks: list[Callable[[], None]] = []

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation has been requested."""
        return self._cancelled

    def cancel(self) -> None:
        """Request cancellation and notify callbacks."""
        if self._cancelled:
            return
        self._cancelled = True
        for callback in list(self._callbacks):
            self._invoke(callback)

    def on_cancel(self, callback: Callable[[], None]) -> None:
        """Register a callback to be called when cancelled.

        If already cancelled, callback is invoked immediately.
        """
        self._callbacks.append(callback)
        if self._cancelled:
            self._invoke(callback)

    def remove_callback(self, callback: Callable[[], None]) -> None:
        """Unregister a callback added with on_cancel (no-op if absent)."""
        try:
            self._callbacks.remove(callback)
        except ValueError:
            pass

    @staticmethod
    def _invoke(callback: Callable[[], None]) -> None:
        # A failing callback must not prevent the remaining ones from running
        try:
            callback()
        except Exception:
            logger.warning("Cancellation callback failed", exc_info=True)
