"""Cooperative cancellation for long-running sessions."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Iterator
from typing import Any

logger = logging.getLogger(__name__)


class CancelToken:
    """
    Cancellation flag shared between a signal handler and a polling loop.

    Cancelling more than once has no further effect.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()

    @property
    def cancelled(self) -> bool:
        """Whether cancellation has been requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation."""
        if not self._event.is_set():
            logger.debug("Cancellation requested")
        self._event.set()

    async def sleep(self, seconds: float) -> bool:
        """
        Sleep until the timeout elapses or cancellation is requested.

        Args:
            seconds: Maximum time to wait.

        Returns:
            True when woken by cancellation.
        """
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except TimeoutError:
            return False
        return True


@contextlib.contextmanager
def cancel_on_signals(
    token: CancelToken,
    signals: tuple[signal.Signals, ...] = (signal.SIGINT, signal.SIGTERM),
) -> Iterator[None]:
    """
    Route OS interrupt signals to a cancellation token.

    Must be entered from a coroutine running on the event loop.

    Args:
        token: Token cancelled when a signal arrives.
        signals: Signals to bind.

    Returns:
        Context manager restoring the previous handlers on exit.
    """
    loop = asyncio.get_running_loop()
    installed: list[signal.Signals] = []
    previous: dict[signal.Signals, Any] = {}
    for signum in signals:
        try:
            loop.add_signal_handler(signum, token.cancel)
            installed.append(signum)
        except NotImplementedError:
            previous[signum] = signal.signal(
                signum,
                lambda *_: loop.call_soon_threadsafe(token.cancel),
            )
    try:
        yield
    finally:
        for signum in installed:
            loop.remove_signal_handler(signum)
        for signum, handler in previous.items():
            if handler is not None:
                signal.signal(signum, handler)
