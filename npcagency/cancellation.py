"""Cooperative cancellation signal shared by sensors, backends and handlers."""

from __future__ import annotations

import asyncio
import threading

from npcagency.errors import OperationCancelled


class CancellationToken:
    """One-shot cancellation flag.

    Tripping it is thread-safe, so a UI thread can cancel a pipeline run that is
    executing on an event loop. Cooperative: nothing is interrupted, callers
    check the token at their suspension points.
    """

    def __init__(self):
        self._event = threading.Event()
        self._reason = ""

    def cancel(self, reason: str = "") -> None:
        """Signal cancellation. Idempotent."""
        if not self._event.is_set():
            self._reason = reason
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> str:
        return self._reason

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelled if the token has been tripped."""
        if self._event.is_set():
            raise OperationCancelled(self._reason or "Operation cancelled")

    async def wait(self, poll_interval: float = 0.01) -> None:
        """Suspend until the token is tripped."""
        while not self._event.is_set():
            await asyncio.sleep(poll_interval)

    async def sleep(self, seconds: float) -> None:
        """Sleep for `seconds`, raising OperationCancelled as soon as the token trips."""
        self.raise_if_cancelled()
        if seconds <= 0:
            return
        try:
            await asyncio.wait_for(self.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return
        self.raise_if_cancelled()

    async def race(self, awaitable):
        """Await `awaitable`, abandoning it if the token trips first.

        Raises:
            OperationCancelled: The token tripped before the awaitable finished
        """
        task = asyncio.ensure_future(awaitable)
        if self.cancelled:
            task.cancel()
            self.raise_if_cancelled()
        watcher = asyncio.ensure_future(self.wait())
        try:
            await asyncio.wait({task, watcher}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            watcher.cancel()
            if not task.done():
                task.cancel()
        if task.done() and not task.cancelled():
            return task.result()
        raise OperationCancelled(self._reason or "Operation cancelled")

    def __repr__(self) -> str:
        return f"CancellationToken(cancelled={self.cancelled})"


def never_cancelled() -> CancellationToken:
    """A fresh token nobody holds a reference to trip."""
    return CancellationToken()
