"""Tests for the cooperative cancellation token."""

import asyncio
import threading

import pytest

from npcagency.cancellation import CancellationToken
from npcagency.errors import OperationCancelled


class TestCancellationToken:
    def test_initially_not_cancelled(self, cancel):
        assert not cancel.cancelled
        cancel.raise_if_cancelled()

    def test_cancel_is_idempotent(self, cancel):
        cancel.cancel("first")
        cancel.cancel("second")
        assert cancel.cancelled
        assert cancel.reason == "first"
        with pytest.raises(OperationCancelled, match="first"):
            cancel.raise_if_cancelled()

    def test_cancel_from_another_thread(self, cancel):
        thread = threading.Thread(target=cancel.cancel)
        thread.start()
        thread.join()
        assert cancel.cancelled

    @pytest.mark.asyncio
    async def test_sleep_completes_when_not_cancelled(self, cancel):
        await cancel.sleep(0.01)
        assert not cancel.cancelled

    @pytest.mark.asyncio
    async def test_sleep_interrupted(self, cancel):
        async def trip():
            await asyncio.sleep(0.02)
            cancel.cancel()

        with pytest.raises(OperationCancelled):
            await asyncio.gather(cancel.sleep(10), trip())

    @pytest.mark.asyncio
    async def test_race_returns_result(self, cancel):
        async def answer():
            return 42

        assert await cancel.race(answer()) == 42

    @pytest.mark.asyncio
    async def test_race_abandons_slow_work(self, cancel):
        started = asyncio.Event()

        async def slow():
            started.set()
            await asyncio.sleep(10)

        async def trip():
            await started.wait()
            cancel.cancel()

        with pytest.raises(OperationCancelled):
            await asyncio.gather(cancel.race(slow()), trip())

    @pytest.mark.asyncio
    async def test_race_propagates_errors(self, cancel):
        async def broken():
            raise ValueError("nope")

        with pytest.raises(ValueError):
            await cancel.race(broken())
