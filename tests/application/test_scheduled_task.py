"""Tests for OneShotTask."""

import asyncio
from unittest.mock import AsyncMock

import pytest

from application.orchestrator import OneShotTask


class TestOneShotTask:
    """Test delayed, cancellable callbacks."""

    @pytest.mark.asyncio
    async def test_fires_once_after_delay(self) -> None:
        callback = AsyncMock()
        task = OneShotTask(0.01, callback, name="test").start()

        assert task.pending
        await asyncio.sleep(0.05)

        callback.assert_awaited_once()
        assert task.fired
        assert not task.pending

    @pytest.mark.asyncio
    async def test_cancel_prevents_firing(self) -> None:
        callback = AsyncMock()
        task = OneShotTask(0.02, callback).start()

        assert task.cancel()
        await asyncio.sleep(0.05)

        callback.assert_not_awaited()
        assert not task.fired
        assert not task.pending

    @pytest.mark.asyncio
    async def test_cancel_after_completion_is_a_noop(self) -> None:
        task = OneShotTask(0, AsyncMock()).start()
        await asyncio.sleep(0.01)

        assert not task.cancel()

    @pytest.mark.asyncio
    async def test_start_twice_schedules_once(self) -> None:
        callback = AsyncMock()
        task = OneShotTask(0, callback)

        task.start()
        task.start()
        await asyncio.sleep(0.01)

        callback.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_callback_error_is_contained(self) -> None:
        task = OneShotTask(0, AsyncMock(side_effect=RuntimeError("boom"))).start()
        await asyncio.sleep(0.01)

        assert task.fired

    @pytest.mark.asyncio
    async def test_cancel_interrupts_running_callback(self) -> None:
        started = asyncio.Event()
        release = asyncio.Event()
        finished = []

        async def callback() -> None:
            started.set()
            await release.wait()
            finished.append(True)

        task = OneShotTask(0, callback).start()
        await asyncio.wait_for(started.wait(), timeout=1)

        assert task.fired
        assert task.cancel()
        release.set()
        await asyncio.sleep(0.01)

        assert finished == []
