"""
Tests for the cancellation helpers.
"""

import asyncio

import pytest

from depinstall.cancellation import run_cancellable, sleep_cancellable, throw_if_cancelled


async def _value(value):
    return value


@pytest.mark.asyncio
async def test_run_without_signal_returns_the_result():
    assert await run_cancellable(_value(3), None) == 3


@pytest.mark.asyncio
async def test_run_returns_the_result_when_not_cancelled():
    assert await run_cancellable(_value("ok"), asyncio.Event()) == "ok"


@pytest.mark.asyncio
async def test_run_propagates_operation_errors():
    async def fail():
        raise OSError("boom")

    with pytest.raises(OSError):
        await run_cancellable(fail(), asyncio.Event())


@pytest.mark.asyncio
async def test_run_cancels_the_operation_when_the_signal_fires():
    cancellation = asyncio.Event()
    started = asyncio.Event()
    cancelled = []

    async def hang():
        started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            cancelled.append(True)
            raise

    asyncio.get_running_loop().call_later(0.01, cancellation.set)

    with pytest.raises(asyncio.CancelledError):
        await run_cancellable(hang(), cancellation)

    assert started.is_set()
    assert cancelled == [True]


@pytest.mark.asyncio
async def test_sleep_is_interrupted_by_the_signal():
    cancellation = asyncio.Event()
    asyncio.get_running_loop().call_later(0.01, cancellation.set)

    with pytest.raises(asyncio.CancelledError):
        await asyncio.wait_for(sleep_cancellable(30, cancellation), timeout=5)


def test_throw_if_cancelled():
    throw_if_cancelled(None)

    cancellation = asyncio.Event()
    throw_if_cancelled(cancellation)

    cancellation.set()
    with pytest.raises(asyncio.CancelledError):
        throw_if_cancelled(cancellation)


@pytest.mark.asyncio
async def test_cancelling_the_caller_waits_for_the_operation_to_tear_down():
    started = asyncio.Event()
    torn_down = []

    async def hang():
        started.set()
        try:
            await asyncio.Event().wait()
        except asyncio.CancelledError:
            await asyncio.sleep(0)
            await asyncio.sleep(0)
            torn_down.append(True)
            raise

    outer = asyncio.ensure_future(run_cancellable(hang(), asyncio.Event()))
    await started.wait()
    outer.cancel()

    with pytest.raises(asyncio.CancelledError):
        await outer

    assert torn_down == [True]
