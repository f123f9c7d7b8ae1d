"""
Helpers for honouring a caller-supplied cancellation signal.

The signal is an `asyncio.Event`; setting it cancels whatever the installation
is awaiting at that moment and surfaces as `asyncio.CancelledError`.
"""

import asyncio
import contextlib
from typing import Awaitable, Optional, TypeVar

T = TypeVar("T")


def throw_if_cancelled(cancellation: Optional[asyncio.Event]) -> None:
    """Raise CancelledError when the signal is set."""
    if cancellation is not None and cancellation.is_set():
        raise asyncio.CancelledError("Installation cancelled")


async def run_cancellable(
    awaitable: Awaitable[T], cancellation: Optional[asyncio.Event]
) -> T:
    """
    Await `awaitable`, cancelling it if the signal is set first.

    Args:
        awaitable: The operation to run
        cancellation: Signal to race the operation against, or None

    Returns:
        The operation's result

    Raises:
        asyncio.CancelledError: If the signal fired before the operation finished
    """
    if cancellation is None:
        return await awaitable

    if cancellation.is_set():
        # Close an un-awaited coroutine to avoid a "never awaited" warning.
        if asyncio.iscoroutine(awaitable):
            awaitable.close()
        raise asyncio.CancelledError("Installation cancelled")

    task = asyncio.ensure_future(awaitable)
    waiter = asyncio.ensure_future(cancellation.wait())
    try:
        await asyncio.wait({task, waiter}, return_when=asyncio.FIRST_COMPLETED)
    except asyncio.CancelledError:
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        raise
    finally:
        waiter.cancel()

    if task.done():
        return task.result()

    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task
    raise asyncio.CancelledError("Installation cancelled")


async def sleep_cancellable(delay: float, cancellation: Optional[asyncio.Event]) -> None:
    """Suspend for `delay` seconds unless the signal is set in the meantime."""
    await run_cancellable(asyncio.sleep(max(delay, 0.0)), cancellation)
