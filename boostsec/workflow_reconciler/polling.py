"""Generic polling loop with an initial delay, fixed interval, and timeout."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import Literal, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

PollStatus = Literal["success", "continue", "fatal"]


async def wait_for(
    attempt: Callable[[], Awaitable[tuple[PollStatus, T | None]]],
    *,
    initial_delay: float = 5,
    interval: float = 30,
    timeout: float = 300,
) -> T | None:
    """Call ``attempt`` until it succeeds, gives up, or time runs out.

    Args:
        attempt: Coroutine factory returning ``(status, value)``
        initial_delay: Seconds to wait before the first attempt
        interval: Seconds between attempts
        timeout: Maximum total wait in seconds, initial delay included; an
            attempt still running at that point is cancelled

    Returns:
        The value of the successful attempt, or None on fatal status or timeout

    """
    loop = asyncio.get_event_loop()
    end_time = loop.time() + timeout

    await asyncio.sleep(initial_delay)

    while True:
        try:
            status, value = await asyncio.wait_for(
                attempt(), max(end_time - loop.time(), 0)
            )
        except asyncio.TimeoutError:
            logger.debug(f"Polling attempt still running after {timeout} seconds")
            return None

        if status == "success":
            return value
        if status == "fatal":
            logger.debug("Polling stopped by a fatal attempt")
            return None

        if loop.time() + interval > end_time:
            logger.debug(f"Polling timed out after {timeout} seconds")
            return None

        await asyncio.sleep(interval)
