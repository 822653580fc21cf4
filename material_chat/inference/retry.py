"""Bounded retry for backends that are still loading their model."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    stop_after_attempt,
    wait_fixed,
)

from material_chat.inference.errors import BackendWarmingUp

logger = logging.getLogger(__name__)

T = TypeVar("T")

Sleep = Callable[[float], Awaitable[None]]


async def retry_while_warming_up(
    operation: Callable[[], Awaitable[T]],
    *,
    max_attempts: int,
    delay: float,
    sleep: Sleep = asyncio.sleep,
) -> T:
    """Run ``operation`` until it stops raising ``BackendWarmingUp``.

    Waits ``delay`` seconds between attempts. Any other exception is
    raised immediately; after ``max_attempts`` the last
    ``BackendWarmingUp`` is re-raised.

    Args:
        operation: Zero-argument coroutine factory, called once per attempt.
        max_attempts: Total attempts, including the first one.
        delay: Fixed wait between attempts, in seconds.
        sleep: Awaitable sleep, replaceable in tests.

    Returns:
        The first successful result of ``operation``.
    """
    retrying = AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_fixed(delay),
        retry=retry_if_exception_type(BackendWarmingUp),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        sleep=sleep,
        reraise=True,
    )
    async for attempt in retrying:
        with attempt:
            return await operation()
    raise AssertionError("retrying stopped without an outcome")
