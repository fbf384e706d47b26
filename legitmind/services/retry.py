"""
Bounded retry with a fixed delay between attempts
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional, Tuple, Type, TypeVar

from legitmind.core.exceptions import ModelInvocationFailed, ModelOutputInvalid, ModelOverloaded

logger = logging.getLogger(__name__)

T = TypeVar("T")

TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (ModelInvocationFailed, ModelOutputInvalid)


async def retry_async(
    operation: str,
    call: Callable[[], Awaitable[T]],
    attempts: int = 3,
    delay: float = 1.0,
    retry_on: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """
    Await ``call`` up to ``attempts`` times, sleeping ``delay`` seconds between tries.

    Errors outside ``retry_on`` propagate immediately. When every attempt
    fails, ModelOverloaded is raised with the last error as its cause.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")

    last_error: Optional[BaseException] = None
    for attempt in range(1, attempts + 1):
        try:
            return await call()
        except retry_on as e:
            last_error = e
            logger.warning("%s attempt %d/%d failed: %s", operation, attempt, attempts, e)
            if attempt < attempts:
                await sleep(delay)

    logger.error("%s failed after %d attempts", operation, attempts)
    raise ModelOverloaded(operation, attempts) from last_error
