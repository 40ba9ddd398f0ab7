"""
Stability Poller

Every read-after-write in the suite goes through here. A single read of
"target reached" is not enough under async re-rendering: the value can revert
on the next paint, so callers can require N consecutive identical matches.
"""

import asyncio
import logging
import time
from typing import Any, Awaitable, Callable, Optional, Tuple, Type

from playwright.async_api import Error as PlaywrightError

from ..core.errors import ElementNotFoundError, ParseError, PollTimeoutError

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_MS = 100

# Errors that mean "the UI is mid-update", not "the scenario is broken"
TRANSIENT_ERRORS: Tuple[Type[BaseException], ...] = (PlaywrightError, ParseError, ElementNotFoundError)


async def poll_until_stable(
    read_signal: Callable[[], Awaitable[Any]],
    predicate: Optional[Callable[[Any], bool]] = None,
    *,
    timeout_ms: int,
    required_matches: int = 2,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    description: str = "condition",
    transient: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
) -> Any:
    """
    Poll read_signal until the same accepted value is observed required_matches times in a row.

    Args:
        read_signal: async callable producing a comparable signature
        predicate: values failing it reset the counter to 0; None accepts any value
        timeout_ms: deadline for the whole poll
        required_matches: consecutive identical accepted observations needed
        interval_ms: sleep between reads
        description: used in the timeout message

    Returns:
        The settled value

    Raises:
        PollTimeoutError with the last value, last transient error and elapsed time
    """
    if required_matches < 1:
        raise ValueError("required_matches must be >= 1")

    start = time.monotonic()
    deadline = start + timeout_ms / 1000
    last_value: Any = None
    last_error: Optional[BaseException] = None
    signature: Any = None
    hits = 0

    while True:
        try:
            value = await read_signal()
        except transient as e:
            last_error = e
            hits = 0
            signature = None
            logger.debug(f"POLL: transient read error while waiting for {description}: {e}")
        else:
            last_value = value
            last_error = None
            if predicate is not None and not predicate(value):
                hits = 0
                signature = None
            elif hits > 0 and value == signature:
                hits += 1
            else:
                signature = value
                hits = 1

            if hits >= required_matches:
                return value

        now = time.monotonic()
        if now >= deadline:
            elapsed_ms = (now - start) * 1000
            logger.warning(f"POLL: gave up on {description} after {elapsed_ms:.0f}ms (last: {last_value!r})")
            raise PollTimeoutError(description, last_value, elapsed_ms, last_error)

        await asyncio.sleep(min(interval_ms / 1000, max(deadline - now, 0)))


async def poll_until(
    read_signal: Callable[[], Awaitable[Any]],
    predicate: Callable[[Any], bool] = bool,
    *,
    timeout_ms: int,
    interval_ms: int = DEFAULT_INTERVAL_MS,
    description: str = "condition",
    transient: Tuple[Type[BaseException], ...] = TRANSIENT_ERRORS,
) -> Any:
    """Single-match form for monotonic conditions (e.g. 'count reaches exactly 1')."""
    return await poll_until_stable(
        read_signal,
        predicate,
        timeout_ms=timeout_ms,
        required_matches=1,
        interval_ms=interval_ms,
        description=description,
        transient=transient,
    )
