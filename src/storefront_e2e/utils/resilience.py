"""
Element resilience: retrying interactions against elements the page may
destroy and re-create between locating and acting, plus a ranked selector
policy that keeps DOM churn out of the page objects.
"""

import asyncio
import inspect
import logging
import re
from typing import Any, Awaitable, Callable, List, Optional, Tuple, Union

from playwright.async_api import Error as PlaywrightError, Locator

from ..core.errors import ElementNotFoundError, InteractionError, RetryableInteractionError

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 6
DEFAULT_BACKOFF_MS = 150

RETRYABLE_PATTERN = re.compile(
    r"detached|not attached|Execution context was destroyed|intercepts pointer events",
    re.IGNORECASE,
)

LocateFn = Callable[[], Union[Locator, Awaitable[Locator]]]


def classify_failure(error: BaseException, target: str = "element") -> Optional[RetryableInteractionError]:
    """Return a RetryableInteractionError for transient structural failures, None for fatal ones."""
    if isinstance(error, PlaywrightError) and RETRYABLE_PATTERN.search(str(error)):
        return RetryableInteractionError(target, error)
    return None


async def perform_with_retry(
    locate: LocateFn,
    action: Callable[[Locator], Awaitable[Any]],
    *,
    target: str,
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    backoff_ms: int = DEFAULT_BACKOFF_MS,
) -> Any:
    """
    Run action against a freshly located element, retrying transient failures.

    The element is re-resolved from scratch on every attempt; handles from a
    previous attempt are never reused.

    Raises:
        InteractionError: fatal driver failure, or max_attempts exhausted
    """
    if max_attempts < 1:
        raise ValueError("max_attempts must be >= 1")
    last_retryable: Optional[RetryableInteractionError] = None

    for attempt in range(1, max_attempts + 1):
        try:
            # locate failures are classified like action failures
            locator = locate()
            if inspect.isawaitable(locator):
                locator = await locator
            result = await action(locator)
            if attempt > 1:
                logger.info(f"RETRY: {target} succeeded on attempt {attempt}/{max_attempts}")
            return result
        except PlaywrightError as e:
            retryable = classify_failure(e, target)
            if retryable is None:
                logger.error(f"RETRY: fatal failure on {target} (attempt {attempt}): {e}")
                raise InteractionError(target, attempt, e) from e
            last_retryable = retryable
            logger.warning(f"RETRY: {target} attempt {attempt}/{max_attempts} hit transient failure: {e}")

        if attempt < max_attempts:
            await asyncio.sleep(backoff_ms / 1000)

    raise InteractionError(target, max_attempts, last_retryable.cause) from last_retryable


class SelectorPolicy:
    """
    Ranked locator strategies for one logical target.

    Strategies are tried in order (role + accessible name, then a stable
    attribute, then structure/text); the first unique match wins.
    """

    def __init__(self, target: str, strategies: List[Tuple[str, Callable[[], Locator]]]):
        if not strategies:
            raise ValueError(f"SelectorPolicy for {target} needs at least one strategy")
        self.target = target
        self.strategies = strategies

    async def _counts(self) -> List[Tuple[str, Locator, int]]:
        seen = []
        for name, build in self.strategies:
            locator = build()
            seen.append((name, locator, await locator.count()))
        return seen

    async def resolve(self) -> Locator:
        """First strategy matching exactly one element; otherwise the top-ranked locator."""
        for name, build in self.strategies:
            locator = build()
            if await locator.count() == 1:
                logger.debug(f"SELECTOR: {self.target} resolved via {name}")
                return locator
        return self.strategies[0][1]()

    async def resolve_all(self) -> Locator:
        """First strategy matching anything; otherwise the top-ranked locator (count 0)."""
        for name, build in self.strategies:
            locator = build()
            if await locator.count() > 0:
                logger.debug(f"SELECTOR: {self.target} matched via {name}")
                return locator
        return self.strategies[0][1]()

    async def require_unique(self) -> Locator:
        seen = await self._counts()
        for name, locator, count in seen:
            if count == 1:
                logger.debug(f"SELECTOR: {self.target} resolved via {name}")
                return locator
        worst = max(count for _, _, count in seen)
        logger.debug(f"SELECTOR: {self.target} unresolved: " + ", ".join(f"{n}={c}" for n, _, c in seen))
        raise ElementNotFoundError(self.target, worst)
