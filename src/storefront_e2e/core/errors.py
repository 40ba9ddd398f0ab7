"""
Error taxonomy for the storefront suite.
Every failure surfaced to a scenario carries enough context (target, expected
vs actual, elapsed time) to diagnose it from the report alone.
"""

from typing import Any, Iterable, Optional


class StoreError(Exception):
    """Base class for all suite errors"""


class ParseError(StoreError):
    """UI text did not match the expected pattern"""

    def __init__(self, text: str, what: str = "value"):
        self.text = text
        self.what = what
        super().__init__(f'Could not parse {what} from: "{text}"')


class PollTimeoutError(StoreError, TimeoutError):
    """A poll deadline passed before the condition held (stably)"""

    def __init__(self, description: str, last_value: Any, elapsed_ms: float,
                 last_error: Optional[BaseException] = None):
        self.description = description
        self.last_value = last_value
        self.elapsed_ms = elapsed_ms
        self.last_error = last_error
        message = f"Timed out after {elapsed_ms:.0f}ms waiting for {description} (last value: {last_value!r})"
        if last_error is not None:
            message += f" (last error: {type(last_error).__name__}: {last_error})"
        super().__init__(message)


class ElementNotFoundError(StoreError):
    """A locator matched zero or several elements where exactly one was required"""

    def __init__(self, target: str, count: int = 0):
        self.target = target
        self.count = count
        if count == 0:
            message = f"{target} not found"
        else:
            message = f"{target} is ambiguous ({count} matches, expected 1)"
        super().__init__(message)


class RetryableInteractionError(StoreError):
    """Transient structural failure (detached element, torn-down context, obscured target)"""

    def __init__(self, target: str, cause: BaseException):
        self.target = target
        self.cause = cause
        super().__init__(f"Transient failure on {target}: {cause}")


class InteractionError(StoreError):
    """An interaction failed fatally or ran out of attempts"""

    def __init__(self, target: str, attempts: int, cause: Optional[BaseException] = None):
        self.target = target
        self.attempts = attempts
        self.cause = cause
        message = f"Interaction with {target} failed after {attempts} attempt(s)"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)


class SelectionMismatchError(StoreError):
    """Checked filters differ from the requested selection"""

    def __init__(self, expected: Iterable[str], actual: Iterable[str]):
        self.expected = set(expected)
        self.actual = set(actual)
        super().__init__(
            f"Size selection mismatch: expected {sorted(self.expected)}, got {sorted(self.actual)}"
        )


class CountMismatchError(StoreError):
    """A one-shot count assertion failed"""

    def __init__(self, what: str, expected: Any, actual: Any):
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what}: expected {expected!r}, got {actual!r}")
