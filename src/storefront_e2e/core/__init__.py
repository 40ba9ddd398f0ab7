# Core package
from .config import StoreConfig, Timeouts, ZeroBadgePolicy
from .errors import (
    StoreError,
    ParseError,
    PollTimeoutError,
    ElementNotFoundError,
    RetryableInteractionError,
    InteractionError,
    SelectionMismatchError,
    CountMismatchError,
)

__all__ = [
    'StoreConfig', 'Timeouts', 'ZeroBadgePolicy',
    'StoreError', 'ParseError', 'PollTimeoutError', 'ElementNotFoundError',
    'RetryableInteractionError', 'InteractionError', 'SelectionMismatchError',
    'CountMismatchError',
]
