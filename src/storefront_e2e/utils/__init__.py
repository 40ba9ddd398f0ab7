# Utils package
from .money import parse_money, to_cents, cents_to_dollars, format_money
from .polling import poll_until, poll_until_stable
from .resilience import SelectorPolicy, classify_failure, perform_with_retry

__all__ = [
    'parse_money', 'to_cents', 'cents_to_dollars', 'format_money',
    'poll_until', 'poll_until_stable',
    'SelectorPolicy', 'classify_failure', 'perform_with_retry',
]
