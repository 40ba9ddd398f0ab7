import pytest

from storefront_e2e.core.errors import ParseError, PollTimeoutError
from storefront_e2e.utils.polling import poll_until, poll_until_stable


def reader(values):
    """Async reader that replays values (raising exceptions), then repeats the last one."""
    calls = {"n": 0}

    async def read():
        index = min(calls["n"], len(values) - 1)
        calls["n"] += 1
        value = values[index]
        if isinstance(value, BaseException):
            raise value
        return value

    return read, calls


async def test_stable_needs_two_consecutive_matches():
    read, calls = reader([1, 2, 2])
    assert await poll_until_stable(read, timeout_ms=500, interval_ms=1) == 2
    assert calls["n"] == 3


async def test_predicate_failure_resets_counter():
    read, calls = reader([(3, 2), (3, 3), (3, 2), (3, 3), (3, 3)])
    value = await poll_until_stable(read, lambda pair: pair[0] == pair[1], timeout_ms=500, interval_ms=1)
    assert value == (3, 3)
    assert calls["n"] == 5


async def test_transient_error_resets_counter():
    read, calls = reader([5, ParseError("", "count"), 5, 5])
    assert await poll_until_stable(read, timeout_ms=500, interval_ms=1) == 5
    assert calls["n"] == 4


async def test_timeout_carries_last_value_and_elapsed():
    counter = {"n": 0}

    async def flicker():
        counter["n"] += 1
        return counter["n"]

    with pytest.raises(PollTimeoutError) as exc_info:
        await poll_until_stable(flicker, timeout_ms=30, interval_ms=1, description="flicker to settle")

    error = exc_info.value
    assert isinstance(error, TimeoutError)
    assert error.last_value == counter["n"]
    assert error.elapsed_ms >= 30
    assert "flicker to settle" in str(error)


async def test_timeout_reports_last_transient_error():
    read, _ = reader([ParseError("N/A", "quantity")])
    with pytest.raises(PollTimeoutError) as exc_info:
        await poll_until(read, timeout_ms=20, interval_ms=1)
    assert isinstance(exc_info.value.last_error, ParseError)
    assert "N/A" in str(exc_info.value)


async def test_poll_until_matches_once():
    read, calls = reader([0, 0, 1])
    assert await poll_until(read, lambda n: n == 1, timeout_ms=500, interval_ms=1) == 1
    assert calls["n"] == 3


async def test_non_transient_errors_propagate():
    read, calls = reader([KeyError("boom")])
    with pytest.raises(KeyError):
        await poll_until(read, timeout_ms=500, interval_ms=1)
    assert calls["n"] == 1


async def test_required_matches_must_be_positive():
    read, _ = reader([1])
    with pytest.raises(ValueError):
        await poll_until_stable(read, timeout_ms=10, required_matches=0)
