from itertools import combinations

import pytest

from storefront_e2e.core.errors import InteractionError, PollTimeoutError, SelectionMismatchError
from storefront_e2e.data.sizes import SIZES
from tests.fakes import DETACHED


def size_clicks(store):
    return [c for c in store.clicks if c.startswith("size:")]


async def test_starts_with_nothing_selected(app):
    assert await app.filters.get_selected_sizes() == set()


async def test_set_sizes_exactly(app, store):
    await app.filters.set_sizes_exactly(["XS", "ML"])
    assert store.checked == {"XS", "ML"}
    assert await app.filters.get_selected_sizes() == {"XS", "ML"}


async def test_unchecks_extras_before_checking_missing(app, store):
    store.checked = {"S", "M"}
    await app.filters.set_sizes_exactly({"M", "L"})
    assert store.checked == {"M", "L"}
    assert size_clicks(store) == ["size:S", "size:L"]


async def test_is_idempotent(app, store):
    await app.filters.set_sizes_exactly({"XS", "XL"})
    clicks = len(store.clicks)
    await app.filters.set_sizes_exactly({"XS", "XL"})
    assert len(store.clicks) == clicks


async def test_empty_selection_clears_all(app, store):
    store.checked = {"XS", "S", "XXL"}
    await app.filters.clear_all_sizes()
    assert store.checked == set()


async def test_every_subset_round_trips(app):
    subsets = [set(c) for n in range(len(SIZES) + 1) for c in combinations(SIZES, n)]
    for desired in subsets:
        await app.filters.set_sizes_exactly(desired)
        assert await app.filters.get_selected_sizes() == desired


async def test_rejects_unknown_sizes(app, store):
    with pytest.raises(ValueError):
        await app.filters.set_sizes_exactly(["XS", "XXXL"])
    assert store.clicks == []


async def test_retries_detached_label(app, store):
    store.click_failures = [DETACHED, DETACHED]
    await app.filters.set_sizes_exactly(["M"])
    assert store.checked == {"M"}
    assert size_clicks(store) == ["size:M"] * 3


async def test_landed_click_is_not_repeated(app, store):
    # the click toggles the box, then the driver reports the label detached
    store.late_click_failures = [DETACHED]
    await app.filters.set_sizes_exactly(["XS"])
    assert store.checked == {"XS"}
    assert size_clicks(store) == ["size:XS"]


async def test_unconfirmed_toggle_times_out(app, store):
    store.ignore_clicks_on = {"size:L"}
    with pytest.raises(PollTimeoutError) as exc_info:
        await app.filters.set_sizes_exactly(["L"])
    assert 'size "L"' in str(exc_info.value)


async def test_fatal_click_error(app, store):
    store.click_failures = ["Target page, context or browser has been closed"]
    with pytest.raises(InteractionError) as exc_info:
        await app.filters.set_sizes_exactly(["S"])
    assert exc_info.value.attempts == 1


async def test_final_selection_is_verified(app, store, monkeypatch):
    original = store.toggle_size

    def sticky_toggle(size):
        original(size)
        store.checked.add("XXL")

    monkeypatch.setattr(store, "toggle_size", sticky_toggle)
    with pytest.raises(SelectionMismatchError) as exc_info:
        await app.filters.set_sizes_exactly(["XS"])
    assert exc_info.value.actual == {"XS", "XXL"}
    assert exc_info.value.expected == {"XS"}
