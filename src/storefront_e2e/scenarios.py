#!/usr/bin/env python3
"""
Scenario Orchestrator
Named end-to-end flows over the store page objects. Each scenario starts on a
fresh page with cleared storage and either completes or raises at the first
broken invariant.
"""

import logging
import time
from typing import Awaitable, Callable, Dict, Iterable, List

from .core.config import StoreConfig
from .core.session import launch_session
from .data.products import PRODUCTS
from .data.sizes import SIZES
from .models import ScenarioResult
from .pages.store_page import StorePage

logger = logging.getLogger(__name__)

Scenario = Callable[[StorePage], Awaitable[None]]


async def full_cart_flow(app: StorePage):
    """Filter, add two products, raise a quantity, check the subtotal, clear, verify empty."""
    await app.goto()

    await app.filters.set_sizes_exactly(["XS", "ML"])
    filtered_count = await app.grid.wait_for_grid_stable()

    await app.filters.set_sizes_exactly([])
    await app.grid.wait_for_grid_stable()
    await app.grid.wait_for_count_change(filtered_count)

    await app.cart.expect_count_closed(0)

    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.cart.expect_count_closed(1)
    await app.grid.add_to_cart_by_name(PRODUCTS.BLACK_STRIPES)
    await app.cart.expect_count_closed(2)

    await app.cart.open()
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 1)
    await app.cart.click_plus(PRODUCTS.BLUE_TSHIRT, 2)
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 3)

    # Blue=3, Black=1
    await app.cart.expect_total_items_open(4)
    await app.cart.expect_subtotal_for_two_items(PRODUCTS.BLUE_TSHIRT, 3, PRODUCTS.BLACK_STRIPES, 1)

    await app.cart.clear_cart()
    await app.cart.expect_empty_state()
    await app.cart.expect_count_open(0)
    await app.cart.expect_count_closed(0)


async def cart_persists_after_reload(app: StorePage):
    await app.goto()
    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.grid.add_to_cart_by_name(PRODUCTS.BLACK_STRIPES)

    await app.cart.open()
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 1)
    await app.cart.expect_row_quantity(PRODUCTS.BLACK_STRIPES, 1)
    await app.cart.expect_total_items_open(2)
    await app.cart.close()

    await app.reload()

    await app.cart.expect_count_closed(2)
    await app.cart.open()
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 1)
    await app.cart.expect_row_quantity(PRODUCTS.BLACK_STRIPES, 1)
    await app.cart.expect_total_items_open(2)


async def empty_cart_state(app: StorePage):
    await app.goto()
    await app.cart.open()
    await app.cart.expect_empty_state()


async def rapid_filter_toggle(app: StorePage):
    await app.goto()
    await app.filters.set_sizes_exactly([SIZES[0]])
    await app.filters.set_sizes_exactly([SIZES[1]])
    await app.filters.set_sizes_exactly([SIZES[2]])
    await app.filters.set_sizes_exactly([SIZES[0], SIZES[2]])
    await app.filters.clear_all_sizes()

    await app.grid.wait_for_grid_stable()
    await app.grid.expect_products_found_matches_grid()


async def rapid_quantity_changes(app: StorePage):
    await app.goto()
    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.cart.open()

    await app.cart.click_plus(PRODUCTS.BLUE_TSHIRT, 5)
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 6)
    await app.cart.expect_total_items_open(6)


async def same_product_added_repeatedly(app: StorePage):
    await app.goto()
    for _ in range(3):
        await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)

    await app.cart.open()
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 3)
    await app.cart.expect_total_items_open(3)


async def subtotal_with_quantities(app: StorePage):
    await app.goto()
    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.grid.add_to_cart_by_name(PRODUCTS.BLACK_STRIPES)

    await app.cart.open()
    await app.cart.click_plus(PRODUCTS.BLUE_TSHIRT, 2)
    await app.cart.click_plus(PRODUCTS.BLACK_STRIPES, 1)

    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 3)
    await app.cart.expect_row_quantity(PRODUCTS.BLACK_STRIPES, 2)
    await app.cart.expect_subtotal_for_two_items(PRODUCTS.BLUE_TSHIRT, 3, PRODUCTS.BLACK_STRIPES, 2)
    await app.cart.expect_consistent()


async def badge_updates_on_remove(app: StorePage):
    await app.goto()
    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.grid.add_to_cart_by_name(PRODUCTS.BLACK_STRIPES)
    await app.cart.expect_count_closed(2)

    await app.cart.remove_product(PRODUCTS.BLACK_STRIPES)

    await app.cart.expect_count_closed(1)
    await app.cart.open()
    await app.cart.expect_total_items_open(1)
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 1)


async def quantity_decrement(app: StorePage):
    await app.goto()
    await app.grid.add_to_cart_by_name(PRODUCTS.BLUE_TSHIRT)
    await app.cart.open()

    await app.cart.click_plus(PRODUCTS.BLUE_TSHIRT, 2)
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 3)
    await app.cart.click_minus(PRODUCTS.BLUE_TSHIRT, 1)
    await app.cart.expect_row_quantity(PRODUCTS.BLUE_TSHIRT, 2)
    await app.cart.expect_total_items_open(2)


SCENARIOS: Dict[str, Scenario] = {
    'full_cart_flow': full_cart_flow,
    'cart_persists_after_reload': cart_persists_after_reload,
    'empty_cart_state': empty_cart_state,
    'rapid_filter_toggle': rapid_filter_toggle,
    'rapid_quantity_changes': rapid_quantity_changes,
    'same_product_added_repeatedly': same_product_added_repeatedly,
    'subtotal_with_quantities': subtotal_with_quantities,
    'badge_updates_on_remove': badge_updates_on_remove,
    'quantity_decrement': quantity_decrement,
}


async def run_scenario(name: str, config: StoreConfig = None) -> ScenarioResult:
    """Run one named scenario in its own browser session."""
    if name not in SCENARIOS:
        raise KeyError(f"Unknown scenario {name!r}; available: {', '.join(SCENARIOS)}")

    logger.info(f"SCENARIO: {name} starting")
    start = time.monotonic()
    try:
        async with launch_session(config) as session:
            await SCENARIOS[name](StorePage(session))
    except Exception as e:
        elapsed = time.monotonic() - start
        logger.error(f"SCENARIO: ❌ {name} failed after {elapsed:.1f}s: {e}")
        return ScenarioResult(name=name, passed=False, elapsed_s=elapsed, error=f"{type(e).__name__}: {e}")

    elapsed = time.monotonic() - start
    logger.info(f"SCENARIO: ✅ {name} passed in {elapsed:.1f}s")
    return ScenarioResult(name=name, passed=True, elapsed_s=elapsed)


async def run_scenarios(names: Iterable[str] = None, config: StoreConfig = None) -> List[ScenarioResult]:
    results = []
    for name in names or SCENARIOS:
        results.append(await run_scenario(name, config))
    return results
