#!/usr/bin/env python3
"""
Product Grid
Reads the "N Product(s) found" label and the rendered cards, and only lets
dependent actions proceed once both agree and stay agreed.
"""

import logging
import re
from typing import Optional, Tuple

from playwright.async_api import Locator

from ..core.errors import CountMismatchError, ElementNotFoundError, ParseError
from ..core.session import StoreSession
from ..utils.polling import poll_until, poll_until_stable
from ..utils.resilience import SelectorPolicy, perform_with_retry
from .cart_panel import CLOSED_BADGE, OPEN_HEADER_BADGE

logger = logging.getLogger(__name__)

CARD = 'div[tabindex="1"]'
FOUND_LABEL = re.compile(r"Product\(s\) found", re.IGNORECASE)
FOUND_COUNT = re.compile(r"(\d+)\s*Product\(s\)\s*found", re.IGNORECASE)
ADD_TO_CART = re.compile(r"add to cart", re.IGNORECASE)
ADD_TO_CART_EXACT = re.compile(r"^Add to cart$", re.IGNORECASE)


class ProductGrid:
    def __init__(self, session: StoreSession):
        self.session = session
        self.page = session.page
        self.timeouts = session.timeouts

    def _found_label(self) -> Locator:
        return self.page.get_by_text(FOUND_LABEL)

    def _product_cards(self) -> Locator:
        return self.page.locator(CARD).filter(
            has=self.page.get_by_role("button", name=ADD_TO_CART)
        )

    def _card_policy(self, product_name: str) -> SelectorPolicy:
        return SelectorPolicy(f'product card "{product_name}"', [
            ("alt attribute", lambda: self.page.locator(CARD).filter(
                has=self.page.locator(f'div[alt="{product_name}"]'))),
            ("title text", lambda: self._product_cards().filter(
                has=self.page.get_by_text(product_name, exact=True))),
        ])

    async def visible_product_count(self) -> int:
        return await self._product_cards().count()

    async def products_found_count(self) -> int:
        """N from the "N Product(s) found" label"""
        label = self._found_label()
        if await label.count() == 0:
            raise ElementNotFoundError('"Product(s) found" label')
        text = (await label.first.inner_text(timeout=self.timeouts.read)).strip()
        match = FOUND_COUNT.search(text)
        if not match:
            raise ParseError(text, what="products-found count")
        return int(match.group(1))

    async def _grid_signal(self) -> Tuple[int, int]:
        return await self.products_found_count(), await self.visible_product_count()

    async def expect_products_found_matches_grid(self):
        found, visible = await self._grid_signal()
        if found != visible:
            raise CountMismatchError('"Product(s) found" label vs rendered cards', found, visible)

    async def wait_for_grid_stable(self, timeout_ms: Optional[int] = None) -> int:
        """Label count must equal grid count on two consecutive polls. Returns the settled count."""
        found, visible = await poll_until_stable(
            self._grid_signal,
            lambda pair: pair[0] == pair[1],
            timeout_ms=self.timeouts.grid_stable if timeout_ms is None else timeout_ms,
            required_matches=2,
            interval_ms=self.timeouts.poll_interval,
            description="grid to settle (found label == rendered cards)",
        )
        logger.info(f"GRID: settled at {visible} product(s)")
        return visible

    async def wait_for_count_change(self, previous: int, timeout_ms: Optional[int] = None) -> int:
        return await poll_until(
            self.visible_product_count,
            lambda count: count != previous,
            timeout_ms=self.timeouts.poll_long if timeout_ms is None else timeout_ms,
            interval_ms=self.timeouts.poll_interval,
            description=f"visible product count to change from {previous}",
        )

    async def wait_for_product_visible(self, product_name: str):
        await poll_until(
            self._card_policy(product_name).require_unique,
            lambda _: True,
            timeout_ms=self.timeouts.product_visible,
            interval_ms=self.timeouts.poll_interval,
            description=f'product "{product_name}" to appear in the grid (likely filtered out)',
        )

    async def _cart_total(self) -> Optional[int]:
        """Cart item count from whichever cart badge is rendered, None if neither is"""
        for selector in (CLOSED_BADGE, OPEN_HEADER_BADGE):
            badge = self.page.locator(selector)
            if await badge.count() == 1:
                text = (await badge.inner_text(timeout=self.timeouts.read)).strip()
                if text.isdigit():
                    return int(text)
        return None

    async def add_to_cart_by_name(self, product_name: str):
        await self.wait_for_grid_stable()
        await self.wait_for_product_visible(product_name)
        before = await self._cart_total()

        async def click_add(card: Locator):
            # a previous attempt may have landed before failing
            if before is not None and await self._cart_total() not in (None, before):
                return
            button = card.get_by_role("button", name=ADD_TO_CART_EXACT)
            await button.scroll_into_view_if_needed()
            await button.click(timeout=self.timeouts.click)

        logger.info(f'GRID: adding "{product_name}" to cart')
        await perform_with_retry(
            self._card_policy(product_name).resolve,
            click_add,
            target=f'"Add to cart" on "{product_name}"',
            backoff_ms=self.timeouts.short,
        )
