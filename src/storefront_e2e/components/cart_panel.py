#!/usr/bin/env python3
"""
Cart Panel
Open/close state machine over the floating cart, per-line quantity and price
reads, and the aggregate checks (item counts, subtotal, empty state).
Line data is only observable while open; the closed badge only while closed.
"""

import logging
import re
from typing import List, Optional

from playwright.async_api import Locator

from ..core.config import ZeroBadgePolicy
from ..core.errors import ElementNotFoundError, ParseError
from ..core.session import StoreSession
from ..models import CartLine, CartSnapshot
from ..utils.money import format_money, parse_money, to_cents
from ..utils.polling import poll_until
from ..utils.resilience import SelectorPolicy, perform_with_retry

logger = logging.getLogger(__name__)

CLOSED_BADGE = '[title="Products in cart quantity"]'
OPEN_HEADER_BADGE = '.sc-1h98xa9-5:has-text("Cart") .VLMSP'
CART_ROW = "div.sc-11uohgb-0"
REMOVE_BUTTON = 'button[title="remove product from cart"]'

QUANTITY_PATTERN = re.compile(r"Quantity:\s*(\d+)", re.IGNORECASE)
PRICE_PATTERN = re.compile(r"\$\s*[\d,]*\.?\d+")
PRICE_ONLY = re.compile(r"^\s*\$\s*[\d,]*\.?\d+\s*$")


def _parse_count(text: str, what: str) -> int:
    cleaned = (text or "").strip()
    if not cleaned.isdigit():
        raise ParseError(text, what=what)
    return int(cleaned)


class CartPanel:
    def __init__(self, session: StoreSession):
        self.session = session
        self.page = session.page
        self.timeouts = session.timeouts
        self.zero_badge_policy = session.zero_badge_policy

    # --------- LOCATORS ---------

    def _toggle_policy(self) -> SelectorPolicy:
        # round button bottom-right, always present while closed
        return SelectorPolicy("cart toggle", [
            ("styled toggle", lambda: self.page.locator("div.sc-1h98xa9-1 button.sc-1h98xa9-0")),
            ("button holding the badge", lambda: self.page.locator(f"button:has({CLOSED_BADGE})")),
        ])

    def _close_button(self) -> Locator:
        # only present when the panel is open
        return self.page.get_by_role("button", name="X", exact=True)

    def _closed_badge(self) -> Locator:
        return self.page.locator(CLOSED_BADGE)

    def _open_header_badge(self) -> Locator:
        return self.page.locator(OPEN_HEADER_BADGE)

    def _row_policy(self, product_name: str) -> SelectorPolicy:
        return SelectorPolicy(f'cart row "{product_name}"', [
            ("image alt", lambda: self.page.locator(CART_ROW).filter(
                has=self.page.locator(f'img[alt="{product_name}"]'))),
            ("title text", lambda: self.page.locator(CART_ROW).filter(
                has=self.page.get_by_text(product_name, exact=True))),
        ])

    def _remove_controls(self) -> Locator:
        return self.page.locator(REMOVE_BUTTON)

    def _subtotal_policy(self) -> SelectorPolicy:
        return SelectorPolicy("cart subtotal", [
            ("styled subtotal", lambda: self.page.locator("p.sc-1h98xa9-9")),
            ("last price in panel", lambda: self.page.get_by_text(PRICE_ONLY).last),
        ])

    async def _row_button(self, product_name: str, label: str) -> Locator:
        row = await self._row_policy(product_name).resolve()
        return row.get_by_role("button", name=label, exact=True)

    async def _click(self, locator: Locator):
        await locator.scroll_into_view_if_needed()
        await locator.click(timeout=self.timeouts.click)

    # --------- OPEN / CLOSE ---------

    async def is_open(self) -> bool:
        return await self._close_button().count() > 0

    async def open(self):
        if await self.is_open():
            return
        await perform_with_retry(self._toggle_policy().resolve, self._click,
                                 target="cart toggle", backoff_ms=self.timeouts.short)
        await poll_until(self.is_open, timeout_ms=self.timeouts.poll_short,
                         interval_ms=self.timeouts.poll_interval, description="cart panel to open")
        logger.info("CART: panel opened")

    async def close(self):
        if not await self.is_open():
            return
        await perform_with_retry(self._close_button, self._click,
                                 target="cart close button", backoff_ms=self.timeouts.short)
        await poll_until(self.is_open, lambda is_open: not is_open, timeout_ms=self.timeouts.poll_short,
                         interval_ms=self.timeouts.poll_interval, description="cart panel to close")
        logger.info("CART: panel closed")

    # --------- COUNTS ---------

    async def _read_closed_count(self) -> int:
        badge = self._closed_badge()
        count = await badge.count()
        if count != 1:
            raise ElementNotFoundError("closed cart badge", count)
        return _parse_count(await badge.inner_text(timeout=self.timeouts.read), "closed cart badge")

    async def _read_open_badge(self) -> Optional[int]:
        """Header badge value, or None when the badge is not rendered"""
        badge = self._open_header_badge()
        if await badge.count() == 0:
            return None
        text = (await badge.first.inner_text(timeout=self.timeouts.read)).strip()
        return _parse_count(text or "0", "open cart badge")

    async def get_count_closed(self) -> int:
        await self.close()
        return await poll_until(self._read_closed_count, lambda _: True,
                                timeout_ms=self.timeouts.poll_short,
                                interval_ms=self.timeouts.poll_interval,
                                description="closed cart badge to be readable")

    async def get_count_open(self) -> int:
        """Open header count; an absent badge reads as 0"""
        await self.open()
        return await self._read_open_badge() or 0

    async def expect_count_closed(self, count: int):
        await self.close()
        await poll_until(self._read_closed_count, lambda actual: actual == count,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=f"closed cart badge to read {count}")

    async def expect_count_open(self, count: int):
        await self.open()
        if count == 0 and self.zero_badge_policy == ZeroBadgePolicy.HIDDEN:
            predicate = lambda actual: actual is None
            description = "open cart badge to be hidden (0 items)"
        else:
            predicate = lambda actual: actual == count
            description = f"open cart badge to read {count}"
        await poll_until(self._read_open_badge, predicate,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=description)

    async def expect_total_items_open(self, count: int):
        """Header badge and the sum of line quantities both equal count"""
        await self.expect_count_open(count)

        async def line_total() -> int:
            return sum(line.quantity for line in await self._read_lines())

        await poll_until(line_total, lambda total: total == count,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=f"cart line quantities to sum to {count}")

    # --------- LINES ---------

    async def _read_quantity(self, product_name: str) -> int:
        row = await self._row_policy(product_name).require_unique()
        text = await row.inner_text(timeout=self.timeouts.read)
        match = QUANTITY_PATTERN.search(text)
        if not match:
            raise ParseError(text, what=f'quantity in cart row "{product_name}"')
        return int(match.group(1))

    async def _read_unit_price(self, product_name: str) -> float:
        row = await self._row_policy(product_name).require_unique()
        text = await row.inner_text(timeout=self.timeouts.read)
        match = PRICE_PATTERN.search(text)
        if not match:
            raise ParseError(text, what=f'unit price in cart row "{product_name}"')
        return parse_money(match.group(0))

    async def _read_subtotal(self) -> float:
        subtotal = await self._subtotal_policy().require_unique()
        return parse_money(await subtotal.inner_text(timeout=self.timeouts.read))

    async def _read_lines(self) -> List[CartLine]:
        lines = []
        for row in await self.page.locator(CART_ROW).all():
            name = await row.locator("img").first.get_attribute("alt", timeout=self.timeouts.read)
            text = await row.inner_text(timeout=self.timeouts.read)
            if not name:
                raise ParseError(text, what="product name (img alt) in cart row")
            quantity = QUANTITY_PATTERN.search(text)
            price = PRICE_PATTERN.search(text)
            if not quantity or not price:
                raise ParseError(text, what=f'quantity/price in cart row "{name}"')
            lines.append(CartLine(name=name, quantity=int(quantity.group(1)),
                                  unit_price=parse_money(price.group(0))))
        return lines

    async def get_quantity(self, product_name: str) -> int:
        await self.open()
        return await self._read_quantity(product_name)

    async def expect_row_quantity(self, product_name: str, expected: int):
        await self.open()
        await poll_until(lambda: self._read_quantity(product_name),
                         lambda quantity: quantity == expected,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=f'"{product_name}" quantity to be {expected}')

    async def _row_quantity_or_none(self, product_name: str) -> Optional[int]:
        """Row quantity, or None once the row is gone"""
        if await (await self._row_policy(product_name).resolve_all()).count() == 0:
            return None
        return await self._read_quantity(product_name)

    async def _click_row_button(self, product_name: str, label: str, times: int):
        await self.open()
        for i in range(times):
            before = await self._read_quantity(product_name)

            async def click_once(button: Locator):
                # a previous attempt may have landed before failing
                if await self._row_quantity_or_none(product_name) != before:
                    return
                await self._click(button)
                await poll_until(lambda: self._row_quantity_or_none(product_name),
                                 lambda quantity: quantity != before,
                                 timeout_ms=self.timeouts.poll_short,
                                 interval_ms=self.timeouts.poll_interval,
                                 description=f'"{product_name}" quantity to move off {before} after "{label}"')

            # rows re-render after every click, so re-resolve each time
            await perform_with_retry(lambda: self._row_button(product_name, label), click_once,
                                     target=f'"{label}" for "{product_name}" (click {i + 1}/{times})',
                                     backoff_ms=self.timeouts.short)
        logger.info(f'CART: clicked "{label}" {times}x for "{product_name}"')

    async def click_plus(self, product_name: str, times: int = 1):
        await self._click_row_button(product_name, "+", times)

    async def click_minus(self, product_name: str, times: int = 1):
        await self._click_row_button(product_name, "-", times)

    async def remove_product(self, product_name: str):
        await self.open()
        policy = self._row_policy(product_name)

        async def locate_remove() -> Locator:
            return (await policy.resolve()).locator(REMOVE_BUTTON)

        await perform_with_retry(locate_remove, self._click,
                                 target=f'remove for "{product_name}"', backoff_ms=self.timeouts.short)

        async def row_count() -> int:
            return await (await policy.resolve_all()).count()

        await poll_until(row_count, lambda count: count == 0,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=f'cart row "{product_name}" to be removed')
        logger.info(f'CART: removed "{product_name}"')

    # --------- MONEY ---------

    async def get_unit_price(self, product_name: str) -> float:
        await self.open()
        return await self._read_unit_price(product_name)

    async def get_subtotal(self) -> float:
        await self.open()
        return await poll_until(self._read_subtotal, lambda _: True,
                                timeout_ms=self.timeouts.poll_short,
                                interval_ms=self.timeouts.poll_interval,
                                description="cart subtotal to be readable")

    async def _read_subtotal_cents(self) -> int:
        return to_cents(await self._read_subtotal())

    async def expect_subtotal_for_two_items(self, name_a: str, qty_a: int, name_b: str, qty_b: int):
        """Displayed subtotal == displayed unit prices x quantities, compared in cents."""
        price_a = await self.get_unit_price(name_a)
        price_b = await self.get_unit_price(name_b)
        expected = price_a * qty_a + price_b * qty_b
        expected_cents = to_cents(expected)

        logger.info(f"CART: expecting subtotal {format_money(expected)} "
                    f"({qty_a} x {format_money(price_a)} + {qty_b} x {format_money(price_b)})")
        await poll_until(self._read_subtotal_cents, lambda cents: cents == expected_cents,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description=(f'subtotal to be {expected_cents} cents ("{name_a}" {qty_a} x '
                                      f'{format_money(price_a)} + "{name_b}" {qty_b} x {format_money(price_b)})'))

    # --------- AGGREGATES ---------

    async def snapshot(self) -> CartSnapshot:
        await self.open()
        return CartSnapshot(
            lines=await self._read_lines(),
            subtotal=await self._read_subtotal(),
            count_open=await self._read_open_badge() or 0,
        )

    async def expect_consistent(self) -> CartSnapshot:
        """Subtotal == sum(unit price x quantity) and header count == sum(quantity), once settled."""
        await self.open()
        return await poll_until(self.snapshot, lambda snap: snap.is_consistent(),
                                timeout_ms=self.timeouts.poll_medium,
                                interval_ms=self.timeouts.poll_interval,
                                description="cart subtotal and item count to agree with its lines")

    async def clear_cart(self):
        await self.open()
        remaining = await self._remove_controls().count()
        logger.info(f"CART: clearing {remaining} line(s)")

        while remaining > 0:
            await perform_with_retry(lambda: self._remove_controls().first, self._click,
                                     target="first cart remove control", backoff_ms=self.timeouts.short)
            before = remaining
            remaining = await poll_until(self._remove_controls().count, lambda count: count < before,
                                         timeout_ms=self.timeouts.poll_medium,
                                         interval_ms=self.timeouts.poll_interval,
                                         description=f"remove controls to drop below {before}")

    async def expect_empty_state(self):
        """No lines, $0.00 subtotal, header count 0 and closed badge 0, all at once."""
        await self.open()
        await poll_until(self._remove_controls().count, lambda count: count == 0,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description="no cart remove controls")
        await poll_until(self._read_subtotal_cents, lambda cents: cents == 0,
                         timeout_ms=self.timeouts.poll_medium,
                         interval_ms=self.timeouts.poll_interval,
                         description="cart subtotal to be $0.00")
        await self.expect_count_open(0)
        await self.expect_count_closed(0)
        logger.info("CART: ✅ empty state verified")
