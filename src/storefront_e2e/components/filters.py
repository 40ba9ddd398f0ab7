#!/usr/bin/env python3
"""
Size Filters
Drives the size checkbox group to an exact selection, one confirmed toggle at a time
"""

import logging
import re
from typing import Iterable, Set

from playwright.async_api import Locator

from ..core.errors import SelectionMismatchError
from ..core.session import StoreSession
from ..data.sizes import SIZES, validate_sizes
from ..utils.polling import poll_until
from ..utils.resilience import SelectorPolicy, perform_with_retry

logger = logging.getLogger(__name__)

CHECKBOX = 'input[type="checkbox"][data-testid="checkbox"]'


def _size_order(value: str) -> int:
    return SIZES.index(value) if value in SIZES else len(SIZES)


class Filters:
    def __init__(self, session: StoreSession):
        self.session = session
        self.page = session.page
        self.timeouts = session.timeouts

    def _all_inputs(self) -> Locator:
        return self.page.locator(CHECKBOX)

    def _input_by_value(self, value: str) -> Locator:
        return self.page.locator(f'{CHECKBOX}[value="{value}"]')

    def _label_policy(self, value: str) -> SelectorPolicy:
        # the input itself is visually hidden; clicks go to its label
        return SelectorPolicy(f'size "{value}" filter', [
            ("label wrapping input", lambda: self.page.locator(f'label:has({CHECKBOX}[value="{value}"])')),
            ("label text", lambda: self.page.locator("label").filter(
                has_text=re.compile(rf"^\s*{re.escape(value)}\s*$"))),
        ])

    async def _read_checked(self) -> Set[str]:
        checked = set()
        for box in await self._all_inputs().all():
            if await box.is_checked(timeout=self.timeouts.read):
                checked.add(await box.get_attribute("value", timeout=self.timeouts.read))
        return checked

    async def get_selected_sizes(self) -> Set[str]:
        """Currently checked size values, e.g. {"XS", "ML"}"""
        await poll_until(
            self._all_inputs().count,
            lambda n: n > 0,
            timeout_ms=self.timeouts.poll_short,
            interval_ms=self.timeouts.poll_interval,
            description="size filter checkboxes to be present",
        )
        return await poll_until(
            self._read_checked,
            lambda _: True,
            timeout_ms=self.timeouts.poll_short,
            interval_ms=self.timeouts.poll_interval,
            description="size filter state to be readable",
        )

    async def _set_one(self, value: str, should_be_checked: bool):
        """Toggle one size to the target state, retrying detach/re-render failures."""
        box = self._input_by_value(value)
        await poll_until(
            box.count,
            lambda n: n == 1,
            timeout_ms=self.timeouts.poll_short,
            interval_ms=self.timeouts.poll_interval,
            description=f'size "{value}" checkbox to exist',
        )

        async def toggle(label: Locator):
            # a previous attempt may have landed before failing
            if await box.is_checked(timeout=self.timeouts.read) == should_be_checked:
                return
            await label.scroll_into_view_if_needed()
            await label.click(timeout=self.timeouts.click)
            await poll_until(
                lambda: box.is_checked(timeout=self.timeouts.read),
                lambda checked: checked == should_be_checked,
                timeout_ms=self.timeouts.poll_short,
                interval_ms=self.timeouts.poll_interval,
                description=f'size "{value}" to be {"checked" if should_be_checked else "unchecked"}',
            )

        await perform_with_retry(
            self._label_policy(value).resolve,
            toggle,
            target=f'size "{value}" filter',
            backoff_ms=self.timeouts.short,
        )

    async def set_sizes_exactly(self, desired: Iterable[str]):
        """Strongest API: set sizes to exactly this selection (unchecks extras, checks missing)."""
        desired_set = validate_sizes(desired)
        current = await self.get_selected_sizes()
        logger.info(f"FILTERS: {sorted(current, key=_size_order)} -> {sorted(desired_set, key=_size_order)}")

        for value in sorted(current - desired_set, key=_size_order):
            await self._set_one(value, False)

        for value in sorted(desired_set - current, key=_size_order):
            await self._set_one(value, True)

        actual = await self.get_selected_sizes()
        if actual != desired_set:
            raise SelectionMismatchError(desired_set, actual)
        logger.info(f"FILTERS: ✅ selection is {sorted(actual, key=_size_order)}")

    async def clear_all_sizes(self):
        await self.set_sizes_exactly(set())
