"""
Browser session handed explicitly to every page object.
No module-level page: each component only touches the session it was built with.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from playwright.async_api import Page, async_playwright

from .config import StoreConfig, Timeouts, ZeroBadgePolicy

logger = logging.getLogger(__name__)

# window.name survives reloads within the tab, so the guard lets a reload
# observe persisted cart state instead of wiping it again.
CLEAR_STORAGE_ONCE_SCRIPT = """
(() => {
    const marker = '__storefront_e2e_storage_cleared__';
    if (window.name === marker) return;
    try {
        window.localStorage.clear();
        window.sessionStorage.clear();
    } catch (e) {}
    window.name = marker;
})();
"""


class StoreSession:
    """Page handle plus the configuration the page objects need"""

    def __init__(self, page: Page, config: StoreConfig = None):
        self.page = page
        self.config = config or StoreConfig()

    @property
    def timeouts(self) -> Timeouts:
        return self.config.timeouts

    @property
    def zero_badge_policy(self) -> ZeroBadgePolicy:
        return self.config.zero_badge_policy

    async def clear_storage_before_navigation(self):
        """Register the storage-clearing init script; must run before the first goto."""
        await self.page.add_init_script(CLEAR_STORAGE_ONCE_SCRIPT)
        logger.info("SESSION: storage will be cleared before first navigation")


@asynccontextmanager
async def launch_session(config: StoreConfig = None) -> AsyncIterator[StoreSession]:
    """
    Launch Chromium with a fresh context and yield a StoreSession.
    Browser resources are always closed on exit.
    """
    config = config or StoreConfig()
    logger.info(f"SESSION: launching Chromium ({config!r})")

    async with async_playwright() as p:
        browser = await p.chromium.launch(headless=config.headless, slow_mo=config.slow_mo_ms)
        context = await browser.new_context()
        try:
            page = await context.new_page()
            page.set_default_timeout(config.timeouts.poll_long)
            session = StoreSession(page, config)
            await session.clear_storage_before_navigation()
            yield session
        finally:
            await context.close()
            await browser.close()
            logger.info("SESSION: browser closed")
