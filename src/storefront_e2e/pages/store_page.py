import logging

from ..components.cart_panel import CartPanel
from ..components.filters import Filters
from ..components.product_grid import ProductGrid
from ..core.session import StoreSession

logger = logging.getLogger(__name__)


class StorePage:
    """
    The storefront as one page object.
    Filters, grid and cart all share the session this page was built with.
    """

    def __init__(self, session: StoreSession):
        self.session = session
        self.page = session.page
        self.filters = Filters(session)
        self.grid = ProductGrid(session)
        self.cart = CartPanel(session)

    async def goto(self):
        url = self.session.config.base_url
        logger.info(f"STORE: navigating to {url}")
        await self.page.goto(url, wait_until="domcontentloaded")

    async def reload(self) -> int:
        """Reload and wait for the grid to settle; returns the settled product count."""
        logger.info("STORE: reloading page")
        await self.page.reload(wait_until="domcontentloaded")
        return await self.grid.wait_for_grid_stable()
