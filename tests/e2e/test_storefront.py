"""
Browser scenarios against the live storefront.

    playwright install chromium
    pytest -m e2e
"""

import pytest

from storefront_e2e.core.config import StoreConfig
from storefront_e2e.core.session import launch_session
from storefront_e2e.pages.store_page import StorePage
from storefront_e2e.scenarios import SCENARIOS

pytestmark = pytest.mark.e2e


@pytest.mark.parametrize("name", sorted(SCENARIOS))
async def test_scenario(name):
    async with launch_session(StoreConfig()) as session:
        await SCENARIOS[name](StorePage(session))
