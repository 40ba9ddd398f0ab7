import pytest

from storefront_e2e.core.config import StoreConfig, Timeouts, ZeroBadgePolicy
from storefront_e2e.core.session import StoreSession
from storefront_e2e.pages.store_page import StorePage
from tests.fakes import FakePage, FakeStorefront

CATALOG = [
    {"name": "Blue T-Shirt", "price": 9.00, "sizes": {"XS", "M"}},
    {"name": "Black T-shirt with white stripes", "price": 10.90, "sizes": {"ML", "L"}},
    {"name": "Cropped Stay Groovy off white", "price": 10.90, "sizes": {"S", "XL"}},
    {"name": "Skater Black Sweatshirt", "price": 25.90, "sizes": {"XL", "XXL"}},
]

FAST_TIMEOUTS = Timeouts(
    short=1,
    click=50,
    read=50,
    poll_short=300,
    poll_medium=300,
    poll_long=300,
    grid_stable=300,
    product_visible=300,
    poll_interval=5,
)


@pytest.fixture
def store():
    return FakeStorefront([dict(p) for p in CATALOG])


@pytest.fixture
def config():
    return StoreConfig(base_url="http://store.test/", headless=True, slow_mo_ms=0,
                       zero_badge_policy=ZeroBadgePolicy.HIDDEN, timeouts=FAST_TIMEOUTS)


@pytest.fixture
def session(store, config):
    return StoreSession(FakePage(store), config)


@pytest.fixture
def app(session):
    return StorePage(session)
