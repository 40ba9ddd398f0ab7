"""
Storefront E2E
Resilient page objects and cart-invariant scenarios for the sample storefront
"""

from .core.config import StoreConfig, Timeouts, ZeroBadgePolicy
from .core.session import StoreSession, launch_session
from .pages.store_page import StorePage

__all__ = ['StoreConfig', 'Timeouts', 'ZeroBadgePolicy', 'StoreSession', 'launch_session', 'StorePage']
