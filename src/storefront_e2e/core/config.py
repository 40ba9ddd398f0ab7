
import os
from enum import Enum
from dotenv import load_dotenv
from pydantic import BaseModel

# Load environment variables
load_dotenv()

DEFAULT_BASE_URL = "https://automation-interview.vercel.app/"


class ZeroBadgePolicy(str, Enum):
    """How the open cart header shows an empty cart"""
    HIDDEN = "hidden"      # badge element is removed at 0 items
    RENDERED = "rendered"  # badge element stays and reads "0"


class Timeouts(BaseModel):
    """Timeout table for the whole suite, all values in milliseconds"""
    short: int = 150             # retry backoff
    click: int = 3000            # single click action
    read: int = 1000             # single text/attribute read inside a poll
    poll_short: int = 5000
    poll_medium: int = 8000
    poll_long: int = 15000
    grid_stable: int = 15000
    product_visible: int = 15000
    poll_interval: int = 100

    def scaled(self, factor: float) -> "Timeouts":
        """Stretch every deadline by factor; the poll interval and backoff stay put."""
        if factor == 1:
            return self
        values = {
            name: int(value * factor)
            for name, value in self.model_dump().items()
            if name not in ("short", "poll_interval")
        }
        return self.model_copy(update=values)


class StoreConfig:
    """
    Central configuration for the storefront suite.
    Reads environment variables (optionally from .env) with sane defaults.
    """

    def __init__(self, base_url: str = None, headless: bool = None, slow_mo_ms: int = None,
                 zero_badge_policy: ZeroBadgePolicy = None, timeouts: Timeouts = None):
        self.base_url = base_url or self.get_base_url()
        self.headless = self.get_headless() if headless is None else headless
        self.slow_mo_ms = self.get_slow_mo_ms() if slow_mo_ms is None else slow_mo_ms
        self.zero_badge_policy = zero_badge_policy or self.get_zero_badge_policy()
        self.timeouts = timeouts or Timeouts().scaled(self.get_timeout_scale())

    @staticmethod
    def get_base_url() -> str:
        return os.getenv("STORE_BASE_URL", DEFAULT_BASE_URL)

    @staticmethod
    def get_headless() -> bool:
        return os.getenv("STORE_HEADLESS", "true").strip().lower() not in ("0", "false", "no")

    @staticmethod
    def get_slow_mo_ms() -> int:
        return int(os.getenv("STORE_SLOW_MO_MS", "0"))

    @staticmethod
    def get_zero_badge_policy() -> ZeroBadgePolicy:
        return ZeroBadgePolicy(os.getenv("STORE_ZERO_BADGE_POLICY", ZeroBadgePolicy.HIDDEN.value).lower())

    @staticmethod
    def get_timeout_scale() -> float:
        return float(os.getenv("STORE_TIMEOUT_SCALE", "1"))

    def __repr__(self):
        return (f"StoreConfig(base_url={self.base_url!r}, headless={self.headless}, "
                f"zero_badge_policy={self.zero_badge_policy.value})")
