"""Focus hosts: the live-page side of the traversal engine."""

from .base import FocusHost
from .wait_strategy import WaitStrategy
from .playwright_host import PlaywrightFocusHost
from .session import (
    BrowserSession,
    SessionManager,
    DeviceProfile,
    DEVICE_PROFILES,
    get_device_profile,
)

__all__ = [
    "FocusHost",
    "WaitStrategy",
    "PlaywrightFocusHost",
    "BrowserSession",
    "SessionManager",
    "DeviceProfile",
    "DEVICE_PROFILES",
    "get_device_profile",
]
