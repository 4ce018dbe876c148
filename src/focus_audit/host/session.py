"""Browser sessions with mobile device emulation.

Each session owns its own Playwright instance, browser, context and page,
so sessions for different devices can run concurrently with no shared
state. The focus cursor of a session is owned by exactly one walk at a
time.
"""

import uuid
import logging
from contextlib import asynccontextmanager
from typing import Dict, Optional

from pydantic import BaseModel, Field
from playwright.async_api import async_playwright, Browser, BrowserContext, Page, Playwright

from ..config import AuditConfig
from .playwright_host import PlaywrightFocusHost
from .wait_strategy import WaitStrategy

logger = logging.getLogger(__name__)

MOBILE_USER_AGENT = (
    "Mozilla/5.0 (iPhone; CPU iPhone OS 15_0 like Mac OS X) AppleWebKit/605.1.15 "
    "(KHTML, like Gecko) Version/15.0 Mobile/15E148 Safari/604.1"
)


class DeviceProfile(BaseModel):
    """Viewport and input characteristics of an emulated device (portrait)."""

    name: str
    width: int = Field(..., gt=0)
    height: int = Field(..., gt=0)
    pixel_ratio: float = 3.0
    user_agent: str = MOBILE_USER_AGENT
    has_touch: bool = True
    is_mobile: bool = True


DEVICE_PROFILES: Dict[str, DeviceProfile] = {
    "iPhone 15": DeviceProfile(name="iPhone 15", width=393, height=852),
    "Samsung Galaxy S21": DeviceProfile(name="Samsung Galaxy S21", width=360, height=800),
    "iPad": DeviceProfile(name="iPad", width=768, height=1024),
    "Desktop": DeviceProfile(
        name="Desktop",
        width=1920,
        height=1080,
        pixel_ratio=1.0,
        user_agent="FocusAudit/1.0 (Accessibility Audit Bot)",
        has_touch=False,
        is_mobile=False,
    ),
}


def get_device_profile(name: str) -> DeviceProfile:
    """Look up a device profile by name.

    Raises:
        KeyError: If the device is unknown, with the list of known names.
    """
    try:
        return DEVICE_PROFILES[name]
    except KeyError:
        raise KeyError(f"Unknown device '{name}'. Known devices: {', '.join(DEVICE_PROFILES)}")


class BrowserSession:
    """Isolated browser session for a single device audit."""

    def __init__(self, session_id: str, device: DeviceProfile, config: AuditConfig):
        self.session_id = session_id
        self.device = device
        self.config = config
        self.playwright: Optional[Playwright] = None
        self.browser: Optional[Browser] = None
        self.context: Optional[BrowserContext] = None
        self.page: Optional[Page] = None
        self.host: Optional[PlaywrightFocusHost] = None
        self._initialized = False

    async def initialize(self) -> None:
        """Initialize browser resources and the focus host."""
        if self._initialized:
            return

        self.playwright = await async_playwright().start()
        self.browser = await self.playwright.chromium.launch(headless=self.config.headless)
        self.context = await self.browser.new_context(
            viewport={"width": self.device.width, "height": self.device.height},
            device_scale_factor=self.device.pixel_ratio,
            is_mobile=self.device.is_mobile,
            has_touch=self.device.has_touch,
            user_agent=self.device.user_agent,
        )
        self.page = await self.context.new_page()
        self.host = PlaywrightFocusHost(
            self.page,
            wait_strategy=WaitStrategy(
                settle_delay=self.config.settle_delay_ms / 1000,
                settle_timeout=self.config.settle_timeout_s,
                visual_stability=self.config.visual_stability,
            ),
            navigation_timeout_ms=self.config.navigation_timeout_ms,
        )
        self._initialized = True
        logger.info(
            f"Session {self.session_id}: Browser initialized as {self.device.name} "
            f"({self.device.width}x{self.device.height})"
        )

    async def cleanup(self) -> None:
        """Cleanup browser resources."""
        errors = []
        if self.page:
            try:
                await self.page.close()
            except Exception as e:
                errors.append(f"page: {e}")
            self.page = None

        if self.context:
            try:
                await self.context.close()
            except Exception as e:
                errors.append(f"context: {e}")
            self.context = None

        if self.browser:
            try:
                await self.browser.close()
            except Exception as e:
                errors.append(f"browser: {e}")
            self.browser = None

        if self.playwright:
            try:
                await self.playwright.stop()
            except Exception as e:
                errors.append(f"playwright: {e}")
            self.playwright = None

        self.host = None
        self._initialized = False
        if errors:
            logger.warning(f"Session {self.session_id}: Cleanup errors: {errors}")
        else:
            logger.info(f"Session {self.session_id}: Cleaned up successfully")


class SessionManager:
    """Creates and tears down one browser session per device audit.

    There is no process-wide current session; callers hold the session they
    created and thread it through every call.
    """

    def __init__(self, config: AuditConfig):
        self.config = config
        self._sessions: Dict[str, BrowserSession] = {}

    def create_session(self, device: DeviceProfile) -> BrowserSession:
        session_id = str(uuid.uuid4())[:8]
        session = BrowserSession(session_id, device, self.config)
        self._sessions[session_id] = session
        logger.info(f"Created session: {session_id} ({device.name})")
        return session

    async def close_session(self, session_id: str) -> None:
        """Close and remove a session."""
        session = self._sessions.pop(session_id, None)
        if session:
            await session.cleanup()

    @asynccontextmanager
    async def session_context(self, device: DeviceProfile):
        """Context manager for automatic session lifecycle."""
        session = self.create_session(device)
        try:
            await session.initialize()
            yield session
        finally:
            await self.close_session(session.session_id)
