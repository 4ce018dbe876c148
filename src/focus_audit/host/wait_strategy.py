"""Settle strategy for a driven page.

After every focus shift, viewport change and navigation the host must wait
for layout, animation and asynchronous focus moves to finish before the
next observation. Waiting is always bounded: exceeding the bound raises
``SettleTimeoutError`` instead of silently continuing.
"""

from typing import Optional, Tuple
import asyncio
import io
import logging

from PIL import Image
import numpy as np
from playwright.async_api import Page

from ..exceptions import SettleTimeoutError

logger = logging.getLogger(__name__)


class WaitStrategy:
    """Bounded settle waits for focus shifts and navigation."""

    def __init__(
        self,
        settle_delay: float = 0.3,
        settle_timeout: float = 5.0,
        network_idle_timeout: float = 5.0,
        visual_stability: bool = False,
        visual_stability_threshold: float = 0.01,
        stability_interval: float = 0.1,
    ):
        """Initialize wait strategy.

        Args:
            settle_delay: Seconds to wait after each focus shift.
            settle_timeout: Upper bound for one settle wait.
            network_idle_timeout: Seconds to wait for network idle after navigation.
            visual_stability: Also require two matching screenshots after a shift.
            visual_stability_threshold: Pixel difference ratio (0-1) considered stable.
            stability_interval: Seconds between the two stability screenshots.
        """
        self.settle_delay = settle_delay
        self.settle_timeout = settle_timeout
        self.network_idle_timeout = network_idle_timeout
        self.visual_stability = visual_stability
        self.visual_stability_threshold = visual_stability_threshold
        self.stability_interval = stability_interval

    async def settle(self, page: Page, operation: str = "shift_focus") -> None:
        """Wait for the page to settle after an interaction.

        Args:
            page: Playwright Page object.
            operation: Name of the interaction, used in the timeout error.

        Raises:
            SettleTimeoutError: If settling exceeds ``settle_timeout``.
        """
        try:
            await asyncio.wait_for(self._settle(page), timeout=self.settle_timeout)
        except asyncio.TimeoutError as e:
            raise SettleTimeoutError(
                f"page did not settle within {self.settle_timeout:.1f}s", operation=operation
            ) from e

    async def _settle(self, page: Page) -> None:
        if self.settle_delay:
            await asyncio.sleep(self.settle_delay)
        if not self.visual_stability:
            return
        while True:
            is_stable, diff_ratio = await self.wait_for_visual_stability(page)
            if is_stable:
                return
            logger.debug(f"Page still changing (pixel diff {diff_ratio:.4f}), waiting")

    async def wait_for_network_idle(self, page: Page) -> bool:
        """Wait until network requests subside after navigation.

        Args:
            page: Playwright Page object.

        Returns:
            True if network became idle, False on timeout. A busy network is
            not a host failure; the caller continues with the loaded DOM.
        """
        try:
            await page.wait_for_load_state("networkidle", timeout=int(self.network_idle_timeout * 1000))
            return True
        except Exception as e:
            logger.info(f"Network did not become idle: {e}")
            return False

    async def wait_for_visual_stability(self, page: Page) -> Tuple[bool, Optional[float]]:
        """Compare two screenshots taken ``stability_interval`` apart.

        Args:
            page: Playwright Page object.

        Returns:
            Tuple of (is_stable, pixel_difference_ratio).
        """
        screenshot1 = Image.open(io.BytesIO(await page.screenshot()))
        await asyncio.sleep(self.stability_interval)
        screenshot2 = Image.open(io.BytesIO(await page.screenshot()))

        diff_ratio = self._calculate_pixel_difference(screenshot1, screenshot2)
        return diff_ratio < self.visual_stability_threshold, diff_ratio

    def _calculate_pixel_difference(self, img1: Image.Image, img2: Image.Image) -> float:
        """Calculate pixel difference ratio between two images.

        Args:
            img1: First image.
            img2: Second image.

        Returns:
            Pixel difference ratio (0-1).
        """
        if img1.size != img2.size:
            img2 = img2.resize(img1.size, Image.Resampling.LANCZOS)

        arr1 = np.array(img1.convert("RGB"))
        arr2 = np.array(img2.convert("RGB"))

        diff = np.abs(arr1.astype(float) - arr2.astype(float))

        total_pixels = arr1.shape[0] * arr1.shape[1] * arr1.shape[2]
        changed_pixels = np.sum(diff > 0)
        return float(changed_pixels / total_pixels)
