"""Playwright implementation of the FocusHost contract.

All observations are made with a single ``page.evaluate`` call so that a
snapshot reflects one instant. Element identity is an integer stored as an
expando property on the DOM node; it never appears in the markup and dies
with the node.
"""

import logging
from functools import wraps
from typing import Any, Callable, Dict, List, Optional, Tuple

from playwright.async_api import Error as PlaywrightError, Page

from ..exceptions import HostCommunicationError, StaleNodeError
from ..schemas import Direction, Geometry, LayoutMetrics, NodeSnapshot, Role
from .base import FocusHost
from .wait_strategy import WaitStrategy

logger = logging.getLogger(__name__)

SNAPSHOT_ATTRIBUTES = [
    "tabindex",
    "href",
    "type",
    "id",
    "aria-label",
    "aria-expanded",
    "placeholder",
    "class",
    "name",
]

SNAPSHOT_STYLES = [
    "outline",
    "outline-width",
    "outline-style",
    "outline-color",
    "box-shadow",
    "border",
    "border-width",
    "border-style",
    "border-color",
    "font-size",
]

# Serialises one element. Expects ATTRS and STYLES in scope.
_SNAPSHOT_FN = """
function snap(el) {
    if (!el.__focusAuditId) {
        window.__focusAuditSeq = (window.__focusAuditSeq || 0) + 1;
        el.__focusAuditId = window.__focusAuditSeq;
    }
    const tag = (el.tagName || '').toLowerCase();
    const explicitRole = (el.getAttribute('role') || '').toLowerCase();
    const inputType = (el.getAttribute('type') || '').toLowerCase();
    let role = 'generic';
    if (tag === 'a' || explicitRole === 'link') role = 'link';
    else if (tag === 'button' || explicitRole === 'button' ||
             (tag === 'input' && ['button', 'submit', 'reset'].includes(inputType))) role = 'button';
    else if (['input', 'select', 'textarea'].includes(tag)) role = 'input';

    const style = window.getComputedStyle(el);
    const rect = el.getBoundingClientRect();
    const attributes = {};
    for (const name of ATTRS) attributes[name] = el.getAttribute(name);
    const visualStyle = {};
    for (const name of STYLES) visualStyle[name] = style.getPropertyValue(name) || '';

    return {
        identity: el.__focusAuditId,
        role: role,
        tag_name: tag,
        geometry: {width: rect.width, height: rect.height},
        attributes: attributes,
        visual_style: visualStyle,
        text: (el.innerText || '').trim(),
        displayed: style.display !== 'none' && style.visibility !== 'hidden' &&
                   (rect.width > 0 || rect.height > 0),
        enabled: !el.disabled,
    };
}
"""

_ACTIVE_JS = (
    "([ATTRS, STYLES]) => {"
    + _SNAPSHOT_FN
    + "return snap(document.activeElement || document.body); }"
)

_QUERY_JS = (
    "([selector, ATTRS, STYLES]) => {"
    + _SNAPSHOT_FN
    + "return Array.from(document.querySelectorAll(selector)).map(snap); }"
)

_VIEWPORT_META_JS = """
() => {
    const meta = document.querySelector("meta[name='viewport']");
    if (!meta) return null;
    return meta.getAttribute('content') || '';
}
"""

_LAYOUT_JS = """
() => ({
    viewport_width: window.innerWidth,
    viewport_height: window.innerHeight,
    document_width: document.documentElement.scrollWidth,
    client_width: document.documentElement.clientWidth,
})
"""

_STALE_MARKERS = (
    "Execution context was destroyed",
    "not attached",
    "detached",
    "Cannot find context",
)


def _host_call(operation: str) -> Callable:
    """Translate Playwright errors into the focus audit taxonomy."""
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except PlaywrightError as e:
                message = str(e)
                if any(marker in message for marker in _STALE_MARKERS):
                    raise StaleNodeError(f"{operation}: {message}") from e
                raise HostCommunicationError(message, operation=operation) from e

        return wrapper
    return decorator


def _to_snapshot(raw: Dict[str, Any]) -> NodeSnapshot:
    return NodeSnapshot(
        identity=raw["identity"],
        role=Role(raw.get("role", "generic")),
        tag_name=raw.get("tag_name", ""),
        geometry=Geometry(**raw.get("geometry", {})),
        attributes=raw.get("attributes", {}),
        visual_style=raw.get("visual_style", {}),
        text=raw.get("text", ""),
        displayed=bool(raw.get("displayed", True)),
        enabled=bool(raw.get("enabled", True)),
    )


class PlaywrightFocusHost(FocusHost):
    """FocusHost over one Playwright page."""

    def __init__(
        self,
        page: Page,
        url: Optional[str] = None,
        wait_strategy: Optional[WaitStrategy] = None,
        navigation_timeout_ms: int = 30000,
    ):
        """Initialize the host.

        Args:
            page: Playwright page owned by the caller's session.
            url: Page under audit; ``reset`` navigates here.
            wait_strategy: Settle strategy applied after every interaction.
            navigation_timeout_ms: Timeout for ``page.goto``.
        """
        self.page = page
        self.url = url
        self.wait_strategy = wait_strategy or WaitStrategy()
        self.navigation_timeout_ms = navigation_timeout_ms

    @_host_call("navigate")
    async def navigate(self, url: str) -> None:
        """Load ``url`` and wait for the network to go idle.

        Raises:
            HostCommunicationError: On navigation failure or an HTTP error status.
        """
        response = await self.page.goto(
            url, wait_until="domcontentloaded", timeout=self.navigation_timeout_ms
        )
        if response is None:
            raise HostCommunicationError("no response received", operation="navigate")
        if response.status >= 400:
            raise HostCommunicationError(
                f"HTTP {response.status}: {response.status_text}", operation="navigate"
            )
        self.url = url
        await self.wait_strategy.wait_for_network_idle(self.page)
        logger.info(f"Navigated to {url}")

    async def reset(self) -> None:
        if not self.url:
            raise HostCommunicationError("no URL to reload", operation="reset")
        await self.navigate(self.url)

    @_host_call("get_active")
    async def get_active(self) -> NodeSnapshot:
        raw = await self.page.evaluate(_ACTIVE_JS, [SNAPSHOT_ATTRIBUTES, SNAPSHOT_STYLES])
        return _to_snapshot(raw)

    @_host_call("shift_focus")
    async def shift_focus(self, direction: Direction) -> None:
        key = "Tab" if direction == Direction.FORWARD else "Shift+Tab"
        await self.page.keyboard.press(key)
        await self.wait_strategy.settle(self.page, operation="shift_focus")

    @_host_call("get_viewport_meta")
    async def get_viewport_meta(self) -> Optional[str]:
        return await self.page.evaluate(_VIEWPORT_META_JS)

    @_host_call("measure_counts")
    async def measure_counts(self, selector: str) -> int:
        return await self.page.locator(selector).count()

    @_host_call("query")
    async def query(self, selector: str) -> List[NodeSnapshot]:
        raws = await self.page.evaluate(
            _QUERY_JS, [selector, SNAPSHOT_ATTRIBUTES, SNAPSHOT_STYLES]
        )
        return [_to_snapshot(raw) for raw in raws]

    @_host_call("activate")
    async def activate(self) -> bool:
        before = self.page.url
        await self.page.keyboard.press("Enter")
        await self.wait_strategy.settle(self.page, operation="activate")
        await self.wait_strategy.wait_for_network_idle(self.page)
        return self.page.url != before

    @_host_call("get_viewport_size")
    async def get_viewport_size(self) -> Tuple[int, int]:
        size = self.page.viewport_size
        if size is None:
            size = await self.page.evaluate(
                "() => ({width: window.innerWidth, height: window.innerHeight})"
            )
        return int(size["width"]), int(size["height"])

    @_host_call("set_viewport_size")
    async def set_viewport_size(self, width: int, height: int) -> None:
        await self.page.set_viewport_size({"width": width, "height": height})
        await self.wait_strategy.settle(self.page, operation="set_viewport_size")

    @_host_call("measure_layout")
    async def measure_layout(self) -> LayoutMetrics:
        return LayoutMetrics(**await self.page.evaluate(_LAYOUT_JS))
