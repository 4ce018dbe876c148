"""FocusHost: the contract between the traversal engine and a live page.

The engine never enumerates the tab order itself. It only asks what has
focus now, shifts focus, and observes the result. Every method is async
because a real host talks to a browser.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from ..schemas import Direction, LayoutMetrics, NodeSnapshot


class FocusHost(ABC):
    """One driven page session.

    Only one walk may be in flight against a host at a time. Implementations
    raise ``StaleNodeError`` when an observed element vanished and
    ``HostCommunicationError`` when the session cannot respond.
    """

    @abstractmethod
    async def reset(self) -> None:
        """Reload the page so focus starts again at the top of the document."""

    @abstractmethod
    async def get_active(self) -> NodeSnapshot:
        """Snapshot the element that currently has focus. Must not move focus."""

    @abstractmethod
    async def shift_focus(self, direction: Direction) -> None:
        """Move focus one stop and wait for the page to settle."""

    @abstractmethod
    async def get_viewport_meta(self) -> Optional[str]:
        """Content of the first ``meta[name=viewport]``, or None when absent."""

    @abstractmethod
    async def measure_counts(self, selector: str) -> int:
        """Number of elements matching a CSS selector."""

    @abstractmethod
    async def query(self, selector: str) -> List[NodeSnapshot]:
        """Snapshots of every element matching a CSS selector, in DOM order."""

    @abstractmethod
    async def activate(self) -> bool:
        """Press Enter on the focused element. True when the URL changed."""

    @abstractmethod
    async def get_viewport_size(self) -> Tuple[int, int]:
        """Current viewport as (width, height)."""

    @abstractmethod
    async def set_viewport_size(self, width: int, height: int) -> None:
        """Resize the viewport and wait for the page to settle."""

    @abstractmethod
    async def measure_layout(self) -> LayoutMetrics:
        """Document and viewport widths for overflow detection."""
