"""Mobile navigation menu toggle completeness."""

from typing import Optional

from ..schemas import MenuResult, NodeSnapshot
from .touch_target import DEFAULT_MIN_TARGET_SIZE

MENU_SELECTOR = (
    "button[aria-label*='menu'], [class*='hamburger'], [class*='menu-toggle']"
)


class MenuCompletenessClassifier:
    """Checks the first menu toggle candidate for name, state and size."""

    def __init__(self, min_size: float = DEFAULT_MIN_TARGET_SIZE):
        self.min_size = min_size

    def classify(self, candidate: Optional[NodeSnapshot]) -> MenuResult:
        """Classify the menu toggle.

        Args:
            candidate: First element matching MENU_SELECTOR, or None.

        Returns:
            MenuResult. ``found`` is False when there was no candidate;
            otherwise ``missing`` names each absent condition.
        """
        if candidate is None:
            return MenuResult(
                passed=False,
                found=False,
                evidence=["No mobile menu toggle found"],
            )

        missing = []
        if not ((candidate.attr("aria-label") or "").strip() or candidate.text.strip()):
            missing.append("accessible name")
        if candidate.attr("aria-expanded") is None:
            missing.append("aria-expanded")
        geometry = candidate.geometry
        if geometry.width < self.min_size or geometry.height < self.min_size:
            missing.append("touch size")

        evidence = [candidate.describe()]
        if "touch size" in missing:
            evidence.append(f"Size: {geometry}")
        return MenuResult(
            passed=not missing,
            found=True,
            missing=missing,
            failures=[f"missing {name}" for name in missing],
            evidence=evidence,
        )
