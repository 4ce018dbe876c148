"""Orientation support (WCAG 1.3.4)."""

from ..schemas import OrientationResult

INTERACTIVE_SELECTOR = "a, button"


class OrientationComparator:
    """Pass iff interactive elements exist in both orientations.

    The counts need not be equal; layouts legitimately differ.
    """

    def compare(self, portrait_count: int, landscape_count: int) -> OrientationResult:
        result = OrientationResult(
            passed=portrait_count > 0 and landscape_count > 0,
            portrait_count=portrait_count,
            landscape_count=landscape_count,
            evidence=[f"Portrait: {portrait_count} elements, Landscape: {landscape_count} elements"],
        )
        if portrait_count == 0:
            result.failures.append("no interactive elements in portrait")
        if landscape_count == 0:
            result.failures.append("no interactive elements in landscape")
        return result
