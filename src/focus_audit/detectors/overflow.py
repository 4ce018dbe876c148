"""Horizontal scrolling at the device width (WCAG 1.4.10)."""

from ..schemas import ClassifierResult, LayoutMetrics


class OverflowEvaluator:
    """Fails when the document is wider than the viewport beyond a tolerance."""

    def __init__(self, tolerance_px: int = 10):
        self.tolerance_px = tolerance_px

    def evaluate(self, metrics: LayoutMetrics) -> ClassifierResult:
        evidence = [
            f"Viewport width: {metrics.viewport_width}px, document width: {metrics.document_width}px"
        ]
        overflow = metrics.document_width - metrics.viewport_width
        if overflow > self.tolerance_px:
            return ClassifierResult(
                passed=False,
                failures=[f"content overflows by {overflow}px"],
                evidence=evidence,
            )
        return ClassifierResult(passed=True, evidence=evidence)
