"""Touch target size (WCAG 2.5.5)."""

from ..schemas import NodeSnapshot, TouchTargetResult

DEFAULT_MIN_TARGET_SIZE = 44


class TouchTargetClassifier:
    """Pass iff both edges of the rendered box reach the minimum size."""

    def __init__(self, min_size: float = DEFAULT_MIN_TARGET_SIZE):
        self.min_size = min_size

    def classify(self, snapshot: NodeSnapshot) -> TouchTargetResult:
        width = snapshot.geometry.width
        height = snapshot.geometry.height
        passed = width >= self.min_size and height >= self.min_size

        result = TouchTargetResult(
            passed=passed, role=snapshot.role, width=width, height=height
        )
        if not passed:
            result.failures.append(
                f"{snapshot.geometry} is below {self.min_size:g}x{self.min_size:g}px"
            )
            result.evidence.append(f"{snapshot.describe()}: {snapshot.geometry}")
        return result
