"""Text readability ratio (WCAG 1.4.4)."""

from typing import Iterable

from ..schemas import NodeSnapshot, ReadabilityResult
from .css import parse_length

TEXT_SELECTOR = "p, span, div"


class ReadabilityRatioCheck:
    """Tolerates a small fraction of text below the minimum font size."""

    def __init__(self, min_font_px: float = 14, tolerance: float = 0.10):
        self.min_font_px = min_font_px
        self.tolerance = tolerance

    def evaluate(self, snapshots: Iterable[NodeSnapshot]) -> ReadabilityResult:
        """Count small and readable text nodes.

        Only displayed nodes with text and a parseable font size take part.
        Passes iff ``small == 0`` or ``small < tolerance * good``.
        """
        small = 0
        good = 0
        examples = []
        for snapshot in snapshots:
            if not snapshot.displayed or not snapshot.text.strip():
                continue
            length = parse_length(snapshot.style("font-size"))
            size = length.to_px() if length is not None else None
            if size is None:
                continue
            if size < self.min_font_px:
                small += 1
                if len(examples) < 5:
                    examples.append(f"{size:g}px: {snapshot.describe()}")
            else:
                good += 1

        passed = small == 0 or small < self.tolerance * good
        result = ReadabilityResult(
            passed=passed,
            small_count=small,
            good_count=good,
            evidence=[f"{good} readable, {small} below {self.min_font_px:g}px"] + examples,
        )
        if not passed:
            result.failures.append(
                f"{small} text elements below {self.min_font_px:g}px"
            )
        return result
